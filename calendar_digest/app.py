import os
import logging

from fastapi import FastAPI, Request, HTTPException
from dotenv import load_dotenv
from linebot.v3 import WebhookParser
from linebot.v3.exceptions import InvalidSignatureError

load_dotenv()

logger = logging.getLogger(__name__)

app = FastAPI(title="Calendar Digest")


def _parser() -> WebhookParser:
    secret = os.getenv("LINE_CHANNEL_SECRET", "")
    if not secret:
        raise HTTPException(status_code=500, detail="LINE_CHANNEL_SECRET not set")
    return WebhookParser(secret)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/webhook")
async def webhook(request: Request):
    parser = _parser()
    body = (await request.body()).decode("utf-8")
    signature = request.headers.get("x-line-signature", "")
    try:
        events = parser.parse(body, signature)
    except InvalidSignatureError:
        logger.warning("Rejected webhook with bad signature")
        raise HTTPException(status_code=400, detail="invalid signature")
    logger.info("Webhook received %s events", len(events))
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("calendar_digest.app:app", host="127.0.0.1", port=8000, reload=True)
