import logging
import time

from linebot.v3.messaging import (
    ApiClient,
    Configuration,
    MessagingApi,
    PushMessageRequest,
    TextMessage,
)

SLOW_REQUEST_SECONDS = 5.0

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())


class LineClient:
    def __init__(self, access_token: str, timeout: float = 10.0):
        self.configuration = Configuration(access_token=access_token)
        self.timeout = timeout

    def push_text(self, to: str, text: str) -> None:
        """Push one text message. API errors are raised, not swallowed."""
        start = time.time()
        with ApiClient(self.configuration) as api_client:
            MessagingApi(api_client).push_message(
                PushMessageRequest(to=to, messages=[TextMessage(text=text)]),
                _request_timeout=self.timeout,
            )
        elapsed = time.time() - start
        if elapsed > SLOW_REQUEST_SECONDS:
            logger.warning('Slow push request: %.2fs', elapsed)
