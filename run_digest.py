import os
import sys
from dotenv import load_dotenv

load_dotenv()

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from calendar_digest.job import main

if __name__ == "__main__":
    main()
