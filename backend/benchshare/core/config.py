import os
from dotenv import load_dotenv

# Load .env from the backend directory
load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

SECRET_KEY: str = os.getenv("SECRET_KEY", "benchshare-dev-secret-change-in-prod")
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "1440"))  # 24h

# Database — stored in backend/data/
BASE_DIR = os.path.dirname(os.path.abspath(__file__))
BACKEND_DIR = os.path.abspath(os.path.join(BASE_DIR, "..", ".."))

DATABASE_PATH: str = os.getenv(
    "DATABASE_PATH",
    os.path.join(BACKEND_DIR, "data", "benchshare.db"),
)

# Sessions
SESSION_COOKIE_NAME: str = os.getenv("SESSION_COOKIE_NAME", "benchshare_sid")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# A page whose preparation markup defines this is started by the harness itself
PAGE_INIT_MARKER: str = os.getenv("PAGE_INIT_MARKER", "function init()")

FEED_ENTRY_LIMIT: int = int(os.getenv("FEED_ENTRY_LIMIT", "50"))
