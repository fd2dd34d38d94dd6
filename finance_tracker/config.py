# finance_tracker/config.py
# Runtime configuration read from environment variables

import os

DATABASE_URL = os.getenv(
    "FINANCE_TRACKER_DATABASE_URL",
    "sqlite:///./finance_tracker.db"
)

# Auth
SECRET_KEY = os.getenv("FINANCE_TRACKER_SECRET_KEY", "dev-secret-change-in-production")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("FINANCE_TRACKER_TOKEN_EXPIRE_MINUTES", str(60 * 24 * 7)))

# HTTP
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "FINANCE_TRACKER_CORS_ORIGINS",
        "http://localhost:8081,http://127.0.0.1:8081,http://localhost:19006"
    ).split(",")
    if origin.strip()
]
HOST = os.getenv("FINANCE_TRACKER_HOST", "0.0.0.0")
PORT = int(os.getenv("FINANCE_TRACKER_PORT", "8000"))
LOG_LEVEL = os.getenv("FINANCE_TRACKER_LOG_LEVEL", "INFO").upper()

# Client
API_URL = os.getenv("FINANCE_TRACKER_API_URL", "http://127.0.0.1:8000")
API_TIMEOUT_SECONDS = 10

VERSION = "1.0.0"
