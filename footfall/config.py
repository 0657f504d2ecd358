"""
Application Configuration
=========================
Central config loaded from environment variables.
"""

import os
from zoneinfo import ZoneInfo

if os.environ.get("TESTING") == "True":
    DATABASE_URL = "sqlite:///./test_footfall.db"
else:
    DATABASE_URL = os.getenv("DATABASE_URL", "postgresql://footfall:footfall@db:5432/footfall")

# Handle Heroku/Railway style postgres:// URLs
if DATABASE_URL.startswith("postgres://"):
    DATABASE_URL = DATABASE_URL.replace("postgres://", "postgresql://", 1)

DB_CONNECT_RETRIES = int(os.getenv("DB_CONNECT_RETRIES", "5"))
DB_CONNECT_RETRY_DELAY = int(os.getenv("DB_CONNECT_RETRY_DELAY", "5"))

CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:8000").split(",")

# Store
STORE_NAME = os.getenv("STORE_NAME", "Sri Shabari Jewellery")
STORE_TIMEZONE = ZoneInfo(os.getenv("STORE_TIMEZONE", "Asia/Kolkata"))

# A business day starts at this local hour; earlier instants belong to the previous day
BUSINESS_DAY_START_HOUR = int(os.getenv("BUSINESS_DAY_START_HOUR", "9"))

# Maximum recommended number of people inside the store
MAX_CAPACITY = int(os.getenv("MAX_CAPACITY", "50"))

REFRESH_INTERVAL_SECONDS = float(os.getenv("REFRESH_INTERVAL_SECONDS", "10"))

# Server bind address for `python -m footfall`
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))
