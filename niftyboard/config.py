"""Simple configuration module for the niftyboard backend.

Uses environment variables (optionally from a local .env file) with sensible
defaults for local development.
"""
import os

from typing import List

from dotenv import load_dotenv

load_dotenv()

# Third-party API keys. The demo keys are rate limited; set your own in production.
FINNHUB_API_KEY = os.environ.get("FINNHUB_API_KEY", "")
ALPHAVANTAGE_API_KEY = os.environ.get("ALPHAVANTAGE_API_KEY", "demo")

FINNHUB_BASE_URL = os.environ.get("FINNHUB_BASE_URL", "https://finnhub.io/api/v1")
ALPHAVANTAGE_BASE_URL = os.environ.get("ALPHAVANTAGE_BASE_URL", "https://www.alphavantage.co/query")

# Allowed CORS origins for the FastAPI app (comma-separated)
ALLOWED_ORIGINS = [o.strip() for o in os.environ.get("ALLOWED_ORIGINS", "*").split(",") if o.strip()]

# HTTP client settings
HTTP_TIMEOUT_SECONDS = int(os.environ.get("HTTP_TIMEOUT_SECONDS", "10"))
HTTP_RETRY_COUNT = int(os.environ.get("HTTP_RETRY_COUNT", "2"))
HTTP_RETRY_BACKOFF = float(os.environ.get("HTTP_RETRY_BACKOFF", "0.5"))

# Response cache
CACHE_TTL_SECONDS = int(os.environ.get("CACHE_TTL_SECONDS", "300"))
CACHE_MAX_ENTRIES = int(os.environ.get("CACHE_MAX_ENTRIES", "1024"))

# Upstream fan-out limits (free tiers rate limit aggressively)
MONEYCONTROL_FETCH_LIMIT = int(os.environ.get("MONEYCONTROL_FETCH_LIMIT", "20"))
FINNHUB_SYMBOL_LIMIT = int(os.environ.get("FINNHUB_SYMBOL_LIMIT", "30"))
FINNHUB_MAX_CONCURRENCY = int(os.environ.get("FINNHUB_MAX_CONCURRENCY", "5"))

# List pagination
DEFAULT_PAGE_SIZE = int(os.environ.get("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.environ.get("MAX_PAGE_SIZE", "100"))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()


def get_allowed_origins() -> List[str]:
	return ALLOWED_ORIGINS or ["*"]
