# src/config/settings.py

"""Central configuration for the steal_deals storefront."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the steal_deals storefront."""

    # --- Backend connection ---
    BACKEND_URL: str = os.getenv("STEAL_DEALS_BACKEND_URL", "")
    BACKEND_ANON_KEY: str = os.getenv("STEAL_DEALS_BACKEND_ANON_KEY", "")
    REQUEST_TIMEOUT: int = 15           # Seconds before a request times out
    SESSION_REFRESH_MARGIN: float = 60.0  # Refresh tokens this close to expiry

    # --- Backend objects ---
    DEALS_TABLE: str = "deals"
    ROLES_TABLE: str = "user_roles"
    INCREMENT_CLICKS_RPC: str = "increment_deal_clicks"
    ADMIN_ROLE: str = "admin"

    # --- HTTP client ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": "application/json",
        "Accept-Language": "en-US,en;q=0.9",
        "Content-Type": "application/json",
    }

    # --- Storefront ---
    ALL_CATEGORIES: str = "All"         # Category filter sentinel
    TRENDING_LIMIT: int = 5
    HOT_DISCOUNT_BADGE: int = 50        # Show "% OFF" badge at or above this
    CURRENCY_SYMBOL: str = "₹"

    # --- Admin form ---
    TITLE_MIN_LENGTH: int = 3
    TITLE_MAX_LENGTH: int = 200

    # --- Logging ---
    CONSOLE_LOG_LEVEL: str = os.getenv("STEAL_DEALS_LOG_LEVEL", "WARNING")
    LOG_KEEP_RUNS: int = 20             # Run logs kept, current one included

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
