# catalog_browser/config/settings.py

"""Central configuration for the catalog_browser client."""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the catalog_browser client."""

    # --- Remote API ---
    API_BASE_URL: str = os.getenv(
        "CATALOG_API_BASE_URL", "http://localhost:3000"
    ).rstrip("/")
    REQUEST_TIMEOUT: int = 10           # Seconds per attempt
    MAX_RETRIES: int = 1                # Extra attempts on transient failures
    DEFAULT_HEADERS: dict[str, str] = {
        "Content-Type": "application/json",
        "Accept": "application/json",
    }

    # --- Cache ---
    CACHE_TTL_MS: int = 15 * 60 * 1000  # Entry freshness window
    SWEEP_INTERVAL_MS: int = 60_000     # Background staleness check

    # --- Listing ---
    PAGE_SIZE: int = 8                  # Products added per scroll signal
    PRODUCTS_ERROR_MESSAGE: str = (
        "Failed to fetch products. Please try again later."
    )

    # --- Paths ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    PROFILE_DIR: Path = Path(
        os.getenv("CATALOG_PROFILE_DIR", str(BASE_DIR / "profile"))
    )
    CACHE_DB_PATH: Path = PROFILE_DIR / "cache.db"
    LOGS_DIR: Path = Path(
        os.getenv("CATALOG_LOG_DIR", str(PROFILE_DIR / "logs"))
    )
