"""Application configuration loaded from environment variables."""

import os
from datetime import timedelta
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _optional_seconds(name: str) -> Optional[timedelta]:
    """Read a duration in seconds; unset or empty means "use the driver default"."""
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    return timedelta(seconds=float(raw))


# Paths
DATA_DIR = Path(os.getenv("DATA_DIR", Path(__file__).parent.parent / "data"))
CREDENTIALS_PATH = Path(os.getenv("CREDENTIALS_PATH", DATA_DIR / "credentials.json"))
LOG_DIR = DATA_DIR / "logs"

# Pinterest account
PINTEREST_EMAIL = os.getenv("PINTEREST_EMAIL", "")
PINTEREST_PASSWORD = os.getenv("PINTEREST_PASSWORD", "")
PINTEREST_USER_AGENT = os.getenv("PINTEREST_USER_AGENT") or None

# Session manager
SESSION_MANAGER_HOST = os.getenv("SESSION_MANAGER_HOST", "127.0.0.1")
SESSION_MANAGER_PORT = int(os.getenv("SESSION_MANAGER_PORT", "8025"))
SESSION_MANAGER_URL = f"http://{SESSION_MANAGER_HOST}:{SESSION_MANAGER_PORT}"

# Browser
BROWSER_HEADLESS = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"
BROWSER_REQUEST_TIMEOUT = _optional_seconds("BROWSER_REQUEST_TIMEOUT")
BROWSER_LAUNCH_TIMEOUT = _optional_seconds("BROWSER_LAUNCH_TIMEOUT")


def ensure_dirs():
    """Create required data directories if they don't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)
    CREDENTIALS_PATH.parent.mkdir(parents=True, exist_ok=True)
    LOG_DIR.mkdir(parents=True, exist_ok=True)
