import os
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_MARKET = "usa"
DEFAULT_TIMEZONE = "America/New_York"
DEFAULT_MARKET_FILE = "market.yaml"
DEFAULT_LOG_LEVEL = "INFO"

def load_env_file(path: str = ".env"):
    """
    Load environment variables from a .env file into os.environ.
    Existing variables win over values from the file.
    """
    p = Path(path)
    if not p.exists():
        return

    try:
        with open(p) as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if '=' in line:
                    key, val = line.split('=', 1)
                    key = key.strip()
                    val = val.strip().strip('"').strip("'")
                    if key not in os.environ:
                        os.environ[key] = val
    except OSError as e:
        logger.warning(f"Failed to load .env: {e}")

# Load on import
load_env_file()

def get_default_market() -> str:
    """Market code used for Symbols when none is configured."""
    return (os.environ.get("TIINGONEWS_MARKET") or DEFAULT_MARKET).strip().lower()

def get_default_timezone() -> str:
    """IANA zone name used to localize crawl dates when none is configured."""
    return (os.environ.get("TIINGONEWS_TIMEZONE") or DEFAULT_TIMEZONE).strip()

def get_market_path() -> str:
    return os.environ.get("TIINGONEWS_MARKET_FILE") or DEFAULT_MARKET_FILE

def get_log_level() -> str:
    return (os.environ.get("TIINGONEWS_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip()
