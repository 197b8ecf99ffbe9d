"""Runtime configuration for mlotasks.

Values come from the environment (optionally a local `.env` file).
"""

import os
from dotenv import load_dotenv

load_dotenv()

STORAGE_TYPE_LOCAL = "localStorage"
STORAGE_TYPE_API = "api"

DEFAULT_DATABASE_URL = "sqlite:///./mlotasks.db"
DEFAULT_API_BASE_URL = "http://localhost:3000/api"


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def get_storage_type() -> str:
    """Configured storage backend (`localStorage` or `api`)."""
    return os.getenv("MLO_STORAGE_TYPE", STORAGE_TYPE_LOCAL)


def get_database_url() -> str:
    return os.getenv("MLO_DATABASE_URL", DEFAULT_DATABASE_URL)


def get_api_base_url() -> str:
    return os.getenv("MLO_API_BASE_URL", DEFAULT_API_BASE_URL)


def get_api_token():
    return os.getenv("MLO_API_TOKEN") or None


def get_api_timeout() -> float:
    return float(os.getenv("MLO_API_TIMEOUT_SEC", "10"))


def get_log_level() -> str:
    if _env_bool("MLO_DEBUG"):
        return "DEBUG"
    return os.getenv("MLO_LOG_LEVEL", "INFO").upper()


def is_api_storage_available() -> bool:
    """True when an API base URL has been configured explicitly."""
    return bool(os.getenv("MLO_API_BASE_URL"))
