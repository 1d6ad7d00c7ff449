"""
Configuration helpers for the InternCoach backend and client.

Routers, services and the client read settings from here instead of fetching
os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATA_FILE = PROJECT_ROOT / "data" / "internships.json"
DEFAULT_PREFS_FILE = Path.home() / ".interncoach" / "preferences.json"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    public_base_url: str
    data_file: Path
    strict_validation: bool
    api_url: str
    prefs_file: Path
    http_timeout: float
    host: str
    port: int
    log_level: str


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _float(value: str, default: float = 0.0) -> float:
        try:
            return float(value)
        except (TypeError, ValueError):
            return default

    def _bool(value: str | None, default: bool = False) -> bool:
        if value is None:
            return default
        return value.strip().lower() in {"1", "true", "yes", "on"}

    def _path(value: str | None, default: Path) -> Path:
        if not value or not value.strip():
            return default
        return Path(value.strip()).expanduser()

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        public_base_url=os.getenv("PUBLIC_BASE_URL", "http://localhost:3000").rstrip("/"),
        data_file=_path(os.getenv("INTERNCOACH_DATA_FILE"), DEFAULT_DATA_FILE),
        strict_validation=_bool(os.getenv("INTERNCOACH_STRICT_VALIDATION"), False),
        api_url=os.getenv("INTERNCOACH_API_URL", "http://localhost:3000").rstrip("/"),
        prefs_file=_path(os.getenv("INTERNCOACH_PREFS_FILE"), DEFAULT_PREFS_FILE),
        http_timeout=_float(os.getenv("INTERNCOACH_HTTP_TIMEOUT", "10"), 10.0),
        host=os.getenv("HOST", "127.0.0.1"),
        port=_int(os.getenv("PORT", "3000"), 3000),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
    )
