"""
config.py
Settings loaded from the environment (and an optional .env file) + logging setup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

DEFAULT_DB_PATH = BASE_DIR / "data" / "debtors.db"
DEFAULT_STATIC_DIR = BASE_DIR / "dist"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    app_env: str
    db_path: Path
    admin_password_hash: str | None
    admin_password: str | None
    host: str
    port: int
    static_dir: Path
    api_base_url: str
    loading_seconds: float
    log_level: str
    max_content_length: int

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


def load_settings() -> Settings:
    load_dotenv()

    app_env = os.getenv("APP_ENV", "development").strip().lower()
    if app_env not in ("development", "production"):
        app_env = "development"

    port = _env_int("PORT", 3000)
    return Settings(
        app_env=app_env,
        db_path=Path(os.getenv("DB_PATH", str(DEFAULT_DB_PATH))).resolve(),
        admin_password_hash=os.getenv("ADMIN_PASSWORD_HASH") or None,
        admin_password=os.getenv("ADMIN_PASSWORD") or None,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        static_dir=Path(os.getenv("STATIC_DIR", str(DEFAULT_STATIC_DIR))).resolve(),
        api_base_url=os.getenv("API_BASE_URL", f"http://localhost:{port}").rstrip("/"),
        loading_seconds=_env_float("LOADING_SECONDS", 2.0),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        max_content_length=_env_int("MAX_CONTENT_LENGTH", 10 * 1024 * 1024),
    )


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure root logging once for the process (console output).
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    return logging.getLogger("debt_portal")
