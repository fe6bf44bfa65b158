from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        return default
    return value if value > 0 else default


def _env_optional(name: str) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


# Storage
STORE_BACKEND = os.getenv("STORE_BACKEND", "memory").strip().lower()
MONGODB_URI = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "tavno")
MONGO_APPNAME = os.getenv("MONGO_APPNAME", "tavno")
MONGO_OP_TIMEOUT_MS = _env_int("MONGO_OP_TIMEOUT_MS", 5000)
SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA", default=True)

# Auth
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-env")
JWT_ALG = os.getenv("JWT_ALG", "HS256")
JWT_EXPIRE_MINUTES = _env_int("JWT_EXPIRE_MINUTES", 60 * 24 * 7)
ADMIN_TOKEN = _env_optional("API_ADMIN_TOKEN")

# Files
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR") or (Path.cwd() / "uploads"))
UPLOAD_URL_PREFIX = "/uploads/"
LOG_DIR = Path(os.getenv("LOG_DIR") or (Path.cwd() / "logs"))
ACTIVITY_LOG_FILE = Path(
    os.getenv("ACTIVITY_LOG_FILE") or (LOG_DIR / "suspicious_activities.log")
)

# Suspicious activity thresholds
SUSPICIOUS_COMPLETION_SECONDS = _env_int("SUSPICIOUS_COMPLETION_SECONDS", 60)
SPAM_COMPLETION_LIMIT = _env_int("SPAM_COMPLETION_LIMIT", 5)
SPAM_COMPLETION_WINDOW_SECONDS = _env_int("SPAM_COMPLETION_WINDOW_SECONDS", 3600)

# AI collaborator
GEMINI_API_KEY = _env_optional("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
GEMINI_BASE_URL = os.getenv(
    "GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)
AI_TIMEOUT_SECONDS = _env_int("AI_TIMEOUT_SECONDS", 30)

# Real-time channel
BROADCAST_QUEUE_SIZE = _env_int("BROADCAST_QUEUE_SIZE", 100)


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the Tavno API."""

    store_backend: str = STORE_BACKEND
    seed_demo_data: bool = SEED_DEMO_DATA
    upload_dir: Path = UPLOAD_DIR
    activity_log_file: Path = ACTIVITY_LOG_FILE
    admin_token: Optional[str] = ADMIN_TOKEN
    gemini_api_key: Optional[str] = GEMINI_API_KEY
    gemini_model: str = GEMINI_MODEL
    suspicious_completion_seconds: int = SUSPICIOUS_COMPLETION_SECONDS
    spam_completion_limit: int = SPAM_COMPLETION_LIMIT
    spam_completion_window_seconds: int = SPAM_COMPLETION_WINDOW_SECONDS
    broadcast_queue_size: int = BROADCAST_QUEUE_SIZE


def load_settings() -> Settings:
    """Construct Settings from the environment-derived module constants."""
    return Settings()


__all__ = ["Settings", "load_settings"]
