import os
from datetime import time


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_time(value: str | None, default: time) -> time:
    if not value:
        return default
    return time.fromisoformat(value.strip())


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


APP_ENV = os.getenv("APP_ENV", "development")
DEBUG = _get_bool(os.getenv("DEBUG"), default=False)

CORS_ALLOW_ORIGINS = _get_list(os.getenv("CORS_ALLOW_ORIGINS"), ["http://localhost:3000"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

SLOT_DURATION_MINUTES = int(os.getenv("SLOT_DURATION_MINUTES", "30"))
LUNCH_BREAK_START = _get_time(os.getenv("LUNCH_BREAK_START"), time(11, 0))
LUNCH_BREAK_END = _get_time(os.getenv("LUNCH_BREAK_END"), time(13, 0))
MAX_APPOINTMENT_NOTE_LENGTH = int(os.getenv("MAX_APPOINTMENT_NOTE_LENGTH", "1000"))

OPENROUTER_API_KEY = os.getenv("OPENROUTER_API_KEY", "")
OPENROUTER_API_URL = os.getenv("OPENROUTER_API_URL", "https://openrouter.ai/api/v1/chat/completions")
OPENROUTER_MODEL = os.getenv("OPENROUTER_MODEL", "openai/gpt-4o-mini")
AI_SUGGESTION_TIMEOUT_SECONDS = float(os.getenv("AI_SUGGESTION_TIMEOUT_SECONDS", "20"))
MAX_SPECIALTY_SUGGESTIONS = int(os.getenv("MAX_SPECIALTY_SUGGESTIONS", "10"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if LUNCH_BREAK_START >= LUNCH_BREAK_END:
        raise RuntimeError("LUNCH_BREAK_START must be earlier than LUNCH_BREAK_END.")

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))
