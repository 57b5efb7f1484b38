import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if value is None:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")

DEFAULT_DATABASE_URL = "sqlite:///./booking.db"
DATABASE_URL = os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:5173"])

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Off by default: status updates accept any target status.
STRICT_STATUS_TRANSITIONS = _get_bool(os.getenv("STRICT_STATUS_TRANSITIONS"), default=False)

MAX_APPOINTMENT_NOTES_LENGTH = int(os.getenv("MAX_APPOINTMENT_NOTES_LENGTH", "600"))
MAX_CANCELLATION_REASON_LENGTH = int(os.getenv("MAX_CANCELLATION_REASON_LENGTH", "255"))


def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and DATABASE_URL == DEFAULT_DATABASE_URL:
        raise RuntimeError("DATABASE_URL must be set in production.")
