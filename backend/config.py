from datetime import UTC, datetime
from pathlib import Path

from pydantic_settings import BaseSettings


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime.

    Keeps datetimes naive so they stay compatible with SQLite
    (which doesn't store tz info).
    """
    return datetime.now(UTC).replace(tzinfo=None)


class Settings(BaseSettings):
    app_name: str = "Flashcards"
    database_url: str = f"sqlite+aiosqlite:///{Path(__file__).resolve().parent.parent / 'data' / 'flashcards.db'}"
    cors_origins: list[str] = ["*"]
    host: str = "127.0.0.1"
    port: int = 3000
    debug: bool = False

    model_config = {"env_prefix": "FLASHCARDS_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
