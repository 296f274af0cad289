"""Environment configuration for the Tasklist application."""

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self) -> None:
        # Networked backend (PostgreSQL); selects that backend when set
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "").strip()
        self.DATABASE_SSLMODE: str = os.getenv("DATABASE_SSLMODE", "").strip()
        # Embedded backend (SQLite), used when DATABASE_URL is empty
        self.DB_FILE: Path = Path(os.getenv("DB_FILE") or "database/app.db").resolve()
        self.SEED_FILE: Path = Path(os.getenv("SEED_FILE") or "database/seed.sql").resolve()

        self.HOST: str = os.getenv("HOST", "0.0.0.0")
        self.PORT: int = _env_int("PORT", 5000)
        self.BCRYPT_ROUNDS: int = _env_int("BCRYPT_ROUNDS", 10)
        self.FRONTEND_DIR: Path = Path(os.getenv("FRONTEND_DIR") or "frontend").resolve()
        self.CORS_ORIGINS: list[str] = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def uses_networked_database(self) -> bool:
        return bool(self.DATABASE_URL)

    @property
    def async_database_url(self) -> str:
        """DATABASE_URL rewritten for the async psycopg v3 driver."""
        url = self.DATABASE_URL
        for prefix in ("postgresql://", "postgres://"):
            if url.startswith(prefix):
                return url.replace(prefix, "postgresql+psycopg://", 1)
        return url

    def validate(self) -> None:
        """Validate that numeric settings are within range."""
        if not 0 < self.PORT < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.PORT}")
        if not 4 <= self.BCRYPT_ROUNDS <= 31:
            raise ValueError(f"BCRYPT_ROUNDS must be between 4 and 31, got {self.BCRYPT_ROUNDS}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()
    settings.validate()
    return settings
