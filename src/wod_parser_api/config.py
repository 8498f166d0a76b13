"""Configuration settings for the WOD parser API."""
import os
from typing import Literal


EnvironmentType = Literal["development", "staging", "production"]


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, default))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except ValueError:
        return default


class Settings:
    """Application settings."""

    # Environment
    ENVIRONMENT: EnvironmentType = "development"
    LOG_LEVEL: str = "INFO"

    # Movement vocabulary
    VOCABULARY_SOURCE: str = "static"
    VOCABULARY_PATH: str | None = None
    VOCABULARY_URL: str | None = None
    VOCABULARY_TIMEOUT_SECONDS: float = 5.0
    VOCABULARY_TTL_SECONDS: int = 3600

    # Parsing limits
    MAX_INPUT_LENGTH: int = 10000

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://localhost:3001"]

    def __init__(self):
        # Environment
        env = os.getenv("ENVIRONMENT", "development").lower()
        if env in ("development", "staging", "production"):
            self.ENVIRONMENT = env  # type: ignore
        else:
            self.ENVIRONMENT = "development"
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        # Movement vocabulary
        source = os.getenv("VOCABULARY_SOURCE", "static").lower()
        self.VOCABULARY_SOURCE = source if source in ("static", "http") else "static"
        self.VOCABULARY_PATH = os.getenv("VOCABULARY_PATH")
        self.VOCABULARY_URL = os.getenv("VOCABULARY_URL")
        self.VOCABULARY_TIMEOUT_SECONDS = _float_env("VOCABULARY_TIMEOUT_SECONDS", 5.0)
        self.VOCABULARY_TTL_SECONDS = _int_env("VOCABULARY_TTL_SECONDS", 3600)

        # Parsing limits
        self.MAX_INPUT_LENGTH = _int_env("MAX_INPUT_LENGTH", 10000)

        origins = os.getenv("CORS_ORIGINS")
        if origins:
            self.CORS_ORIGINS = [o.strip() for o in origins.split(",") if o.strip()]


settings = Settings()
