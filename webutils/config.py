import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()

_LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


@dataclass(frozen=True)
class Config:
    """Service configuration loaded from environment variables (and .env)."""

    APP_TITLE: str = os.getenv("APP_TITLE", "webutils")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8080"))

    @classmethod
    def log_level(cls) -> int:
        return _LOG_LEVELS.get(cls.LOG_LEVEL.strip().upper(), logging.WARNING)

    @classmethod
    def validate(cls) -> None:
        if not 0 < cls.PORT < 65536:
            raise ValueError(f"PORT must be between 1 and 65535, got {cls.PORT}")
