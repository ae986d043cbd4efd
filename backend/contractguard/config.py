"""Library configuration via environment variables."""

from functools import lru_cache
from typing import Literal, Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from ``CONTRACTGUARD_*`` environment variables."""

    # Logging
    LOG_LEVEL: str = "info"
    LOG_JSON: bool = False

    # Session Manager
    AUTH_TIMEOUT_SECONDS: float = 10.0
    SESSION_TTL_SECONDS: Optional[int] = None  # None: expiry unknown unless the exchange reports one
    EXPIRY_SKEW_SECONDS: int = 30
    AUTH_HEADER_NAME: str = "Authorization"
    AUTH_SCHEME: str = ""  # e.g. "Bearer"; empty sends the raw token

    # Rules
    PATTERN_MATCH_MODE: Literal["full", "partial"] = "partial"

    model_config = {
        "env_prefix": "CONTRACTGUARD_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    return Settings()
