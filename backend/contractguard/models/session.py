"""Session models - credentials, exchange results, and cached sessions."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionState(str, Enum):
    """Lifecycle states of a SessionManager."""

    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    EXPIRED = "expired"
    INVALIDATED = "invalidated"


class Credentials(BaseModel):
    """A credential pair. ``identity`` keys single-flight; the secret is never logged."""

    model_config = ConfigDict(frozen=True)

    identity: str = Field(min_length=1)
    secret: SecretStr


class ExchangeResult(BaseModel):
    """What an authentication exchange yields: a token and optional expiry."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    token: Optional[str] = None
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")
    expires_in: Optional[float] = Field(default=None, alias="expiresIn", ge=0)

    @field_validator("expires_at")
    @classmethod
    def _assume_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def usable(self) -> bool:
        return bool(self.token and self.token.strip())


class Session(BaseModel):
    """An acquired authentication session. Owned by SessionManager."""

    model_config = ConfigDict(frozen=True)

    identity: str
    token: str = Field(repr=False)
    acquired_at: datetime
    expires_at: Optional[datetime] = None  # None: expiry unknown

    def is_expired(self, now: Optional[datetime] = None, skew_seconds: float = 0) -> bool:
        """True once ``now`` is within ``skew_seconds`` of the expiry."""
        if self.expires_at is None:
            return False
        now = now or utcnow()
        return now >= self.expires_at - timedelta(seconds=skew_seconds)
