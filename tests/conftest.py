"""Shared pytest fixtures for contractguard tests."""

from datetime import datetime, timedelta, timezone

import pytest

from contractguard.config import get_settings
from contractguard.models.session import Credentials
from contractguard.validators import Schema, allow, minimum, nullable, of_type, positive, required, rule_set


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from ambient CONTRACTGUARD_* variables and cached settings."""
    monkeypatch.delenv("CONTRACTGUARD_SESSION_TTL_SECONDS", raising=False)
    monkeypatch.delenv("CONTRACTGUARD_PATTERN_MATCH_MODE", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeClock:
    """Manually advanced clock for expiry tests."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(identity="admin@admin.com", secret="admin123")


@pytest.fixture
def add_category_schema() -> Schema:
    """Contract for the addCategory mutation response."""
    return Schema(
        {
            "data": {
                "addCategory": {
                    "name": rule_set(required(), of_type("string")),
                    "photo": rule_set(nullable(), of_type("string")),
                }
            }
        }
    )


@pytest.fixture
def add_product_schema() -> Schema:
    """Contract for the addProduct mutation response."""
    return Schema(
        {
            "data": {
                "addProduct": {
                    "name": rule_set(required(), of_type("string")),
                    "price": rule_set(nullable(), of_type("number"), positive()),
                    "description": rule_set(allow(None, ""), of_type("string")),
                    "quantity": rule_set(nullable(), of_type("number"), minimum(0)),
                    "popular": rule_set(nullable(), of_type("boolean")),
                    "visible": rule_set(nullable(), of_type("boolean")),
                    "specialPrice": rule_set(nullable(), of_type("number")),
                    "location": rule_set(allow(None, ""), of_type("string")),
                }
            }
        }
    )
