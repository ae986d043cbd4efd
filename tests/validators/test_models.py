"""Tests for Violation and ValidationResult."""

import json

import pytest

from contractguard.validators.models import ValidationResult, Violation, ViolationCode


class TestViolation:
    def test_render(self) -> None:
        violation = Violation(path=("data", "addProduct", "price"), message="must be positive, got -5", code="VALUE_NOT_POSITIVE")
        assert violation.render() == "data.addProduct.price: must be positive, got -5"
        assert violation.code == ViolationCode.VALUE_NOT_POSITIVE

    def test_json_serialization(self) -> None:
        violation = Violation(path=("items", 1), message="expected string, got number", code=ViolationCode.TYPE_MISMATCH)
        parsed = json.loads(violation.model_dump_json())
        assert parsed["path"] == ["items", 1]
        assert parsed["code"] == "TYPE_MISMATCH"

    def test_frozen(self) -> None:
        violation = Violation(message="x", code=ViolationCode.TYPE_MISMATCH)
        with pytest.raises(Exception):
            violation.message = "y"  # type: ignore[misc]


class TestValidationResult:
    def test_valid(self) -> None:
        result = ValidationResult.valid()
        assert result.is_valid
        assert bool(result) is True
        assert result.summary() == "valid"
        result.raise_for_violations()

    def test_invalid_requires_violations(self) -> None:
        with pytest.raises(ValueError):
            ValidationResult.invalid([])

    def test_at_filters_by_location(self) -> None:
        result = ValidationResult.invalid(
            [
                Violation(path=("a",), message="one", code=ViolationCode.TYPE_MISMATCH),
                Violation(path=("b",), message="two", code=ViolationCode.TYPE_MISMATCH),
            ]
        )
        assert [v.message for v in result.at("b")] == ["two"]
        assert bool(result) is False
