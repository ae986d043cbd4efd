"""Validation models - violation codes, violations, and the validation result.

Validation is pure: same contract + same value -> same result, in the same order.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from contractguard.exceptions import ContractViolationError
from contractguard.validators.paths import format_path


class ViolationCode(str, Enum):
    """Deterministic codes for every contract breach.

    Naming convention: CATEGORY_SPECIFIC_ISSUE
    """

    # Presence
    REQUIRED_MISSING = "REQUIRED_MISSING"

    # Types and shapes
    TYPE_MISMATCH = "TYPE_MISMATCH"
    SHAPE_MISMATCH = "SHAPE_MISMATCH"  # value is not the container the contract expects

    # Value constraints
    VALUE_NOT_POSITIVE = "VALUE_NOT_POSITIVE"
    VALUE_BELOW_MIN = "VALUE_BELOW_MIN"
    VALUE_NOT_ALLOWED = "VALUE_NOT_ALLOWED"
    PATTERN_MISMATCH = "PATTERN_MISMATCH"

    # Matchers
    LITERAL_MISMATCH = "LITERAL_MISMATCH"
    TOO_FEW_ITEMS = "TOO_FEW_ITEMS"


class Violation(BaseModel):
    """A single contract breach at a field path."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    path: tuple[Union[str, int], ...] = ()
    message: str
    code: ViolationCode
    expected: Optional[Any] = None  # Filled for literal mismatches
    actual: Optional[Any] = None

    @property
    def location(self) -> str:
        return format_path(self.path)

    def render(self) -> str:
        return f"{self.location}: {self.message}"


class ValidationResult(BaseModel):
    """Outcome of validating one value against one contract.

    Zero violations means valid; violations keep traversal order.
    """

    model_config = ConfigDict(frozen=True)

    violations: tuple[Violation, ...] = Field(default_factory=tuple)

    @classmethod
    def valid(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, violations: list[Violation]) -> "ValidationResult":
        if not violations:
            raise ValueError("An invalid result needs at least one violation")
        return cls(violations=tuple(violations))

    @property
    def is_valid(self) -> bool:
        return not self.violations

    def __bool__(self) -> bool:
        return self.is_valid

    def at(self, path: str) -> list[Violation]:
        """Violations whose rendered location equals ``path``."""
        return [v for v in self.violations if v.location == path]

    def summary(self) -> str:
        if self.is_valid:
            return "valid"
        return "\n".join(v.render() for v in self.violations)

    def raise_for_violations(self) -> None:
        """Raise ContractViolationError listing every violation, if any."""
        if self.violations:
            raise ContractViolationError(list(self.violations))
