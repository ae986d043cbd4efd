"""Contract Validator - walks a JSON value against a Schema or Matcher tree.

This is the main entry point for response verification. It descends the
contract recursively, accumulates every violation with its full path, and
returns a ValidationResult. It never raises for data problems.

Usage:
    result = contract_validator.validate(add_category_schema, response_body)
    result.raise_for_violations()
"""

import time
from typing import Any, Union

import structlog

from contractguard.validators.matchers import EachLikeMatcher, LikeMatcher, LiteralMatcher, Matcher
from contractguard.validators.models import ValidationResult, Violation, ViolationCode
from contractguard.validators.rules import MISSING, RuleSet, json_equal, json_type_of
from contractguard.validators.schema import Schema, as_field_spec

logger = structlog.get_logger()

Contract = Union[Schema, Matcher, RuleSet]

_CONTRACT_NODES = (Schema, RuleSet, LiteralMatcher, LikeMatcher, EachLikeMatcher)


class ContractValidator:
    """Stateless validator; one instance can be shared by any number of callers.

    Design principles:
        - Deterministic: same contract + value -> same violations, same order
        - Accumulating: only a wrong container type prunes its own subtree
        - Open-world: keys the contract does not declare are ignored
    """

    def validate(self, contract: Any, value: Any) -> ValidationResult:
        """Validate ``value`` against a Schema, Matcher or RuleSet.

        Args:
            contract: Schema, Matcher, RuleSet, or a plain dict (treated as a Schema)
            value: Decoded JSON body

        Returns:
            ValidationResult, valid when no violations were found
        """
        start_time = time.perf_counter()
        contract = as_field_spec(contract, "<root>")

        violations: list[Violation] = []
        self._walk(contract, value, (), violations)

        logger.debug(
            "validation_complete",
            contract=type(contract).__name__,
            valid=not violations,
            violation_count=len(violations),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 3),
        )

        if violations:
            return ValidationResult.invalid(violations)
        return ValidationResult.valid()

    # ── Dispatch ──

    def _walk(self, node: Any, value: Any, path: tuple, out: list[Violation]) -> None:
        if isinstance(node, RuleSet):
            self._check_rules(node, value, path, out)
        elif isinstance(node, Schema):
            self._walk_schema(node, value, path, out)
        elif isinstance(node, LiteralMatcher):
            self._walk_literal(node, value, path, out)
        elif isinstance(node, LikeMatcher):
            self._walk_like(node.shape, value, path, out)
        elif isinstance(node, EachLikeMatcher):
            self._walk_each_like(node, value, path, out)
        else:
            raise TypeError(f"Unsupported contract node: {node!r}")

    def _walk_field(self, node: Any, value: Any, path: tuple, out: list[Violation]) -> None:
        """Validate a declared field, handling absence before descending."""
        if value is MISSING and not isinstance(node, RuleSet):
            if not isinstance(node, Schema) or node.required:
                out.append(self._violation(path, ViolationCode.REQUIRED_MISSING, "required field missing"))
            return
        self._walk(node, value, path, out)

    # ── Schema ──

    def _walk_schema(self, schema: Schema, value: Any, path: tuple, out: list[Violation]) -> None:
        if value is None and schema.nullable:
            return
        if not isinstance(value, dict):
            out.append(self._shape_mismatch(path, "object", value))
            return
        for name, node in schema.fields.items():
            self._walk_field(node, value.get(name, MISSING), path + (name,), out)

    def _check_rules(self, rules: RuleSet, value: Any, path: tuple, out: list[Violation]) -> None:
        for outcome in rules.check(value):
            out.append(self._violation(path, outcome.code, outcome.reason))

    # ── Matchers ──

    def _walk_literal(self, matcher: LiteralMatcher, value: Any, path: tuple, out: list[Violation]) -> None:
        if not json_equal(matcher.value, value):
            out.append(
                Violation(
                    path=path,
                    code=ViolationCode.LITERAL_MISMATCH,
                    message=f"expected {matcher.value!r}, got {value!r}",
                    expected=matcher.value,
                    actual=value,
                )
            )

    def _walk_like(self, shape: Any, value: Any, path: tuple, out: list[Violation]) -> None:
        """Compare types and structure only; sample values in ``shape`` are ignored."""
        if isinstance(shape, _CONTRACT_NODES):
            self._walk(shape, value, path, out)
            return

        if isinstance(shape, dict):
            if not isinstance(value, dict):
                out.append(self._shape_mismatch(path, "object", value))
                return
            for key, sub_shape in shape.items():
                child_path = path + (key,)
                if key not in value:
                    if isinstance(sub_shape, _CONTRACT_NODES):
                        self._walk_field(sub_shape, MISSING, child_path, out)
                    else:
                        out.append(self._violation(child_path, ViolationCode.REQUIRED_MISSING, "required field missing"))
                    continue
                self._walk_like(sub_shape, value[key], child_path, out)
            return

        if isinstance(shape, list):
            if not isinstance(value, list):
                out.append(self._shape_mismatch(path, "array", value))
                return
            if shape:
                for index, element in enumerate(value):
                    self._walk_like(shape[0], element, path + (index,), out)
            return

        expected_type, actual_type = json_type_of(shape), json_type_of(value)
        if expected_type != actual_type:
            out.append(
                self._violation(path, ViolationCode.TYPE_MISMATCH, f"expected {expected_type}, got {actual_type}")
            )

    def _walk_each_like(self, matcher: EachLikeMatcher, value: Any, path: tuple, out: list[Violation]) -> None:
        if not isinstance(value, list):
            out.append(self._shape_mismatch(path, "array", value))
            return
        if len(value) < matcher.min:
            out.append(
                self._violation(
                    path,
                    ViolationCode.TOO_FEW_ITEMS,
                    f"expected at least {matcher.min} item(s), got {len(value)}",
                )
            )
        for index, element in enumerate(value):
            self._walk_like(matcher.shape, element, path + (index,), out)

    # ── Helpers ──

    @staticmethod
    def _violation(path: tuple, code: ViolationCode, message: str) -> Violation:
        return Violation(path=path, code=code, message=message)

    def _shape_mismatch(self, path: tuple, expected: str, value: Any) -> Violation:
        return self._violation(path, ViolationCode.SHAPE_MISMATCH, f"expected {expected}, got {json_type_of(value)}")


# Module-level singleton
contract_validator = ContractValidator()


def validate(contract: Any, value: Any) -> ValidationResult:
    """Validate ``value`` against ``contract`` with the shared validator."""
    return contract_validator.validate(contract, value)
