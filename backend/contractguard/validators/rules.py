"""Rules - atomic, immutable predicates over a single JSON value.

Each rule is a frozen pydantic model tagged with a ``kind`` literal. A field
carries an ordered RuleSet; ``evaluate`` dispatches on the rule's class so
every kind is handled in one place.
"""

import re
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from contractguard.config import get_settings
from contractguard.exceptions import SchemaDefinitionError
from contractguard.validators.models import ViolationCode

JSON_TYPES = ("string", "number", "boolean", "object", "array")
PATTERN_MODES = ("full", "partial")


class _Missing:
    """Marker for a key that is absent from its parent object."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


# ── JSON helpers ──


def json_type_of(value: Any) -> str:
    """Name the JSON type of a decoded value (``null`` for None).

    Only ``dict`` and ``list`` count as containers, as produced by ``json.loads``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    return type(value).__name__


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def json_equal(left: Any, right: Any) -> bool:
    """Deep equality under JSON semantics: ``True`` is not ``1``, ``1`` equals ``1.0``."""
    left_type, right_type = json_type_of(left), json_type_of(right)
    if left_type != right_type:
        return False
    if left_type == "object":
        if left.keys() != right.keys():
            return False
        return all(json_equal(left[k], right[k]) for k in left)
    if left_type == "array":
        if len(left) != len(right):
            return False
        return all(json_equal(a, b) for a, b in zip(left, right))
    return left == right


# ── Contract nodes ──


def _definition_error(error: ValidationError) -> SchemaDefinitionError:
    messages = []
    for detail in error.errors():
        cause = detail.get("ctx", {}).get("error")
        messages.append(str(cause) if cause is not None else f"{detail['loc']}: {detail['msg']}")
    return SchemaDefinitionError("; ".join(messages))


class ContractNode(BaseModel):
    """Frozen base for rules, rule sets and matchers.

    Declaration mistakes surface as SchemaDefinitionError, not ValidationError.
    """

    model_config = ConfigDict(frozen=True)

    def __init__(self, **data: Any):
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _definition_error(e) from e


# ── Rule variants ──


class TypeRule(ContractNode):
    kind: Literal["type"] = "type"
    json_type: str

    @field_validator("json_type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        if v not in JSON_TYPES:
            raise ValueError(f"Unknown JSON type '{v}'. Use one of: {', '.join(JSON_TYPES)}")
        return v


class RequiredRule(ContractNode):
    kind: Literal["required"] = "required"


class NullableRule(ContractNode):
    kind: Literal["nullable"] = "nullable"


class AllowRule(ContractNode):
    """Whitelisted values that pass the field outright (e.g. ``""`` for optional text)."""

    kind: Literal["allow"] = "allow"
    values: tuple[Any, ...]

    @field_validator("values")
    @classmethod
    def _not_empty(cls, v: tuple) -> tuple:
        if not v:
            raise ValueError("allow() needs at least one value")
        return v


class OneOfRule(ContractNode):
    kind: Literal["oneOf"] = "oneOf"
    values: tuple[Any, ...]

    @field_validator("values")
    @classmethod
    def _not_empty(cls, v: tuple) -> tuple:
        if not v:
            raise ValueError("one_of() needs at least one value")
        return v


class PositiveRule(ContractNode):
    kind: Literal["positive"] = "positive"


class MinRule(ContractNode):
    kind: Literal["min"] = "min"
    limit: Any

    @field_validator("limit")
    @classmethod
    def _numeric(cls, v: Any) -> Union[int, float]:
        if not is_number(v):
            raise ValueError(f"minimum() needs a number, got {v!r}")
        return v


class PatternRule(ContractNode):
    kind: Literal["pattern"] = "pattern"
    regex: str
    mode: Optional[str] = Field(default=None, validate_default=True)

    @field_validator("regex")
    @classmethod
    def _compiles(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid pattern '{v}': {e}") from e
        return v

    @field_validator("mode")
    @classmethod
    def _known_mode(cls, v: Optional[str]) -> str:
        if v is None:
            v = get_settings().PATTERN_MATCH_MODE
        if v not in PATTERN_MODES:
            raise ValueError(f"Unknown pattern mode '{v}'. Use 'full' or 'partial'")
        return v


Rule = Annotated[
    Union[TypeRule, RequiredRule, NullableRule, AllowRule, OneOfRule, PositiveRule, MinRule, PatternRule],
    Field(discriminator="kind"),
]

RULE_CLASSES = (TypeRule, RequiredRule, NullableRule, AllowRule, OneOfRule, PositiveRule, MinRule, PatternRule)


# ── Evaluation ──


class RuleOutcome(BaseModel):
    """Result of one rule against one value."""

    model_config = ConfigDict(frozen=True)

    ok: bool
    code: Optional[ViolationCode] = None
    reason: Optional[str] = None

    @classmethod
    def passed(cls) -> "RuleOutcome":
        return cls(ok=True)

    @classmethod
    def failed(cls, code: ViolationCode, reason: str) -> "RuleOutcome":
        return cls(ok=False, code=code, reason=reason)


_PASS = RuleOutcome.passed()


def _not_a_number(rule_name: str, value: Any) -> RuleOutcome:
    return RuleOutcome.failed(
        ViolationCode.TYPE_MISMATCH,
        f"{rule_name} requires a number, got {json_type_of(value)}",
    )


def evaluate(rule: Rule, value: Any) -> RuleOutcome:
    """Evaluate a single rule against a value.

    ``value`` may be MISSING only for the ``required`` rule; every other rule
    needs a present value.
    """
    if isinstance(rule, RequiredRule):
        if value is MISSING:
            return RuleOutcome.failed(ViolationCode.REQUIRED_MISSING, "required field missing")
        return _PASS

    if value is MISSING:
        raise ValueError(f"Cannot evaluate '{rule.kind}' against an absent value")

    if isinstance(rule, NullableRule):
        # Non-null values are left to the remaining rules
        return _PASS

    if isinstance(rule, TypeRule):
        actual = json_type_of(value)
        if actual != rule.json_type:
            return RuleOutcome.failed(
                ViolationCode.TYPE_MISMATCH,
                f"expected {rule.json_type}, got {actual}",
            )
        return _PASS

    if isinstance(rule, AllowRule):
        if any(json_equal(value, allowed) for allowed in rule.values):
            return _PASS
        return RuleOutcome.failed(ViolationCode.VALUE_NOT_ALLOWED, f"{value!r} is not an allowed value")

    if isinstance(rule, OneOfRule):
        if any(json_equal(value, option) for option in rule.values):
            return _PASS
        options = ", ".join(repr(v) for v in rule.values)
        return RuleOutcome.failed(ViolationCode.VALUE_NOT_ALLOWED, f"must be one of [{options}], got {value!r}")

    if isinstance(rule, PositiveRule):
        if not is_number(value):
            return _not_a_number("positive", value)
        if value <= 0:
            return RuleOutcome.failed(ViolationCode.VALUE_NOT_POSITIVE, f"must be positive, got {value!r}")
        return _PASS

    if isinstance(rule, MinRule):
        if not is_number(value):
            return _not_a_number("min", value)
        if value < rule.limit:
            return RuleOutcome.failed(
                ViolationCode.VALUE_BELOW_MIN,
                f"must be greater than or equal to {rule.limit!r}, got {value!r}",
            )
        return _PASS

    if isinstance(rule, PatternRule):
        if not isinstance(value, str):
            return RuleOutcome.failed(
                ViolationCode.TYPE_MISMATCH,
                f"pattern requires a string, got {json_type_of(value)}",
            )
        match = re.fullmatch if rule.mode == "full" else re.search
        if match(rule.regex, value) is None:
            return RuleOutcome.failed(
                ViolationCode.PATTERN_MISMATCH,
                f"does not match pattern '{rule.regex}' ({rule.mode} match)",
            )
        return _PASS

    raise TypeError(f"Unknown rule: {rule!r}")


# ── Rule sets ──


class RuleSet(ContractNode):
    """Ordered rules for one field; all must pass.

    Evaluation order: presence (``required``), then ``nullable`` and ``allow``
    short-circuits, then the remaining rules in declaration order.
    """

    rules: tuple[Rule, ...] = ()

    @field_validator("rules", mode="before")
    @classmethod
    def _only_rules(cls, v: Any) -> tuple:
        v = tuple(v)
        for rule in v:
            # dicts are resolved through the kind discriminator
            if not isinstance(rule, (dict, *RULE_CLASSES)):
                raise ValueError(f"Not a rule: {rule!r}")
        return v

    @field_validator("rules")
    @classmethod
    def _unique_kinds(cls, v: tuple) -> tuple:
        seen: set[str] = set()
        for rule in v:
            if rule.kind in seen:
                raise ValueError(f"Rule '{rule.kind}' declared twice in one field")
            seen.add(rule.kind)
        return v

    @property
    def required(self) -> bool:
        return any(isinstance(r, RequiredRule) for r in self.rules)

    @property
    def nullable(self) -> bool:
        return any(isinstance(r, NullableRule) for r in self.rules)

    def extend(self, *rules: Rule) -> "RuleSet":
        return RuleSet(rules=self.rules + tuple(rules))

    def check(self, value: Any) -> list[RuleOutcome]:
        """Return the failed outcomes for ``value`` (MISSING when the key is absent)."""
        if value is MISSING:
            if self.required:
                return [evaluate(RequiredRule(), MISSING)]
            return []

        if value is None and self.nullable:
            return []

        allow = next((r for r in self.rules if isinstance(r, AllowRule)), None)
        if allow is not None and evaluate(allow, value).ok:
            return []

        failures = []
        for rule in self.rules:
            if isinstance(rule, (RequiredRule, NullableRule, AllowRule)):
                continue
            outcome = evaluate(rule, value)
            if not outcome.ok:
                failures.append(outcome)
        return failures


# ── Builders ──


def rule_set(*rules: Rule) -> RuleSet:
    """Bundle rules for one field: ``rule_set(required(), of_type("string"))``."""
    return RuleSet(rules=tuple(rules))


def of_type(json_type: str) -> TypeRule:
    return TypeRule(json_type=json_type)


def required() -> RequiredRule:
    return RequiredRule()


def nullable() -> NullableRule:
    return NullableRule()


def allow(*values: Any) -> AllowRule:
    return AllowRule(values=tuple(values))


def one_of(*values: Any) -> OneOfRule:
    return OneOfRule(values=tuple(values))


def positive() -> PositiveRule:
    return PositiveRule()


def minimum(limit: Union[int, float]) -> MinRule:
    return MinRule(limit=limit)


def pattern(regex: str, mode: Optional[str] = None) -> PatternRule:
    return PatternRule(regex=regex, mode=mode)
