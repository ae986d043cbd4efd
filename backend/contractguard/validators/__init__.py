"""Contract Validator - declarative response contracts and the engine that checks them.

Usage:
    from contractguard.validators import Schema, rule_set, required, of_type, validate

    schema = Schema({"name": rule_set(required(), of_type("string"))})
    result = validate(schema, {"name": "Shoes"})
    if not result.is_valid:
        print(result.summary())
"""

from contractguard.validators.engine import ContractValidator, contract_validator, validate
from contractguard.validators.envelopes import graphql_envelope, null_payload_envelope, rejected_envelope
from contractguard.validators.matchers import (
    EachLikeMatcher,
    LikeMatcher,
    LiteralMatcher,
    Matcher,
    each_like,
    like,
    literal,
)
from contractguard.validators.models import ValidationResult, Violation, ViolationCode
from contractguard.validators.paths import format_path, get_path
from contractguard.validators.rules import (
    MISSING,
    Rule,
    RuleSet,
    allow,
    evaluate,
    minimum,
    nullable,
    of_type,
    one_of,
    pattern,
    positive,
    required,
    rule_set,
)
from contractguard.validators.schema import Schema

__all__ = [
    # Engine
    "ContractValidator",
    "contract_validator",
    "validate",
    # Contracts
    "Schema",
    "Rule",
    "RuleSet",
    "Matcher",
    "rule_set",
    "of_type",
    "required",
    "nullable",
    "allow",
    "one_of",
    "positive",
    "minimum",
    "pattern",
    "evaluate",
    "MISSING",
    "LiteralMatcher",
    "LikeMatcher",
    "EachLikeMatcher",
    "literal",
    "like",
    "each_like",
    "graphql_envelope",
    "null_payload_envelope",
    "rejected_envelope",
    # Results
    "ValidationResult",
    "Violation",
    "ViolationCode",
    "format_path",
    "get_path",
]
