"""contractguard - response contract verification and shared auth sessions for API test suites.

Usage:
    from contractguard import Schema, SessionManager, rule_set, required, of_type, validate

    schema = Schema({"data": {"addCategory": {"name": rule_set(required(), of_type("string"))}}})
    validate(schema, response_body).raise_for_violations()
"""

from contractguard.exceptions import (
    AuthenticationError,
    ContractGuardError,
    ContractViolationError,
    SchemaDefinitionError,
    SessionExpired,
)
from contractguard.logging_config import configure_logging
from contractguard.models.session import Credentials, ExchangeResult, Session, SessionState
from contractguard.services.session_manager import SessionManager, token_exchange
from contractguard.validators import (
    ContractValidator,
    Schema,
    ValidationResult,
    Violation,
    ViolationCode,
    allow,
    each_like,
    graphql_envelope,
    like,
    literal,
    minimum,
    null_payload_envelope,
    nullable,
    of_type,
    one_of,
    pattern,
    positive,
    rejected_envelope,
    required,
    rule_set,
    validate,
)

__version__ = "0.1.0"

__all__ = [
    "configure_logging",
    "AuthenticationError",
    "ContractGuardError",
    "ContractViolationError",
    "SchemaDefinitionError",
    "SessionExpired",
    "Credentials",
    "ExchangeResult",
    "Session",
    "SessionState",
    "SessionManager",
    "token_exchange",
    "ContractValidator",
    "Schema",
    "ValidationResult",
    "Violation",
    "ViolationCode",
    "allow",
    "each_like",
    "graphql_envelope",
    "like",
    "literal",
    "minimum",
    "null_payload_envelope",
    "nullable",
    "of_type",
    "one_of",
    "pattern",
    "positive",
    "rejected_envelope",
    "required",
    "rule_set",
    "validate",
]
