"""Exception hierarchy for contract definitions and authentication sessions.

Data-shape problems are never raised: the validator reports them as
violations inside a ValidationResult. Only programmer errors (malformed
contracts) and authentication failures surface as exceptions.
"""

from typing import Optional


class ContractGuardError(Exception):
    """Base class for every error raised by contractguard."""


class SchemaDefinitionError(ContractGuardError, ValueError):
    """A Rule, Schema or Matcher was declared with invalid parameters."""


class ContractViolationError(ContractGuardError, AssertionError):
    """Raised on demand when a validation result holds violations."""

    def __init__(self, violations: list):
        self.violations = violations
        lines = [f"{len(violations)} contract violation(s):"]
        lines.extend(f"  - {v.render()}" for v in violations)
        super().__init__("\n".join(lines))


class AuthenticationError(ContractGuardError):
    """The credential exchange failed, timed out, or returned no usable token."""

    def __init__(self, reason: str, identity: Optional[str] = None):
        self.reason = reason
        self.identity = identity
        message = f"Authentication failed: {reason}"
        if identity:
            message = f"Authentication failed for '{identity}': {reason}"
        super().__init__(message)


class SessionExpired(ContractGuardError):
    """The cached session is past its expiry; triggers re-acquisition."""
