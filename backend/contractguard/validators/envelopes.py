"""GraphQL response envelopes - contracts for the ``{data, errors}`` wrapper.

An operation can end three ways, and each is its own contract:
    - success: ``{"data": {"<operation>": <payload>}}``
    - null payload: ``{"data": {"<operation>": null}}`` (served with status 200,
      e.g. an unauthenticated mutation)
    - rejection: ``{"errors": [{"message": ...}, ...]}`` (served with status 400)
"""

from typing import Any

from contractguard.validators.matchers import each_like, literal
from contractguard.validators.rules import nullable, of_type, rule_set
from contractguard.validators.schema import Schema, as_field_spec


def graphql_envelope(operation: str, payload: Any) -> Schema:
    """Wrap a payload contract as ``data.<operation>``.

    Args:
        operation: Root field name, e.g. ``"addCategory"``
        payload: Schema, Matcher, RuleSet or plain dict describing the payload

    Returns:
        Schema for the full response body
    """
    return Schema({"data": Schema({operation: as_field_spec(payload, operation)})})


def null_payload_envelope(operation: str) -> Schema:
    """Contract for a response whose operation resolved to ``null``."""
    return Schema({"data": Schema({operation: literal(None)})})


def rejected_envelope() -> Schema:
    """Contract for a rejected operation: at least one error with a message."""
    return Schema(
        {
            "errors": each_like({"message": "error"}, min=1),
            "data": rule_set(nullable(), of_type("object")),
        }
    )
