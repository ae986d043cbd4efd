"""Schema - an immutable tree of named fields forming a response contract."""

from collections.abc import Iterable, Mapping
from types import MappingProxyType
from typing import Any, Union

from contractguard.exceptions import SchemaDefinitionError
from contractguard.validators.matchers import MATCHER_CLASSES, Matcher
from contractguard.validators.rules import RULE_CLASSES, RuleSet

FieldSpec = Union[RuleSet, "Schema", Matcher]


def as_field_spec(node: Any, name: str = "") -> FieldSpec:
    """Normalize a field declaration.

    Accepts a RuleSet, Schema or Matcher as-is; a single rule or a list/tuple
    of rules becomes a RuleSet; a plain dict becomes a nested Schema.
    """
    if isinstance(node, (RuleSet, Schema, *MATCHER_CLASSES)):
        return node
    if isinstance(node, RULE_CLASSES):
        return RuleSet(rules=(node,))
    if isinstance(node, (list, tuple)) and all(isinstance(r, RULE_CLASSES) for r in node):
        return RuleSet(rules=tuple(node))
    if isinstance(node, Mapping):
        return Schema(node)
    raise SchemaDefinitionError(f"Field '{name}' has an invalid declaration: {node!r}")


class Schema:
    """Declared contract for an object value.

    Unknown keys in the validated value are ignored. As a nested field the
    schema is required unless ``required=False``; ``nullable=True`` accepts
    ``null`` in place of the object.
    """

    __slots__ = ("_fields", "required", "nullable")

    def __init__(
        self,
        fields: Union[Mapping[str, Any], Iterable[tuple[str, Any]]],
        *,
        required: bool = True,
        nullable: bool = False,
    ):
        pairs = fields.items() if isinstance(fields, Mapping) else fields
        declared: dict[str, FieldSpec] = {}
        for entry in pairs:
            try:
                name, node = entry
            except (TypeError, ValueError):
                raise SchemaDefinitionError(f"Expected (name, declaration) pair, got {entry!r}") from None
            if not isinstance(name, str) or not name:
                raise SchemaDefinitionError(f"Field names must be non-empty strings, got {name!r}")
            if name in declared:
                raise SchemaDefinitionError(f"Field '{name}' declared twice")
            declared[name] = as_field_spec(node, name)

        object.__setattr__(self, "_fields", MappingProxyType(declared))
        object.__setattr__(self, "required", required)
        object.__setattr__(self, "nullable", nullable)

    def __setattr__(self, name, value):
        raise AttributeError("Schema is immutable")

    @property
    def fields(self) -> Mapping[str, FieldSpec]:
        return self._fields

    def __contains__(self, name: str) -> bool:
        return name in self._fields

    def __getitem__(self, name: str) -> FieldSpec:
        return self._fields[name]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return (
            dict(self._fields) == dict(other._fields)
            and self.required == other.required
            and self.nullable == other.nullable
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Schema({dict(self._fields)!r}, required={self.required}, nullable={self.nullable})"
