"""Matchers - structural patterns for looser assertions than a full Schema.

- literal(value): deep JSON equality
- like(shape): same types/shape as ``shape``, values ignored
- each_like(shape): array whose every element is like ``shape``
"""

from typing import Annotated, Any, Literal, Union

from pydantic import Field, field_validator

from contractguard.exceptions import SchemaDefinitionError
from contractguard.validators.rules import ContractNode, RuleSet

_SCALARS = (str, int, float, bool, type(None))


def _check_shape(shape: Any, where: str = "shape") -> None:
    """Reject shapes that cannot come out of a JSON decoder."""
    from contractguard.validators.schema import Schema

    if isinstance(shape, (LiteralMatcher, LikeMatcher, EachLikeMatcher, Schema, RuleSet, *_SCALARS)):
        return
    if isinstance(shape, dict):
        for key, sub in shape.items():
            if not isinstance(key, str):
                raise SchemaDefinitionError(f"{where}: object keys must be strings, got {key!r}")
            _check_shape(sub, f"{where}.{key}")
        return
    if isinstance(shape, (list, tuple)):
        for i, sub in enumerate(shape):
            _check_shape(sub, f"{where}[{i}]")
        return
    raise SchemaDefinitionError(f"{where}: unsupported value of type {type(shape).__name__}")


def _copy_shape(shape: Any) -> Any:
    """Rebuild plain dicts and lists; tuples become lists. Contract nodes are shared as-is."""
    if isinstance(shape, dict):
        return {key: _copy_shape(sub) for key, sub in shape.items()}
    if isinstance(shape, (list, tuple)):
        return [_copy_shape(sub) for sub in shape]
    return shape


class LiteralMatcher(ContractNode):
    kind: Literal["literal"] = "literal"
    value: Any

    @field_validator("value")
    @classmethod
    def _json_value(cls, v: Any) -> Any:
        _check_shape(v, "literal")
        return _copy_shape(v)


class LikeMatcher(ContractNode):
    kind: Literal["like"] = "like"
    shape: Any

    @field_validator("shape")
    @classmethod
    def _json_shape(cls, v: Any) -> Any:
        _check_shape(v, "like")
        return _copy_shape(v)


class EachLikeMatcher(ContractNode):
    kind: Literal["eachLike"] = "eachLike"
    shape: Any
    min: int = 0

    @field_validator("shape")
    @classmethod
    def _json_shape(cls, v: Any) -> Any:
        _check_shape(v, "each_like")
        return _copy_shape(v)

    @field_validator("min", mode="before")
    @classmethod
    def _non_negative(cls, v: Any) -> int:
        if isinstance(v, bool) or not isinstance(v, int) or v < 0:
            raise ValueError(f"each_like() min must be a non-negative integer, got {v!r}")
        return v


Matcher = Annotated[Union[LiteralMatcher, LikeMatcher, EachLikeMatcher], Field(discriminator="kind")]

MATCHER_CLASSES = (LiteralMatcher, LikeMatcher, EachLikeMatcher)


def literal(value: Any) -> LiteralMatcher:
    return LiteralMatcher(value=value)


def like(shape: Any) -> LikeMatcher:
    return LikeMatcher(shape=shape)


def each_like(shape: Any, min: int = 0) -> EachLikeMatcher:
    return EachLikeMatcher(shape=shape, min=min)
