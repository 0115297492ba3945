"""Strict object codecs that reject keys their schema does not declare."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from typedrest.codecs.base import Codec
from typedrest.codecs.combinators import (
    IntersectionCodec,
    NamedCodec,
    ObjectCodec,
    PartialCodec,
    ReadonlyCodec,
    RecursiveCodec,
    RefinementCodec,
)
from typedrest.codecs.errors import Context, DecodeFailure, ErrorTree
from typedrest.result import Err, Result


def declared_keys(codec: Codec[Any, Any]) -> frozenset[str]:
    """Every required or optional property name reachable from ``codec``.

    Walks refinements, readonly wrappers, names, partials, intersections and recursive definitions.
    Unions are not flattened: which branch applies is only known per value.
    """

    return _declared_keys(codec, frozenset())


def _declared_keys(codec: Codec[Any, Any], visiting: frozenset[int]) -> frozenset[str]:
    if id(codec) in visiting:
        return frozenset()
    visiting = visiting | {id(codec)}
    if isinstance(codec, ObjectCodec):
        return frozenset(codec.props)
    if isinstance(codec, (RefinementCodec, ReadonlyCodec, NamedCodec, ExcessCodec)):
        return _declared_keys(codec.base, visiting)
    if isinstance(codec, RecursiveCodec):
        return _declared_keys(codec.resolved, visiting)
    if isinstance(codec, IntersectionCodec):
        keys: frozenset[str] = frozenset()
        for member in codec.members:
            keys |= _declared_keys(member, visiting)
        return keys
    raise TypeError(f"Cannot derive declared keys from {codec.name} ({codec.tag})")


def _excess_name(codec: Codec[Any, Any]) -> str:
    if isinstance(codec, PartialCodec):
        inner = ", ".join(f"{key}: {value.name}" for key, value in codec.props.items())
        return f"Partial<{{| {inner} |}}>"
    if isinstance(codec, ObjectCodec):
        inner = ", ".join(f"{key}: {value.name}" for key, value in codec.props.items())
        return f"{{| {inner} |}}"
    return f"Excess<{codec.name}>"


class ExcessCodec(Codec[dict[str, Any], dict[str, Any]]):
    """Wraps an object-shaped codec and fails on any key outside its declared set.

    The declared set is flattened once at construction. Excess keys are always an
    error; there is no mode that silently drops them.
    """

    tag = "ExcessType"

    def __init__(self, base: Codec[Any, Any], name: str | None = None) -> None:
        self.base = base
        self.keys = declared_keys(base)
        super().__init__(name or _excess_name(base))

    def _excess(self, value: Mapping[str, Any]) -> list[str]:
        return [key for key in value if key not in self.keys]

    def is_instance(self, value: object) -> bool:
        return isinstance(value, Mapping) and not self._excess(value) and self.base.is_instance(value)

    def validate(self, value: object, context: Context) -> Result[dict[str, Any], ErrorTree]:
        if not isinstance(value, Mapping) or not all(isinstance(key, str) for key in value):
            return self.failure(value, context)
        decoded = self.base.validate(value, context)
        if isinstance(decoded, Err):
            return decoded
        excess = self._excess(decoded.value)
        if excess:
            return Err(
                ErrorTree(
                    tuple(
                        DecodeFailure(context + (key,), self.name, decoded.value[key], f'excess key "{key}" found')
                        for key in excess
                    )
                )
            )
        return decoded

    def encode(self, value: dict[str, Any]) -> dict[str, Any]:
        return self.base.encode({key: item for key, item in value.items() if key in self.keys})


def strict(codec: Codec[Any, Any], name: str | None = None) -> ExcessCodec:
    return ExcessCodec(codec, name)
