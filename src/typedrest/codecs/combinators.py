"""Composite codecs built from other codecs."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any

from typedrest.codecs.base import Codec
from typedrest.codecs.errors import Context, ErrorTree
from typedrest.codecs.primitives import null, string
from typedrest.result import Err, Ok, Result


def _props_name(props: Mapping[str, Codec[Any, Any]]) -> str:
    return ", ".join(f"{key}: {codec.name}" for key, codec in props.items())


def _is_string_keyed(value: object) -> bool:
    return isinstance(value, Mapping) and all(isinstance(key, str) for key in value)


class ObjectCodec(Codec[dict[str, Any], dict[str, Any]]):
    """String-keyed mapping with required properties.

    Keys not declared in ``props`` are carried through unchanged on decode and
    encode; use :func:`typedrest.codecs.excess.strict` to reject them.
    """

    tag = "InterfaceType"

    def __init__(self, props: Mapping[str, Codec[Any, Any]], name: str | None = None) -> None:
        self.props = dict(props)
        super().__init__(name or f"{{ {_props_name(self.props)} }}")

    def _is_optional(self, key: str) -> bool:
        return False

    def is_instance(self, value: object) -> bool:
        if not _is_string_keyed(value):
            return False
        for key, codec in self.props.items():
            if key not in value:  # type: ignore[operator]
                if self._is_optional(key):
                    continue
                return False
            if not codec.is_instance(value[key]):  # type: ignore[index]
                return False
        return True

    def validate(self, value: object, context: Context) -> Result[dict[str, Any], ErrorTree]:
        if not _is_string_keyed(value):
            return self.failure(value, context)
        decoded = dict(value)  # type: ignore[call-overload]
        errors: list[ErrorTree] = []
        for key, codec in self.props.items():
            if key not in decoded:
                if not self._is_optional(key):
                    errors.append(ErrorTree.single(context + (key,), codec.name, None, "missing required key"))
                continue
            result = codec.validate(decoded[key], context + (key,))
            if isinstance(result, Err):
                errors.append(result.error)
            else:
                decoded[key] = result.value
        if errors:
            return Err(ErrorTree.concat(errors))
        return self.success(decoded)

    def encode(self, value: dict[str, Any]) -> dict[str, Any]:
        encoded = dict(value)
        for key, codec in self.props.items():
            if key in encoded:
                encoded[key] = codec.encode(encoded[key])
        return encoded


class PartialCodec(ObjectCodec):
    """String-keyed mapping whose declared properties may all be absent."""

    tag = "PartialType"

    def __init__(self, props: Mapping[str, Codec[Any, Any]], name: str | None = None) -> None:
        super().__init__(props, name or f"Partial<{{ {_props_name(dict(props))} }}>")

    def _is_optional(self, key: str) -> bool:
        return True


class ArrayCodec(Codec[list[Any], list[Any]]):
    tag = "ArrayType"

    def __init__(self, element: Codec[Any, Any], name: str | None = None) -> None:
        self.element = element
        super().__init__(name or f"Array<{element.name}>")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, list) and all(self.element.is_instance(item) for item in value)

    def validate(self, value: object, context: Context) -> Result[list[Any], ErrorTree]:
        if not isinstance(value, (list, tuple)):
            return self.failure(value, context)
        decoded: list[Any] = []
        errors: list[ErrorTree] = []
        for index, item in enumerate(value):
            result = self.element.validate(item, context + (index,))
            if isinstance(result, Err):
                errors.append(result.error)
            else:
                decoded.append(result.value)
        if errors:
            return Err(ErrorTree.concat(errors))
        return self.success(decoded)

    def encode(self, value: list[Any]) -> list[Any]:
        return [self.element.encode(item) for item in value]


class RecordCodec(Codec[dict[Any, Any], dict[str, Any]]):
    """Mapping with arbitrary keys validated by ``key`` and values by ``value``."""

    tag = "DictionaryType"

    def __init__(self, key: Codec[Any, str], value: Codec[Any, Any], name: str | None = None) -> None:
        self.key = key
        self.value = value
        super().__init__(name or f"{{ [K in {key.name}]: {value.name} }}")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, Mapping) and all(
            self.key.is_instance(k) and self.value.is_instance(v) for k, v in value.items()
        )

    def validate(self, value: object, context: Context) -> Result[dict[Any, Any], ErrorTree]:
        if not _is_string_keyed(value):
            return self.failure(value, context)
        decoded: dict[Any, Any] = {}
        errors: list[ErrorTree] = []
        for raw_key, raw_value in value.items():  # type: ignore[attr-defined]
            key_result = self.key.validate(raw_key, context + (raw_key,))
            value_result = self.value.validate(raw_value, context + (raw_key,))
            if isinstance(key_result, Err):
                errors.append(key_result.error)
            if isinstance(value_result, Err):
                errors.append(value_result.error)
            if isinstance(key_result, Ok) and isinstance(value_result, Ok):
                decoded[key_result.value] = value_result.value
        if errors:
            return Err(ErrorTree.concat(errors))
        return self.success(decoded)

    def encode(self, value: dict[Any, Any]) -> dict[str, Any]:
        return {self.key.encode(k): self.value.encode(v) for k, v in value.items()}


class UnionCodec(Codec[Any, Any]):
    """Accepts the first member that decodes; otherwise reports every member's failures."""

    tag = "UnionType"

    def __init__(self, members: Sequence[Codec[Any, Any]], name: str | None = None) -> None:
        if not members:
            raise ValueError("A union needs at least one member codec")
        self.members = tuple(members)
        super().__init__(name or f"({' | '.join(member.name for member in self.members)})")

    def is_instance(self, value: object) -> bool:
        return any(member.is_instance(value) for member in self.members)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        errors: list[ErrorTree] = []
        for member in self.members:
            result = member.validate(value, context)
            if isinstance(result, Ok):
                return result
            errors.append(result.error)
        return Err(ErrorTree.concat(errors))

    def encode(self, value: Any) -> Any:
        for member in self.members:
            if member.is_instance(value):
                return member.encode(value)
        raise ValueError(f"{value!r} is not an instance of any member of {self.name}")


class IntersectionCodec(Codec[Any, Any]):
    """Value must satisfy every member; decoded mappings are merged in member order."""

    tag = "IntersectionType"

    def __init__(self, members: Sequence[Codec[Any, Any]], name: str | None = None) -> None:
        if not members:
            raise ValueError("An intersection needs at least one member codec")
        self.members = tuple(members)
        super().__init__(name or f"({' & '.join(member.name for member in self.members)})")

    def is_instance(self, value: object) -> bool:
        return all(member.is_instance(value) for member in self.members)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        decoded: list[Any] = []
        errors: list[ErrorTree] = []
        for member in self.members:
            result = member.validate(value, context)
            if isinstance(result, Err):
                errors.append(result.error)
            else:
                decoded.append(result.value)
        if errors:
            return Err(ErrorTree.concat(errors))
        return self.success(_merge(value, decoded))

    def encode(self, value: Any) -> Any:
        return _merge(value, [member.encode(value) for member in self.members])


def _merge(base: Any, values: list[Any]) -> Any:
    # take only what each member changed so one member cannot undo another's decoding
    if isinstance(base, Mapping) and all(isinstance(value, dict) for value in values):
        merged = dict(base)
        for value in values:
            for key, item in value.items():
                if key not in base or item is not base[key]:
                    merged[key] = item
        return merged
    for value in values:
        if value is not base:
            return value
    return base


class RefinementCodec(Codec[Any, Any]):
    """Base codec plus a predicate over the decoded value."""

    tag = "RefinementType"

    def __init__(self, base: Codec[Any, Any], predicate: Callable[[Any], bool], name: str) -> None:
        self.base = base
        self.predicate = predicate
        super().__init__(name)

    def is_instance(self, value: object) -> bool:
        return self.base.is_instance(value) and self.predicate(value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        result = self.base.validate(value, context)
        if isinstance(result, Err):
            return result
        if not self.predicate(result.value):
            return self.failure(value, context)
        return result

    def encode(self, value: Any) -> Any:
        return self.base.encode(value)


class NamedCodec(Codec[Any, Any]):
    """Renames a codec without changing its behaviour (used for documentation output)."""

    tag = "NamedType"

    def __init__(self, base: Codec[Any, Any], name: str) -> None:
        self.base = base
        super().__init__(name)

    def is_instance(self, value: object) -> bool:
        return self.base.is_instance(value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        return self.base.validate(value, context)

    def encode(self, value: Any) -> Any:
        return self.base.encode(value)


class ReadonlyCodec(Codec[Any, Any]):
    """Marks a value as not to be mutated; decoding and encoding are unchanged."""

    tag = "ReadonlyType"

    def __init__(self, base: Codec[Any, Any], name: str | None = None) -> None:
        self.base = base
        super().__init__(name or f"Readonly<{base.name}>")

    def is_instance(self, value: object) -> bool:
        return self.base.is_instance(value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        return self.base.validate(value, context)

    def encode(self, value: Any) -> Any:
        return self.base.encode(value)


class RecursiveCodec(Codec[Any, Any]):
    """Self-referential codec; ``definition`` receives this codec and returns the real one.

    The definition is resolved on first use so it can refer to the recursive codec itself.
    """

    tag = "RecursiveType"

    def __init__(self, name: str, definition: Callable[[Codec[Any, Any]], Codec[Any, Any]]) -> None:
        super().__init__(name)
        self._definition = definition
        self._resolved: Codec[Any, Any] | None = None

    @property
    def resolved(self) -> Codec[Any, Any]:
        if self._resolved is None:
            self._resolved = self._definition(self)
        return self._resolved

    def is_instance(self, value: object) -> bool:
        return self.resolved.is_instance(value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        return self.resolved.validate(value, context)

    def encode(self, value: Any) -> Any:
        return self.resolved.encode(value)


def object_(props: Mapping[str, Codec[Any, Any]], name: str | None = None) -> ObjectCodec:
    return ObjectCodec(props, name)


def partial(props: Mapping[str, Codec[Any, Any]], name: str | None = None) -> PartialCodec:
    return PartialCodec(props, name)


def array(element: Codec[Any, Any], name: str | None = None) -> ArrayCodec:
    return ArrayCodec(element, name)


def record(value: Codec[Any, Any], key: Codec[Any, str] = string, name: str | None = None) -> RecordCodec:
    return RecordCodec(key, value, name)


def union(*members: Codec[Any, Any], name: str | None = None) -> UnionCodec:
    return UnionCodec(members, name)


def intersection(*members: Codec[Any, Any], name: str | None = None) -> IntersectionCodec:
    return IntersectionCodec(members, name)


def refinement(base: Codec[Any, Any], predicate: Callable[[Any], bool], name: str) -> RefinementCodec:
    return RefinementCodec(base, predicate, name)


def named(base: Codec[Any, Any], name: str) -> NamedCodec:
    return NamedCodec(base, name)


def readonly(base: Codec[Any, Any], name: str | None = None) -> ReadonlyCodec:
    return ReadonlyCodec(base, name)


def recursive(name: str, definition: Callable[[Codec[Any, Any]], Codec[Any, Any]]) -> RecursiveCodec:
    return RecursiveCodec(name, definition)


def nullable(codec: Codec[Any, Any]) -> UnionCodec:
    return UnionCodec((codec, null), name=f"{codec.name} | null")
