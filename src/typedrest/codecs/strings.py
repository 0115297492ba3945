"""Codecs whose wire form is a string: path segments, query values and headers."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from typedrest.codecs.base import Codec
from typedrest.codecs.combinators import ObjectCodec, PartialCodec, _is_string_keyed
from typedrest.codecs.errors import Context, ErrorTree
from typedrest.codecs.primitives import LiteralCodec
from typedrest.result import Err, Ok, Result

T = TypeVar("T")

_INT_RE = re.compile(r"^[+-]?\d+$")


class NumberFromString(Codec[float, str]):
    """Decimal text to a finite number; integral text stays ``int``."""

    tag = "NumberFromString"

    def __init__(self) -> None:
        super().__init__("NumberFromString")

    def is_instance(self, value: object) -> bool:
        return not isinstance(value, bool) and isinstance(value, (int, float)) and math.isfinite(value)

    def validate(self, value: object, context: Context) -> Result[float, ErrorTree]:
        if not isinstance(value, str):
            return self.failure(value, context)
        text = value.strip()
        try:
            parsed = int(text) if _INT_RE.match(text) else float(text)
        except ValueError:
            return self.failure(value, context)
        if not math.isfinite(parsed):
            return self.failure(value, context)
        return self.success(parsed)

    def encode(self, value: float) -> str:
        return str(value)


class IntFromString(Codec[int, str]):
    tag = "IntFromString"

    def __init__(self) -> None:
        super().__init__("IntFromString")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def validate(self, value: object, context: Context) -> Result[int, ErrorTree]:
        if not isinstance(value, str) or not _INT_RE.match(value.strip()):
            return self.failure(value, context)
        try:
            return self.success(int(value))
        except ValueError:
            # beyond the interpreter's int digit limit
            return self.failure(value, context)

    def encode(self, value: int) -> str:
        return str(value)


class BooleanFromString(Codec[bool, str]):
    """``"true"``/``"false"`` to ``bool``."""

    tag = "BooleanFromString"

    def __init__(self) -> None:
        super().__init__("BooleanFromString")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, bool)

    def validate(self, value: object, context: Context) -> Result[bool, ErrorTree]:
        if value == "true":
            return self.success(True)
        if value == "false":
            return self.success(False)
        return self.failure(value, context)

    def encode(self, value: bool) -> str:
        return "true" if value else "false"


class LiteralFromString(Codec[Any, str]):
    """Parse a string with ``transformer`` and require it to equal one literal.

    Used to turn route and query segments into fixed discriminant values.
    """

    tag = "LiteralFromString"

    def __init__(self, literal: LiteralCodec, transformer: Codec[Any, str]) -> None:
        super().__init__(f"LiteralFromString<{literal.name}>")
        self.literal = literal
        self.transformer = transformer

    def is_instance(self, value: object) -> bool:
        return self.literal.is_instance(value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        transformed = self.transformer.validate(value, context)
        if isinstance(transformed, Err):
            return transformed
        return self.literal.validate(transformed.value, context)

    def encode(self, value: Any) -> str:
        return self.transformer.encode(self.literal.encode(value))


def number_literal_from_string(value: int | float) -> LiteralFromString:
    return LiteralFromString(LiteralCodec(value), NumberFromString())


def boolean_literal_from_string(value: bool) -> LiteralFromString:
    return LiteralFromString(LiteralCodec(value), BooleanFromString())


class CommaSeparated(Codec[list[Any], str]):
    """``"a,b,c"`` decoded element by element; every bad element is reported."""

    tag = "CommaSeparated"

    def __init__(self, element: Codec[Any, str]) -> None:
        super().__init__(f"CommaSeparated<{element.name}>")
        self.element = element

    def is_instance(self, value: object) -> bool:
        return isinstance(value, list) and all(self.element.is_instance(item) for item in value)

    def validate(self, value: object, context: Context) -> Result[list[Any], ErrorTree]:
        if not isinstance(value, str):
            return self.failure(value, context)
        if not value:
            return self.success([])
        decoded: list[Any] = []
        errors: list[ErrorTree] = []
        for index, part in enumerate(value.split(",")):
            result = self.element.validate(part, context + (index,))
            if isinstance(result, Err):
                errors.append(result.error)
            else:
                decoded.append(result.value)
        if errors:
            return Err(ErrorTree.concat(errors))
        return self.success(decoded)

    def encode(self, value: list[Any]) -> str:
        return ",".join(self.element.encode(item) for item in value)


class _CaseInsensitiveMixin:
    props: dict[str, Codec[Any, Any]]
    name: str

    def _canonicalize(self, value: Mapping[str, Any], context: Context) -> Result[dict[str, Any], ErrorTree]:
        # only keys matching a declared property are lowered, others pass through untouched
        canonical: dict[str, Any] = {}
        origin: dict[str, str] = {}
        errors: list[ErrorTree] = []
        for key, item in value.items():
            lowered = key.lower()
            target = lowered if lowered in self.props else key
            if target in origin:
                errors.append(
                    ErrorTree.single(
                        context + (target,),
                        self.name,
                        item,
                        f"ambiguous key: {origin[target]!r} and {key!r} both match {target!r}",
                    )
                )
                continue
            origin[target] = key
            canonical[target] = item
        if errors:
            return Err(ErrorTree.concat(errors))
        return Ok(canonical)


class CaseInsensitiveObject(_CaseInsensitiveMixin, ObjectCodec):
    """Required properties matched regardless of key case (HTTP headers)."""

    tag = "CaseInsensitiveType"

    def __init__(self, props: Mapping[str, Codec[Any, Any]]) -> None:
        lowered = {key.lower(): codec for key, codec in props.items()}
        super().__init__(lowered)
        self.name = f"CaseInsensitive<{self.name}>"

    def validate(self, value: object, context: Context) -> Result[dict[str, Any], ErrorTree]:
        if not _is_string_keyed(value):
            return self.failure(value, context)
        canonical = self._canonicalize(value, context)
        if isinstance(canonical, Err):
            return canonical
        return super().validate(canonical.value, context)


class CaseInsensitivePartial(_CaseInsensitiveMixin, PartialCodec):
    """Optional properties matched regardless of key case."""

    tag = "CaseInsensitivePartialType"

    def __init__(self, props: Mapping[str, Codec[Any, Any]]) -> None:
        lowered = {key.lower(): codec for key, codec in props.items()}
        super().__init__(lowered)
        self.name = f"CaseInsensitive<{self.name}>"

    def validate(self, value: object, context: Context) -> Result[dict[str, Any], ErrorTree]:
        if not _is_string_keyed(value):
            return self.failure(value, context)
        canonical = self._canonicalize(value, context)
        if isinstance(canonical, Err):
            return canonical
        return super().validate(canonical.value, context)


def case_insensitive_object(props: Mapping[str, Codec[Any, Any]]) -> CaseInsensitiveObject:
    return CaseInsensitiveObject(props)


def case_insensitive_partial(props: Mapping[str, Codec[Any, Any]]) -> CaseInsensitivePartial:
    return CaseInsensitivePartial(props)


@dataclass(frozen=True, slots=True)
class Expected(Generic[T]):
    value: T

    @property
    def expected(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Unexpected:
    value: str

    @property
    def expected(self) -> bool:
        return False


class HandleUnexpected(Codec[Expected[Any] | Unexpected, str]):
    """Enumeration that keeps unknown strings instead of failing.

    Lets a client keep working when the server adds a new case.
    """

    tag = "HandleUnexpected"

    def __init__(self, cases: Codec[Any, str]) -> None:
        super().__init__(f"HandleUnexpected<{cases.name}>")
        self.cases = cases

    def is_instance(self, value: object) -> bool:
        if isinstance(value, Expected):
            return self.cases.is_instance(value.value)
        return isinstance(value, Unexpected) and isinstance(value.value, str)

    def validate(self, value: object, context: Context) -> Result[Expected[Any] | Unexpected, ErrorTree]:
        if not isinstance(value, str):
            return self.failure(value, context)
        decoded = self.cases.validate(value, context)
        if isinstance(decoded, Ok):
            return self.success(Expected(decoded.value))
        return self.success(Unexpected(value))

    def encode(self, value: Expected[Any] | Unexpected) -> str:
        if isinstance(value, Expected):
            return self.cases.encode(value.value)
        return value.value


number_from_string = NumberFromString()
int_from_string = IntFromString()
boolean_from_string = BooleanFromString()
