"""Leaf codecs: JSON scalars, literals and pydantic-backed types."""

from __future__ import annotations

import json
import math
from collections.abc import Iterable
from datetime import date, datetime, timedelta
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from typedrest.codecs.base import Codec
from typedrest.codecs.errors import Context, DecodeFailure, ErrorTree
from typedrest.result import Err, Result


class StringCodec(Codec[str, str]):
    tag = "StringType"

    def __init__(self) -> None:
        super().__init__("string")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, str)

    def validate(self, value: object, context: Context) -> Result[str, ErrorTree]:
        return self.success(value) if isinstance(value, str) else self.failure(value, context)

    def encode(self, value: str) -> str:
        return value


class IntegerCodec(Codec[int, int]):
    tag = "IntegerType"

    def __init__(self) -> None:
        super().__init__("integer")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)

    def validate(self, value: object, context: Context) -> Result[int, ErrorTree]:
        return self.success(value) if self.is_instance(value) else self.failure(value, context)  # type: ignore[arg-type]

    def encode(self, value: int) -> int:
        return value


class NumberCodec(Codec[float, float]):
    """Any finite JSON number; integers are kept as ``int``."""

    tag = "NumberType"

    def __init__(self) -> None:
        super().__init__("number")

    def is_instance(self, value: object) -> bool:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False
        return math.isfinite(value)

    def validate(self, value: object, context: Context) -> Result[float, ErrorTree]:
        return self.success(value) if self.is_instance(value) else self.failure(value, context)  # type: ignore[arg-type]

    def encode(self, value: float) -> float:
        return value


class BooleanCodec(Codec[bool, bool]):
    tag = "BooleanType"

    def __init__(self) -> None:
        super().__init__("boolean")

    def is_instance(self, value: object) -> bool:
        return isinstance(value, bool)

    def validate(self, value: object, context: Context) -> Result[bool, ErrorTree]:
        return self.success(value) if isinstance(value, bool) else self.failure(value, context)

    def encode(self, value: bool) -> bool:
        return value


class NullCodec(Codec[None, None]):
    tag = "NullType"

    def __init__(self) -> None:
        super().__init__("null")

    def is_instance(self, value: object) -> bool:
        return value is None

    def validate(self, value: object, context: Context) -> Result[None, ErrorTree]:
        return self.success(None) if value is None else self.failure(value, context)

    def encode(self, value: None) -> None:
        return None


class UnknownCodec(Codec[Any, Any]):
    tag = "UnknownType"

    def __init__(self) -> None:
        super().__init__("unknown")

    def is_instance(self, value: object) -> bool:
        return True

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        return self.success(value)

    def encode(self, value: Any) -> Any:
        return value


def _same_literal(value: object, literal: object) -> bool:
    # 1 == True in Python, but a boolean literal never matches a number and vice versa
    if isinstance(value, bool) or isinstance(literal, bool):
        return isinstance(value, bool) and isinstance(literal, bool) and value == literal
    if isinstance(literal, str):
        return isinstance(value, str) and value == literal
    return isinstance(value, (int, float)) and value == literal


class LiteralCodec(Codec[Any, Any]):
    """Exactly one string, number or boolean constant."""

    tag = "LiteralType"

    def __init__(self, value: str | int | float | bool) -> None:
        super().__init__(json.dumps(value))
        self.value = value

    def is_instance(self, value: object) -> bool:
        return _same_literal(value, self.value)

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        return self.success(self.value) if self.is_instance(value) else self.failure(value, context)

    def encode(self, value: Any) -> Any:
        return value


class KeyofCodec(Codec[str, str]):
    """One of a fixed set of strings."""

    tag = "KeyofType"

    def __init__(self, keys: Iterable[str], name: str | None = None) -> None:
        self.keys = frozenset(keys)
        super().__init__(name or " | ".join(json.dumps(key) for key in sorted(self.keys)))

    def is_instance(self, value: object) -> bool:
        return isinstance(value, str) and value in self.keys

    def validate(self, value: object, context: Context) -> Result[str, ErrorTree]:
        return self.success(value) if self.is_instance(value) else self.failure(value, context)  # type: ignore[arg-type]

    def encode(self, value: str) -> str:
        return value


class AdaptedCodec(Codec[Any, Any]):
    """Codec delegating to a pydantic ``TypeAdapter``.

    Validation errors raised by pydantic are translated into failures whose paths
    continue from the current context, so a model nested inside an object codec
    reports ``body.items.0.name`` rather than ``items.0.name``.
    """

    tag = "AdaptedType"

    def __init__(self, python_type: Any, name: str | None = None) -> None:
        super().__init__(name or getattr(python_type, "__name__", repr(python_type)))
        self.python_type = python_type
        self._adapter: TypeAdapter[Any] = TypeAdapter(python_type)

    def is_instance(self, value: object) -> bool:
        try:
            self._adapter.validate_python(value, strict=True)
        except ValidationError:
            return False
        return True

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        try:
            return self.success(self._adapter.validate_python(value))
        except ValidationError as exc:
            return Err(self._error_tree(exc, context))

    def encode(self, value: Any) -> Any:
        return self._adapter.dump_python(value, mode="json")

    def _error_tree(self, exc: ValidationError, context: Context) -> ErrorTree:
        return ErrorTree(
            tuple(
                DecodeFailure(context + tuple(error["loc"]), self.name, error.get("input"), error["msg"])
                for error in exc.errors(include_url=False)
            )
        )


class IsoCodec(AdaptedCodec):
    """ISO 8601 text decoded into ``datetime``, ``date`` or ``timedelta``."""

    tag = "ISOType"

    def validate(self, value: object, context: Context) -> Result[Any, ErrorTree]:
        if not isinstance(value, str):
            return self.failure(value, context, f"expected an ISO 8601 string for {self.name}")
        return super().validate(value, context)

    def is_instance(self, value: object) -> bool:
        if self.python_type is date and isinstance(value, datetime):
            return False
        return isinstance(value, self.python_type)


def model(model_type: type[BaseModel]) -> AdaptedCodec:
    """Codec for a pydantic model; wire form is the model's JSON-mode dump."""

    return AdaptedCodec(model_type, name=model_type.__name__)


def adapted(python_type: Any, name: str | None = None) -> AdaptedCodec:
    return AdaptedCodec(python_type, name)


def literal(value: str | int | float | bool) -> LiteralCodec:
    return LiteralCodec(value)


def keyof(keys: Iterable[str], name: str | None = None) -> KeyofCodec:
    return KeyofCodec(keys, name)


string = StringCodec()
integer = IntegerCodec()
number = NumberCodec()
boolean = BooleanCodec()
null = NullCodec()
unknown = UnknownCodec()

iso_datetime = IsoCodec(datetime, name="ISOCombinedDateTime")
iso_date = IsoCodec(date, name="ISODate")
iso_duration = IsoCodec(timedelta, name="ISOTimeDuration")
