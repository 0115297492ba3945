"""Codec abstraction shared by every converter."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar, Generic, TypeVar

from typedrest.codecs.errors import Context, ErrorTree
from typedrest.result import Err, Ok, Result

A = TypeVar("A")
O = TypeVar("O")


class Codec(ABC, Generic[A, O]):
    """Bidirectional, fallible converter between a typed value ``A`` and its wire form ``O``.

    ``encode`` is total over well-typed values; ``validate`` is partial over arbitrary
    input and reports every problem it finds as an :class:`ErrorTree` instead of raising.
    Instances are immutable once built and are shared freely between concurrent calls.
    """

    tag: ClassVar[str] = "Codec"

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def is_instance(self, value: object) -> bool:
        """Return whether ``value`` is already a well-typed ``A``."""

    @abstractmethod
    def validate(self, value: object, context: Context) -> Result[A, ErrorTree]:
        """Decode ``value`` found at ``context`` (the keys leading to it from the root)."""

    @abstractmethod
    def encode(self, value: A) -> O:
        """Convert a typed value into its wire representation."""

    def decode(self, value: object) -> Result[A, ErrorTree]:
        return self.validate(value, ())

    def failure(self, value: Any, context: Context, message: str | None = None) -> Err[ErrorTree]:
        return Err(ErrorTree.single(context, self.name, value, message))

    def success(self, value: A) -> Ok[A]:
        return Ok(value)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"
