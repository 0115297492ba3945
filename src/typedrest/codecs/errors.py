"""Structured decode failures."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any

PathKey = str | int
Context = tuple[PathKey, ...]

_JSON_SCALARS = (str, int, float, bool, type(None))


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """One leaf of an :class:`ErrorTree`.

    ``path`` is the sequence of keys and indices leading from the decoded root
    to the offending value, ``expected`` the name of the codec that rejected it.
    """

    path: Context
    expected: str
    actual: Any
    message: str | None = None

    @property
    def location(self) -> str:
        return ".".join(str(key) for key in self.path) or "<root>"

    def describe(self) -> str:
        if self.message:
            return f"{self.location}: {self.message}"
        return f"{self.location}: expected {self.expected}, got {self.actual!r}"


@dataclass(frozen=True, slots=True)
class ErrorTree:
    """Ordered collection of decode failures produced by one ``validate`` call."""

    failures: tuple[DecodeFailure, ...] = ()

    @classmethod
    def single(cls, path: Context, expected: str, actual: Any, message: str | None = None) -> ErrorTree:
        return cls((DecodeFailure(path, expected, actual, message),))

    @classmethod
    def concat(cls, trees: Iterable[ErrorTree]) -> ErrorTree:
        return cls(tuple(failure for tree in trees for failure in tree))

    def __iter__(self) -> Iterator[DecodeFailure]:
        return iter(self.failures)

    def __len__(self) -> int:
        return len(self.failures)

    def __bool__(self) -> bool:
        return bool(self.failures)

    def __add__(self, other: ErrorTree) -> ErrorTree:
        return ErrorTree(self.failures + other.failures)

    def messages(self) -> list[str]:
        return [failure.describe() for failure in self.failures]

    def to_jsonable(self) -> list[dict[str, Any]]:
        """Render failures as JSON-compatible dictionaries."""

        return [
            {
                "path": list(failure.path),
                "expected": failure.expected,
                "actual": failure.actual if isinstance(failure.actual, _JSON_SCALARS) else repr(failure.actual),
                "message": failure.describe(),
            }
            for failure in self.failures
        ]
