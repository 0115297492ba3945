"""URL path templates made of literal segments and named parameter slots."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar
from urllib.parse import unquote

if TYPE_CHECKING:
    from typedrest.codecs.base import Codec

P = TypeVar("P")

_PLACEHOLDER_RE = re.compile(r"^\{([^{}]+)\}$")


@dataclass(frozen=True, slots=True)
class LiteralSegment:
    text: str


@dataclass(frozen=True, slots=True)
class Parameter:
    name: str

    def __post_init__(self) -> None:
        if not self.name.isidentifier():
            raise ValueError(f"Path parameter name must be a valid identifier: {self.name!r}")


Component = LiteralSegment | Parameter


@dataclass(frozen=True, slots=True)
class PathSubstitution(Generic[P]):
    """Typed path parameters plus the codec that turns them into strings."""

    codec: Codec[P, Mapping[str, str]]
    value: P


@dataclass(frozen=True, slots=True)
class PathTemplate:
    """Ordered literal/parameter components, e.g. ``/users/{user_id}/playlists``."""

    components: tuple[Component, ...]

    @classmethod
    def of(cls, parts: Iterable[str | Component | None]) -> PathTemplate:
        """Build from a list where strings are literals and ``None`` entries are dropped."""

        components: list[Component] = []
        for part in parts:
            if part is None:
                continue
            components.append(LiteralSegment(part) if isinstance(part, str) else part)
        return cls(tuple(components))

    @classmethod
    def parse(cls, text: str) -> PathTemplate:
        parts: list[Component] = []
        for segment in text.strip("/").split("/"):
            if not segment:
                continue
            match = _PLACEHOLDER_RE.match(segment)
            parts.append(Parameter(match.group(1)) if match else LiteralSegment(segment))
        return cls(tuple(parts))

    @property
    def parameter_names(self) -> tuple[str, ...]:
        return tuple(component.name for component in self.components if isinstance(component, Parameter))

    def render(self, substitution: PathSubstitution[Any] | None = None) -> str:
        """Join components with ``/`` behind a leading slash.

        Without a substitution every parameter renders as ``{name}``; with one, every
        parameter is replaced by its entry in the codec's encoding of the value.
        """

        encoded: Mapping[str, Any] | None = None
        if substitution is not None:
            encoded = substitution.codec.encode(substitution.value)
        segments = [""]
        for component in self.components:
            if isinstance(component, LiteralSegment):
                segments.append(component.text)
            elif encoded is None:
                segments.append(f"{{{component.name}}}")
            else:
                segments.append(str(encoded[component.name]))
        return "/".join(segments) or "/"

    def match(self, path: str) -> dict[str, str] | None:
        """Inverse of :meth:`render`: extract raw parameter strings, or ``None`` on mismatch."""

        trimmed = path.strip("/")
        segments = trimmed.split("/") if trimmed else []
        if len(segments) != len(self.components):
            return None
        parameters: dict[str, str] = {}
        for component, segment in zip(self.components, segments, strict=True):
            if isinstance(component, LiteralSegment):
                if component.text != segment:
                    return None
            elif not segment:
                return None
            else:
                parameters[component.name] = unquote(segment)
        return parameters

    def __str__(self) -> str:
        return self.render()
