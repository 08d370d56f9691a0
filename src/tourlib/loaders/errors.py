"""Error kinds raised by the resource loading pipeline."""

from __future__ import annotations

from typing import Optional


class ResourceLoadError(Exception):
    """
    Base class for every failure surfaced by :class:`ResourceLoader`.

    Carries the failing item's name, kind and location so callers can report
    which asset broke the batch.
    """

    def __init__(
        self,
        message: str,
        name: Optional[str] = None,
        kind: Optional[object] = None,
        location: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.name = name
        self.kind = kind
        self.location = location

    def attach(self, name: str, kind: object, location: str) -> "ResourceLoadError":
        """Fill in any missing descriptor context and return self."""
        if self.name is None:
            self.name = name
        if self.kind is None:
            self.kind = kind
        if self.location is None:
            self.location = location
        return self

    def __str__(self) -> str:
        kind = getattr(self.kind, "value", self.kind)
        if self.name is None:
            return self.message
        return f"{self.message} (resource '{self.name}', kind '{kind}', location '{self.location}')"


class TransportError(ResourceLoadError):
    """Fetching the bytes for a resource failed."""


class DecodeError(ResourceLoadError):
    """The payload was fetched but is malformed for its declared kind."""


class UnsupportedKindError(ResourceLoadError):
    """No loading strategy is registered for the descriptor's kind."""


__all__ = [
    "ResourceLoadError",
    "TransportError",
    "DecodeError",
    "UnsupportedKindError",
]
