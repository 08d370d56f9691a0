"""Resource descriptors and load progress snapshots."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union


class ResourceKind(Enum):
    """Asset kinds the loader knows how to fetch and decode."""

    MODEL = "model"
    TEXTURE = "texture"
    AUDIO = "audio"
    FONT = "font"
    DOCUMENT = "document"

    @classmethod
    def parse(cls, value: Union[str, "ResourceKind"]) -> "ResourceKind":
        """
        Parse a kind name, accepting the legacy manifest aliases.

        Raises:
            ValueError: If the value names no known kind
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        return cls(_KIND_ALIASES.get(key, key))


_KIND_ALIASES = {
    "gltf": "model",
    "glb": "model",
    "image": "texture",
    "json": "document",
}


@dataclass(frozen=True)
class ResourceDescriptor:
    """
    Immutable description of one asset to load.

    ``kind`` is normally a :class:`ResourceKind`; a string is kept when the
    configuration names a kind we do not recognise so that the loader can
    reject it.
    """

    name: str
    kind: Union[ResourceKind, str]
    location: str

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "ResourceDescriptor":
        raw_kind = payload.get("kind", payload.get("type"))
        try:
            kind: Union[ResourceKind, str] = ResourceKind.parse(raw_kind)
        except ValueError:
            kind = str(raw_kind)
        location = payload.get("location", payload.get("url"))
        if not payload.get("name") or not location:
            raise ValueError(f"Resource entry needs 'name' and 'location': {payload}")
        return cls(name=str(payload["name"]), kind=kind, location=str(location))


@dataclass(frozen=True)
class LoadProgress:
    """Snapshot of batch progress handed to the progress observer."""

    loaded_count: int = 0
    total_count: int = 0
    last_completed_name: Optional[str] = None

    @property
    def fraction(self) -> float:
        if self.total_count <= 0:
            return 0.0
        return self.loaded_count / self.total_count

    @property
    def is_complete(self) -> bool:
        return self.total_count > 0 and self.loaded_count >= self.total_count
