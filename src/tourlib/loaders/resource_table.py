"""Name-keyed container for loaded assets."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Union

from .descriptors import ResourceKind


@dataclass(frozen=True)
class LoadedResource:
    """A successfully loaded asset together with the kind it was loaded as."""

    name: str
    kind: Union[ResourceKind, str]
    asset: Any


class ResourceTable:
    """
    Owned mapping from resource name to :class:`LoadedResource`.

    Presence of a name means its load completed successfully. Each insert
    writes a single key, so concurrent loads never touch each other's slot.
    """

    def __init__(self):
        self._entries: Dict[str, LoadedResource] = {}

    def insert(self, name: str, kind: Union[ResourceKind, str], asset: Any) -> LoadedResource:
        entry = LoadedResource(name=name, kind=kind, asset=asset)
        self._entries[name] = entry
        return entry

    def get(self, name: str) -> Optional[Any]:
        entry = self._entries.get(name)
        return entry.asset if entry is not None else None

    def get_entry(self, name: str) -> Optional[LoadedResource]:
        return self._entries.get(name)

    def has(self, name: str) -> bool:
        return name in self._entries

    def names(self) -> List[str]:
        return list(self._entries.keys())

    def by_kind(self, kind: ResourceKind) -> List[LoadedResource]:
        return [entry for entry in self._entries.values() if entry.kind == kind]

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[LoadedResource]:
        return iter(list(self._entries.values()))
