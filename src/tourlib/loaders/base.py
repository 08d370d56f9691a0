"""Base class for per-kind loading strategies."""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from typing import Any

from .descriptors import ResourceDescriptor, ResourceKind
from .transport import Transport


class Loadable(ABC):
    """
    Strategy that turns one descriptor into a ready-to-use asset.

    The default pipeline is two-stage: fetch the bytes through the shared
    transport, then decode them in a worker thread. Subclasses implement
    :meth:`decode` and may override :meth:`load` when decoding needs further
    fetches.
    """

    kind: ResourceKind

    def __init__(self, transport: Transport):
        self.transport = transport

    async def load(self, descriptor: ResourceDescriptor) -> Any:
        data = await self.transport.fetch(descriptor.location)
        return await asyncio.to_thread(self.decode, data, descriptor)

    @abstractmethod
    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> Any:
        """Decode fetched bytes. Raise DecodeError on malformed input."""
