"""
Resource Loader

Fans out one loading strategy per descriptor, aggregates progress, and
populates a name-keyed resource table. ``load_all`` resolves once every item
has loaded and fails on the first error.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from .audio_loader import AudioLoader
from .base import Loadable
from .descriptors import LoadProgress, ResourceDescriptor, ResourceKind
from .document_loader import DocumentLoader
from .errors import DecodeError, ResourceLoadError, UnsupportedKindError
from .font_loader import FontLoader
from .gltf_loader import GltfLoader
from .resource_table import LoadedResource, ResourceTable
from .texture_loader import TextureLoader
from .transport import Transport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[LoadProgress], None]


class _Batch:
    """Per-call bookkeeping; once failed, late completions are discarded."""

    __slots__ = ("failed",)

    def __init__(self):
        self.failed = False


class ResourceLoader:
    """
    Asynchronous, kind-polymorphic resource loader.

    Usage:
        loader = ResourceLoader()
        loader.set_progress_callback(lambda p: print(p.fraction))
        await loader.load_all(descriptors)
        model = loader.get("hall")
    """

    def __init__(
        self,
        transport: Optional[Transport] = None,
        strategies: Optional[Iterable[Loadable]] = None,
    ):
        """
        Initialize loader.

        Args:
            transport: Byte fetcher shared by the default strategies
            strategies: Strategies to register instead of the defaults
        """
        self.transport = transport or Transport()
        self._table = ResourceTable()
        self._progress = LoadProgress()
        self._on_progress: Optional[ProgressCallback] = None
        self._batch: Optional[_Batch] = None

        self._strategies: Dict[Any, Loadable] = {}
        if strategies is None:
            strategies = (
                GltfLoader(self.transport),
                TextureLoader(self.transport),
                AudioLoader(self.transport),
                FontLoader(self.transport),
                DocumentLoader(self.transport),
            )
        for strategy in strategies:
            self.register_strategy(strategy)

    def register_strategy(self, strategy: Loadable) -> None:
        """Install (or replace) the strategy for ``strategy.kind``."""
        self._strategies[strategy.kind] = strategy

    def set_progress_callback(self, callback: Optional[ProgressCallback]) -> None:
        """Register the single progress observer (None clears it)."""
        self._on_progress = callback

    @property
    def progress(self) -> LoadProgress:
        return self._progress

    async def load_all(self, descriptors: Iterable[ResourceDescriptor]) -> None:
        """
        Load every descriptor concurrently.

        Raises:
            UnsupportedKindError: Before any fetch, if a kind has no strategy
            TransportError, DecodeError: For the first item that fails
        """
        items: List[ResourceDescriptor] = list(descriptors)

        self._progress = LoadProgress(loaded_count=0, total_count=len(items))
        batch = _Batch()
        self._batch = batch

        for descriptor in items:
            if descriptor.kind not in self._strategies:
                kind = getattr(descriptor.kind, "value", descriptor.kind)
                error = UnsupportedKindError(
                    f"Unsupported resource kind: {kind}",
                    name=descriptor.name,
                    kind=descriptor.kind,
                    location=descriptor.location,
                )
                logger.error("Resource loading failed: %s", error)
                raise error

        logger.info("Loading %d resources...", len(items))

        try:
            await asyncio.gather(*(self._load_item(descriptor, batch) for descriptor in items))
        except ResourceLoadError as exc:
            logger.error("Resource loading failed: %s", exc)
            raise

        logger.info("All resources loaded")

    async def _load_item(self, descriptor: ResourceDescriptor, batch: _Batch) -> None:
        strategy = self._strategies[descriptor.kind]
        try:
            asset = await strategy.load(descriptor)
        except ResourceLoadError as exc:
            batch.failed = True
            raise exc.attach(descriptor.name, descriptor.kind, descriptor.location)
        except Exception as exc:
            # Strategies outside the built-in set may raise anything
            batch.failed = True
            raise DecodeError(
                f"Unexpected {type(exc).__name__}: {exc}",
                name=descriptor.name,
                kind=descriptor.kind,
                location=descriptor.location,
            ) from exc

        if batch.failed or batch is not self._batch:
            logger.debug("Discarding late result for '%s'", descriptor.name)
            return

        self._table.insert(descriptor.name, descriptor.kind, asset)
        self._advance_progress(descriptor.name)

    def _advance_progress(self, name: str) -> None:
        progress = LoadProgress(
            loaded_count=self._progress.loaded_count + 1,
            total_count=self._progress.total_count,
            last_completed_name=name,
        )
        self._progress = progress

        logger.info("Resource loaded: %s (%d/%d)", name, progress.loaded_count, progress.total_count)

        if self._on_progress is not None:
            try:
                self._on_progress(progress)
            except Exception:
                logger.exception("Error in progress callback")

    def get(self, name: str) -> Optional[Any]:
        """Get a loaded asset, or None if absent."""
        return self._table.get(name)

    def get_entry(self, name: str) -> Optional[LoadedResource]:
        return self._table.get_entry(name)

    def has(self, name: str) -> bool:
        return self._table.has(name)

    def get_resource_names(self) -> List[str]:
        return self._table.names()

    def get_resources_by_kind(self, kind: ResourceKind) -> List[LoadedResource]:
        return self._table.by_kind(kind)

    def dispose(self) -> None:
        """Clear the table and reset progress. Does not cancel in-flight loads."""
        self._table.clear()
        self._progress = LoadProgress()
        self._batch = None

    async def aclose(self) -> None:
        await self.transport.aclose()
