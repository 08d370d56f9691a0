"""
Transport

Fetches raw bytes for resource locations, from disk or over HTTP.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from ..config.settings import ASSETS_DIR, TRANSPORT_TIMEOUT
from .errors import TransportError

logger = logging.getLogger(__name__)

_HTTP_SCHEMES = ("http", "https")


def is_remote(location: str) -> bool:
    """True for http(s) URLs."""
    return urlparse(location).scheme in _HTTP_SCHEMES


class Transport:
    """
    Byte fetcher shared by every loading strategy.

    Local paths are resolved against ``base_path`` and read in a worker
    thread. Remote locations use a lazily created ``httpx.AsyncClient``.
    """

    def __init__(
        self,
        base_path: Path | str = ASSETS_DIR,
        base_url: Optional[str] = None,
        timeout: Optional[float] = TRANSPORT_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize transport.

        Args:
            base_path: Directory relative local locations resolve against
            base_url: If set, relative locations resolve against this URL instead
            timeout: HTTP timeout in seconds (None disables it)
            client: Pre-built HTTP client (owned by the caller)
        """
        self.base_path = Path(base_path)
        self.base_url = base_url
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def resolve(self, location: str, relative_to: Optional[str] = None) -> str:
        """
        Resolve a location to an absolute path or URL.

        Args:
            location: Path or URL from a descriptor (or a glTF buffer URI)
            relative_to: Location of the referencing document, if any
        """
        if is_remote(location):
            return location

        if relative_to is not None:
            if is_remote(relative_to):
                return urljoin(relative_to, location)
            return str((Path(relative_to).parent / location).resolve())

        if self.base_url is not None:
            return urljoin(self.base_url.rstrip("/") + "/", location)

        path = Path(location)
        if not path.is_absolute():
            path = self.base_path / path
        return str(path.resolve())

    async def fetch(self, location: str) -> bytes:
        """
        Fetch the bytes behind a location.

        Raises:
            TransportError: If the file is missing/unreadable or the request fails
        """
        resolved = self.resolve(location)
        if is_remote(resolved):
            return await self._fetch_http(resolved)
        return await self._fetch_file(Path(resolved))

    async def _fetch_file(self, path: Path) -> bytes:
        try:
            return await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise TransportError(f"Cannot read {path}: {exc}", location=str(path)) from exc

    async def _fetch_http(self, url: str) -> bytes:
        client = self._get_client()
        try:
            response = await client.get(url)
        except httpx.HTTPError as exc:
            raise TransportError(f"Request failed: {exc}", location=url) from exc

        if not response.is_success:
            logger.error("HTTP %d for %s", response.status_code, url)
            raise TransportError(f"HTTP error! status: {response.status_code}", location=url)
        return response.content

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if this transport created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
