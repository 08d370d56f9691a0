"""Loader for structured key-value documents (JSON)."""

from __future__ import annotations

import json
from typing import Any, Dict

from .base import Loadable
from .descriptors import ResourceDescriptor, ResourceKind
from .errors import DecodeError


class DocumentLoader(Loadable):
    """Parse a UTF-8 JSON object into a dictionary."""

    kind = ResourceKind.DOCUMENT

    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> Dict[str, Any]:
        try:
            payload = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(f"Invalid JSON document: {exc}") from exc

        if not isinstance(payload, dict):
            raise DecodeError(
                f"Expected a JSON object, got {type(payload).__name__}"
            )
        return payload
