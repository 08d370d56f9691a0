"""Loader that decodes images into GPU-uploadable pixel buffers."""

from __future__ import annotations

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

from .base import Loadable
from .descriptors import ResourceDescriptor, ResourceKind
from .errors import DecodeError


@dataclass
class PixelBuffer:
    """RGBA8 pixels, bottom row first, ready for ``ctx.texture``."""

    width: int
    height: int
    pixels: np.ndarray  # (height, width, components) uint8
    components: int = 4

    @property
    def size(self) -> tuple:
        return (self.width, self.height)

    def tobytes(self) -> bytes:
        return self.pixels.tobytes()


class TextureLoader(Loadable):
    """Decode PNG/JPEG/etc. with Pillow."""

    kind = ResourceKind.TEXTURE

    def __init__(self, transport, vertical_flip: bool = True):
        super().__init__(transport)
        self.vertical_flip = vertical_flip

    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> PixelBuffer:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img = img.convert("RGBA")
                if self.vertical_flip:
                    img = img.transpose(Image.FLIP_TOP_BOTTOM)
                pixels = np.array(img, dtype=np.uint8)
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
            raise DecodeError(f"Cannot decode image: {exc}") from exc

        height, width = pixels.shape[:2]
        return PixelBuffer(width=width, height=height, pixels=pixels)
