"""
Audio Loader

Two-stage loading: fetch raw bytes, then decode PCM WAVE data into a
playable float buffer. Transport and decode failures are logged separately.
"""

from __future__ import annotations

import asyncio
import io
import logging
import wave
from dataclasses import dataclass

import numpy as np

from .base import Loadable
from .descriptors import ResourceDescriptor, ResourceKind
from .errors import DecodeError, TransportError

logger = logging.getLogger(__name__)

# sample width (bytes) -> (dtype, offset, scale) to map onto [-1, 1]
_PCM_FORMATS = {
    1: (np.uint8, 128.0, 128.0),
    2: (np.int16, 0.0, 32768.0),
    4: (np.int32, 0.0, 2147483648.0),
}


@dataclass
class AudioBuffer:
    """Decoded audio: float32 samples shaped (frames, channels)."""

    sample_rate: int
    channels: int
    samples: np.ndarray

    @property
    def frame_count(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration(self) -> float:
        return self.frame_count / self.sample_rate if self.sample_rate else 0.0


class AudioLoader(Loadable):
    """Fetch and decode RIFF/WAVE PCM audio."""

    kind = ResourceKind.AUDIO

    async def load(self, descriptor: ResourceDescriptor) -> AudioBuffer:
        try:
            data = await self.transport.fetch(descriptor.location)
        except TransportError as exc:
            logger.error("Audio transport failure for '%s': %s", descriptor.name, exc)
            raise

        try:
            return await asyncio.to_thread(self.decode, data, descriptor)
        except DecodeError as exc:
            logger.error("Audio decode failure for '%s': %s", descriptor.name, exc)
            raise

    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> AudioBuffer:
        try:
            with wave.open(io.BytesIO(data), "rb") as wav:
                channels = wav.getnchannels()
                sample_width = wav.getsampwidth()
                sample_rate = wav.getframerate()
                frames = wav.readframes(wav.getnframes())
        except (wave.Error, EOFError) as exc:
            raise DecodeError(f"Cannot decode audio: {exc}") from exc

        if sample_width not in _PCM_FORMATS:
            raise DecodeError(f"Unsupported PCM sample width: {sample_width} bytes")

        dtype, offset, scale = _PCM_FORMATS[sample_width]
        raw = np.frombuffer(frames, dtype=dtype).astype(np.float32)
        raw = raw[: raw.size - raw.size % channels]  # drop a truncated trailing frame
        samples = ((raw - offset) / scale).reshape(-1, channels)

        return AudioBuffer(sample_rate=sample_rate, channels=channels, samples=samples)
