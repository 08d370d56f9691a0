"""Loader utilities for tour resources."""

from .base import Loadable
from .descriptors import LoadProgress, ResourceDescriptor, ResourceKind
from .errors import DecodeError, ResourceLoadError, TransportError, UnsupportedKindError
from .resource_table import LoadedResource, ResourceTable
from .transport import Transport
from .gltf_loader import GltfLoader, SceneFragment
from .texture_loader import TextureLoader, PixelBuffer
from .audio_loader import AudioLoader, AudioBuffer
from .font_loader import FontLoader, Font
from .document_loader import DocumentLoader
from .resource_loader import ResourceLoader

__all__ = [
    'Loadable', 'LoadProgress', 'ResourceDescriptor', 'ResourceKind',
    'ResourceLoadError', 'TransportError', 'DecodeError', 'UnsupportedKindError',
    'LoadedResource', 'ResourceTable', 'Transport',
    'GltfLoader', 'SceneFragment', 'TextureLoader', 'PixelBuffer',
    'AudioLoader', 'AudioBuffer', 'FontLoader', 'Font', 'DocumentLoader',
    'ResourceLoader',
]
