"""
TourLib - ModernGL Virtual Tour Viewer

Loads a 3D scene and its assets in parallel, then lets the user fly the
camera between points of interest.
"""

# Configuration
from .config.settings import *

# Core
from .core import (
    Camera, CameraRig, OrbitRig,
    CameraPose, PointOfInterest, PoiRegistry,
    Scene, SceneNode,
    NavigationController, PoiState,
)
from .core.tour import TourState, VirtualTour

# Animation
from .animation import CameraParameter, CameraTransitionEngine, Easing

# Loaders
from .loaders import (
    LoadProgress, ResourceDescriptor, ResourceKind, ResourceLoader,
    ResourceLoadError, TransportError, DecodeError, UnsupportedKindError,
    Transport,
)

# Configuration tables
from .config.tour_config import TourConfig, load_tour_config

# UI state
from .ui import LoadingIndicator, PoiOverlay

__version__ = "0.1.0"
__all__ = [
    # Config (exported via *)
    # Core
    "Camera",
    "CameraRig",
    "OrbitRig",
    "CameraPose",
    "PointOfInterest",
    "PoiRegistry",
    "Scene",
    "SceneNode",
    "NavigationController",
    "PoiState",
    "TourState",
    "VirtualTour",
    # Animation
    "CameraParameter",
    "CameraTransitionEngine",
    "Easing",
    # Loaders
    "LoadProgress",
    "ResourceDescriptor",
    "ResourceKind",
    "ResourceLoader",
    "ResourceLoadError",
    "TransportError",
    "DecodeError",
    "UnsupportedKindError",
    "Transport",
    "TourConfig",
    "load_tour_config",
    # UI
    "LoadingIndicator",
    "PoiOverlay",
]
