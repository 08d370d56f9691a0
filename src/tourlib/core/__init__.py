"""Core tour components"""
from .camera import Camera
from .camera_rig import CameraRig, OrbitRig
from .poi import CameraPose, PointOfInterest, PoiRegistry
from .scene import Scene, SceneNode
from .navigation import NavigationController, PoiState

__all__ = [
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
]
