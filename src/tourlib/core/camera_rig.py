"""Camera rig implementations for tour navigation."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
import math

from pyrr import Vector3

from ..config.settings import (
    ORBIT_DAMPING_FACTOR,
    ORBIT_ROTATE_SPEED,
    ORBIT_ZOOM_SPEED,
    ORBIT_MIN_DISTANCE,
    ORBIT_MAX_DISTANCE,
    ORBIT_MIN_POLAR,
    ORBIT_MAX_POLAR,
)

if TYPE_CHECKING:  # pragma: no cover - import guard for type checking only
    from .camera import Camera


class CameraRig(ABC):
    """Abstract base class for camera control rigs."""

    def __init__(self, camera: "Camera") -> None:
        self.camera = camera
        self.enabled = True

    def enable(self) -> None:
        """Enable the rig."""

        self.enabled = True

    def disable(self) -> None:
        """Disable the rig."""

        self.enabled = False

    @abstractmethod
    def update(self, delta_time: float) -> None:
        """Update the rig state."""

    @abstractmethod
    def apply_look_input(self, dx: float, dy: float) -> None:
        """Apply mouse look input."""


class OrbitRig(CameraRig):
    """
    Damped turntable orbit around the camera's look-at target.

    Input accumulates into pending deltas that bleed into the camera a
    fraction at a time. The rig always starts from the live camera position,
    so it composes with animated transitions.
    """

    def __init__(
        self,
        camera: "Camera",
        damping: float = ORBIT_DAMPING_FACTOR,
        rotate_speed: float = ORBIT_ROTATE_SPEED,
        zoom_speed: float = ORBIT_ZOOM_SPEED,
    ) -> None:
        super().__init__(camera)
        self.damping = damping
        self.rotate_speed = rotate_speed
        self.zoom_speed = zoom_speed
        self.min_distance = ORBIT_MIN_DISTANCE
        self.max_distance = ORBIT_MAX_DISTANCE
        self._delta_theta = 0.0
        self._delta_phi = 0.0
        self._scale = 1.0

    @property
    def is_settled(self) -> bool:
        return abs(self._delta_theta) < 1e-6 and abs(self._delta_phi) < 1e-6 and abs(self._scale - 1.0) < 1e-6

    def apply_look_input(self, dx: float, dy: float) -> None:
        if not self.enabled:
            return

        self._delta_theta -= dx * self.rotate_speed
        self._delta_phi -= dy * self.rotate_speed

    def zoom(self, steps: float) -> None:
        """Dolly in (positive steps) or out (negative steps)."""
        if not self.enabled:
            return

        self._scale *= self.zoom_speed ** steps

    def update(self, delta_time: float) -> None:
        if not self.enabled or self.is_settled:
            return

        offset = self.camera.position - self.camera.target
        radius = float(math.sqrt(offset.x ** 2 + offset.y ** 2 + offset.z ** 2))
        if radius <= 0.0:
            return

        theta = math.atan2(offset.x, offset.z)
        phi = math.acos(max(-1.0, min(1.0, offset.y / radius)))

        theta += self._delta_theta * self.damping
        phi = max(ORBIT_MIN_POLAR, min(ORBIT_MAX_POLAR, phi + self._delta_phi * self.damping))
        scale_step = 1.0 + (self._scale - 1.0) * self.damping
        radius = max(self.min_distance, min(self.max_distance, radius * scale_step))

        self.camera.position = self.camera.target + Vector3([
            radius * math.sin(phi) * math.sin(theta),
            radius * math.cos(phi),
            radius * math.sin(phi) * math.cos(theta),
        ])

        self._delta_theta *= 1.0 - self.damping
        self._delta_phi *= 1.0 - self.damping
        self._scale = 1.0 + (self._scale - 1.0) * (1.0 - self.damping)


__all__ = [
    "CameraRig",
    "OrbitRig",
]
