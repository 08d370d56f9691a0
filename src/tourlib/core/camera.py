"""
Camera Module

Perspective camera described by the four tour parameter groups: position,
Euler orientation, look-at target and zoom.
"""

from typing import Optional

import numpy as np
from pyrr import Matrix44, Vector3, vector

from ..config.settings import (
    ASPECT_RATIO,
    DEFAULT_FOV,
    NEAR_PLANE,
    FAR_PLANE,
    MIN_ZOOM,
)
from .poi import CameraPose


class Camera:
    """
    Perspective camera looking at a target.

    The projection matrix is cached; call :meth:`update_projection_matrix`
    after changing ``zoom``, ``fov`` or ``aspect_ratio``.
    """

    def __init__(
        self,
        position: Vector3,
        target: Optional[Vector3] = None,
        fov: float = DEFAULT_FOV,
        aspect_ratio: float = ASPECT_RATIO,
    ):
        """
        Initialize camera.

        Args:
            position: Camera position in world space
            target: Look-at target (origin if None)
            fov: Vertical field of view in degrees at zoom 1.0
            aspect_ratio: Viewport width / height
        """
        self.position = Vector3(position)
        self.target = Vector3(target) if target is not None else Vector3([0.0, 0.0, 0.0])
        self.orientation = Vector3([0.0, 0.0, 0.0])  # Euler angles (radians, XYZ)
        self.zoom = 1.0
        self.fov = fov
        self.aspect_ratio = aspect_ratio

        self.projection_matrix = self._build_projection()

    def update_projection_matrix(self) -> Matrix44:
        """Recompute the cached projection from fov, zoom and aspect ratio."""
        self.projection_matrix = self._build_projection()
        return self.projection_matrix

    def set_aspect_ratio(self, aspect_ratio: float) -> None:
        self.aspect_ratio = aspect_ratio
        self.update_projection_matrix()

    def get_effective_fov(self) -> float:
        """Field of view after zoom (degrees). Zoom 2.0 halves the view angle."""
        zoom = max(self.zoom, MIN_ZOOM)
        half = np.radians(self.fov) * 0.5
        return float(np.degrees(2.0 * np.arctan(np.tan(half) / zoom)))

    def _build_projection(self) -> Matrix44:
        return Matrix44.perspective_projection(
            self.get_effective_fov(),
            self.aspect_ratio,
            NEAR_PLANE,
            FAR_PLANE
        )

    def get_view_matrix(self) -> Matrix44:
        """
        Get the camera view matrix.

        Returns:
            4x4 view matrix for camera transformation
        """
        return Matrix44.look_at(
            self.position,
            self.target,
            Vector3([0.0, 1.0, 0.0])
        )

    def get_projection_matrix(self) -> Matrix44:
        return self.projection_matrix

    def get_forward(self) -> Vector3:
        """Get camera forward vector"""
        return vector.normalise(self.target - self.position)

    def get_pose(self) -> CameraPose:
        """Snapshot the live values as a pose."""
        return CameraPose(
            position=Vector3(self.position),
            orientation=Vector3(self.orientation),
            look_at_target=Vector3(self.target),
            zoom=float(self.zoom),
        )

    def apply_pose(self, pose: CameraPose) -> None:
        """Copy a pose into the live values (projection is not refreshed)."""
        self.position = Vector3(pose.position)
        self.orientation = Vector3(pose.orientation)
        self.target = Vector3(pose.look_at_target)
        self.zoom = float(pose.zoom)
