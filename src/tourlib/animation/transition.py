"""
Camera Transition Engine

Interpolates the camera's parameter groups toward a target pose. Each group
is sampled explicitly by the render tick; nothing mutates the camera between
ticks.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Union

import numpy as np
from pyrr import Vector3

from ..core.camera import Camera
from ..core.poi import CameraPose
from .easing import Easing

logger = logging.getLogger(__name__)

Value = Union[float, Vector3]


class CameraParameter(Enum):
    """Independently animated parameter groups."""
    POSITION = "position"
    ORIENTATION = "orientation"
    TARGET = "target"
    ZOOM = "zoom"


@dataclass(frozen=True)
class ParameterTransition:
    """One in-flight interpolation of a single parameter group."""

    start_value: Value
    end_value: Value
    start_time: float
    duration: float
    easing: Easing = Easing.CUBIC_IN_OUT

    def progress(self, now: float) -> float:
        if self.duration <= 0.0:
            return 1.0
        return min(max((now - self.start_time) / self.duration, 0.0), 1.0)

    def is_complete(self, now: float) -> bool:
        return self.duration <= 0.0 or now - self.start_time >= self.duration


def _copy(value: Value) -> Value:
    if isinstance(value, np.ndarray):
        return Vector3(value)
    return float(value)


def sample(transition: ParameterTransition, now: float) -> Value:
    """
    Value of a transition at time ``now``.

    Once elapsed time reaches the duration the exact end value is returned,
    so curve evaluation never leaves residual drift.
    """
    if transition.is_complete(now):
        return _copy(transition.end_value)

    k = transition.easing(transition.progress(now))
    start = transition.start_value
    end = transition.end_value
    if isinstance(start, np.ndarray):
        return Vector3(start + (end - start) * k)
    return float(start + (end - start) * k)


_POSE_FIELDS = {
    CameraParameter.POSITION: "position",
    CameraParameter.ORIENTATION: "orientation",
    CameraParameter.TARGET: "look_at_target",
    CameraParameter.ZOOM: "zoom",
}

_CAMERA_FIELDS = {
    CameraParameter.POSITION: "position",
    CameraParameter.ORIENTATION: "orientation",
    CameraParameter.TARGET: "target",
    CameraParameter.ZOOM: "zoom",
}


class CameraTransitionEngine:
    """
    Drives animated camera moves.

    At most one transition per parameter group is tracked. A new request
    replaces the in-flight ones and starts from the camera's live values at
    that instant, so rapid re-selection never jumps.
    """

    def __init__(
        self,
        camera: Camera,
        clock: Callable[[], float] = time.perf_counter,
        easing: Easing = Easing.CUBIC_IN_OUT,
    ):
        """
        Initialize the engine.

        Args:
            camera: Camera whose live values are animated
            clock: Time source in seconds (shared with the render tick)
            easing: Curve applied to every group
        """
        self.camera = camera
        self.clock = clock
        self.easing = easing
        self._transitions: Dict[CameraParameter, ParameterTransition] = {}

    @property
    def is_active(self) -> bool:
        return bool(self._transitions)

    def get_transition(self, parameter: CameraParameter) -> Optional[ParameterTransition]:
        return self._transitions.get(parameter)

    def jump_to(self, pose: CameraPose) -> None:
        """Place the camera at a pose instantly, dropping any transition."""
        self._transitions.clear()
        self.camera.apply_pose(pose)
        self.camera.update_projection_matrix()

    def request_transition(
        self,
        target_pose: CameraPose,
        duration: float,
        now: Optional[float] = None,
    ) -> None:
        """
        Start animating every group toward ``target_pose``.

        Args:
            target_pose: Pose to converge on
            duration: Seconds for the move (<= 0 applies it immediately)
            now: Request time (defaults to the engine clock)
        """
        now = self.clock() if now is None else now

        # Bring live values up to this instant before re-anchoring
        self.update(now)

        for parameter in CameraParameter:
            self._transitions[parameter] = ParameterTransition(
                start_value=_copy(getattr(self.camera, _CAMERA_FIELDS[parameter])),
                end_value=_copy(getattr(target_pose, _POSE_FIELDS[parameter])),
                start_time=now,
                duration=duration,
                easing=self.easing,
            )

        logger.debug("Camera transition requested (%.2fs)", duration)

        if duration <= 0.0:
            self.update(now)

    def current_value(self, parameter: CameraParameter, now: Optional[float] = None) -> Value:
        """Interpolated value of a group without touching the camera."""
        transition = self._transitions.get(parameter)
        if transition is None:
            return _copy(getattr(self.camera, _CAMERA_FIELDS[parameter]))
        now = self.clock() if now is None else now
        return sample(transition, now)

    def update(self, now: Optional[float] = None) -> bool:
        """
        Write the sampled values into the camera.

        Returns:
            True if a transition finished during this call
        """
        if not self._transitions:
            return False

        now = self.clock() if now is None else now
        finished = False
        zooming = CameraParameter.ZOOM in self._transitions

        for parameter, transition in list(self._transitions.items()):
            setattr(self.camera, _CAMERA_FIELDS[parameter], sample(transition, now))
            if transition.is_complete(now):
                del self._transitions[parameter]
                finished = True

        settled = finished and not self._transitions
        # Projection depends on zoom
        if zooming or settled:
            self.camera.update_projection_matrix()
        if settled:
            logger.debug("Camera transition complete")

        return finished
