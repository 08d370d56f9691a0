"""
Virtual Tour

Application lifecycle: load every resource, attach the model and POI anchors
to the scene, run the establishing shot and the automatic first fly-to, then
hand control to the navigation controller.
"""

from __future__ import annotations

import logging
import time
from enum import Enum, auto
from typing import Callable, Dict, Iterable, List, Optional

from pyrr import Vector3

from ..animation.transition import CameraTransitionEngine
from ..config.settings import (
    ESTABLISHING_POSE,
    INTRO_SETTLE_DELAY,
    TRANSITION_DURATION,
)
from ..loaders.descriptors import ResourceDescriptor
from ..loaders.errors import ResourceLoadError
from ..loaders.resource_loader import ResourceLoader
from .camera import Camera
from .camera_rig import OrbitRig
from .navigation import NavigationController
from .poi import CameraPose, PoiRegistry
from .scene import Scene, SceneNode

logger = logging.getLogger(__name__)


class TourState(Enum):
    """Top-level tour states."""

    IDLE = auto()      # Not started
    LOADING = auto()   # Resources in flight
    READY = auto()     # Scene populated, navigation live
    FAILED = auto()    # Loading failed; terminal


class VirtualTour:
    """
    Wires loader, scene, camera, transitions and navigation together.

    Features:
    - Two useful end states: READY or FAILED, never partially ready
    - Establishing shot then a delayed fly-to the first POI
    - Per-frame tick: orbit damping, intro check, transition sampling
    """

    def __init__(
        self,
        loader: ResourceLoader,
        registry: PoiRegistry,
        model_resource: str,
        camera: Optional[Camera] = None,
        scene: Optional[Scene] = None,
        establishing_pose: Optional[CameraPose] = None,
        transition_duration: float = TRANSITION_DURATION,
        settle_delay: float = INTRO_SETTLE_DELAY,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        Initialize the tour.

        Args:
            loader: Resource loader (owned by the caller)
            registry: Points of interest
            model_resource: Name of the Model resource to attach to the scene
            camera: Camera to drive (a default one if None)
            scene: Scene root to populate (a fresh one if None)
            establishing_pose: Wide shot placed instantly on readiness
            transition_duration: Seconds for each fly-to
            settle_delay: Seconds before the automatic first fly-to
            clock: Time source shared with the transition engine
        """
        self.loader = loader
        self.registry = registry
        self.model_resource = model_resource
        self.camera = camera or Camera(Vector3(ESTABLISHING_POSE["position"]))
        self.scene = scene or Scene()
        self.establishing_pose = establishing_pose or CameraPose.from_dict(ESTABLISHING_POSE)
        self.settle_delay = settle_delay
        self.clock = clock

        self.transitions = CameraTransitionEngine(self.camera, clock=clock)
        self.navigation = NavigationController(registry, self.transitions, duration=transition_duration)
        self.rig = OrbitRig(self.camera)

        self.state = TourState.IDLE
        self.failure: Optional[ResourceLoadError] = None
        self.model_node: Optional[SceneNode] = None
        self.anchors: Dict[str, SceneNode] = {}
        self._intro_due_at: Optional[float] = None
        self._on_state_changed: List[Callable[[TourState, TourState], None]] = []

        self.navigation.register_state_change_callback(self._on_poi_changed)

    def register_state_change_callback(self, callback: Callable[[TourState, TourState], None]) -> None:
        """
        Register a callback for tour state changes.

        Callback signature: callback(old_state: TourState, new_state: TourState)
        """
        self._on_state_changed.append(callback)

    @property
    def is_ready(self) -> bool:
        return self.state == TourState.READY

    @property
    def intro_pending(self) -> bool:
        return self._intro_due_at is not None

    async def start(self, descriptors: Iterable[ResourceDescriptor]) -> bool:
        """
        Load resources and bring the scene up.

        Returns:
            True when the tour is READY, False when it FAILED

        Raises:
            RuntimeError: If called more than once
        """
        if self.state != TourState.IDLE:
            raise RuntimeError(f"Tour already started (state: {self.state.name})")

        self._set_state(TourState.LOADING)
        try:
            await self.loader.load_all(descriptors)
            fragment = self.loader.get(self.model_resource)
            if fragment is None:
                raise ResourceLoadError(f"Model resource '{self.model_resource}' was not loaded")
        except ResourceLoadError as exc:
            self._fail(exc)
            return False
        except Exception as exc:
            logger.exception("Unexpected error while loading the tour")
            failure = ResourceLoadError(f"Unexpected {type(exc).__name__}: {exc}")
            failure.__cause__ = exc
            self._fail(failure)
            return False

        self._populate_scene(fragment)
        self.transitions.jump_to(self.establishing_pose)
        if self.registry.first() is not None:
            self._intro_due_at = self.clock() + self.settle_delay

        self._set_state(TourState.READY)
        return True

    def _fail(self, error: ResourceLoadError) -> None:
        self.failure = error
        logger.error("Tour failed to load: %s", error)
        self._set_state(TourState.FAILED)

    def _populate_scene(self, fragment) -> None:
        self.model_node = self.scene.attach_model(self.model_resource, fragment)
        for poi in self.registry:
            self.anchors[poi.id] = self.scene.attach_anchor(self.model_node, poi.id, poi.anchor_position)
        logger.info("Scene ready: %s with %d anchors", self.model_resource, len(self.anchors))

    def activate(self, poi_id: str) -> bool:
        """Toggle a POI (see NavigationController.activate)."""
        self._require_ready()
        return self.navigation.activate(poi_id)

    def deactivate(self, poi_id: str) -> None:
        self._require_ready()
        self.navigation.deactivate(poi_id)

    def anchor_world_position(self, poi_id: str) -> Vector3:
        return self.anchors[poi_id].get_world_position()

    def tick(self, now: Optional[float] = None, delta_time: float = 0.0) -> None:
        """Advance one frame of the render/animation domain."""
        if self.state != TourState.READY:
            return

        now = self.clock() if now is None else now

        self.rig.update(delta_time)

        if self._intro_due_at is not None and now >= self._intro_due_at:
            self._intro_due_at = None
            first = self.registry.first()
            logger.info("Starting tour at '%s'", first.id)
            self.transitions.request_transition(first.target_pose, self.navigation.duration, now=now)

        self.transitions.update(now)

    def _on_poi_changed(self, poi_id: str, active: bool) -> None:
        # A user selection before the intro fires takes precedence
        if active:
            self._intro_due_at = None

    def _require_ready(self) -> None:
        if self.state != TourState.READY:
            raise RuntimeError(f"Navigation is not live (state: {self.state.name})")

    def _set_state(self, new_state: TourState) -> None:
        old_state = self.state
        self.state = new_state
        for callback in self._on_state_changed:
            try:
                callback(old_state, new_state)
            except Exception:
                logger.exception("Error in tour state change callback")
