"""
Navigation Controller

Owns which point of interest is active. At most one POI is active at any
time; opening one closes the others and flies the camera to it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from ..config.settings import TRANSITION_DURATION
from .poi import PoiRegistry

if TYPE_CHECKING:
    from ..animation.transition import CameraTransitionEngine

logger = logging.getLogger(__name__)

StateChangeCallback = Callable[[str, bool], None]


@dataclass
class PoiState:
    """Two-state automaton for one POI."""

    poi_id: str
    is_active: bool = False


class NavigationController:
    """
    Single-selection state machine over the POI registry.

    Features:
    - activate() toggles: an active POI closes, an inactive one opens
    - opening a POI closes every other and requests a camera transition
    - closing (direct or forced) never moves the camera
    - state change callbacks for overlay collaborators
    """

    def __init__(
        self,
        registry: PoiRegistry,
        transitions: "CameraTransitionEngine",
        duration: float = TRANSITION_DURATION,
    ):
        """
        Initialize navigation controller.

        Args:
            registry: Points of interest to navigate between
            transitions: Engine that animates the camera
            duration: Seconds for each fly-to
        """
        self.registry = registry
        self.transitions = transitions
        self.duration = duration
        self._states: Dict[str, PoiState] = {poi.id: PoiState(poi.id) for poi in registry}
        self._on_state_changed: List[StateChangeCallback] = []

    @property
    def active_poi_id(self) -> Optional[str]:
        for state in self._states.values():
            if state.is_active:
                return state.poi_id
        return None

    def register_state_change_callback(self, callback: StateChangeCallback) -> None:
        """
        Register a callback for POI state changes.

        Callback signature: callback(poi_id: str, is_active: bool)
        """
        self._on_state_changed.append(callback)

    def states(self) -> List[PoiState]:
        """Snapshot of every POI state, in registry order."""
        return [PoiState(s.poi_id, s.is_active) for s in self._states.values()]

    def is_active(self, poi_id: str) -> bool:
        return self._get_state(poi_id).is_active

    def activate(self, poi_id: str) -> bool:
        """
        Toggle a POI.

        Returns:
            True if the POI is now active, False if this call closed it

        Raises:
            KeyError: If the id is not in the registry
        """
        state = self._get_state(poi_id)

        if state.is_active:
            self._set_active(state, False)
            return False

        for other in self._states.values():
            if other.is_active:
                self._set_active(other, False)

        self._set_active(state, True)
        self.transitions.request_transition(self.registry.get(poi_id).target_pose, self.duration)
        return True

    def deactivate(self, poi_id: str) -> None:
        """Close a POI if it is open. No camera motion."""
        state = self._get_state(poi_id)
        if state.is_active:
            self._set_active(state, False)

    def deactivate_all(self) -> None:
        for state in self._states.values():
            if state.is_active:
                self._set_active(state, False)

    def _get_state(self, poi_id: str) -> PoiState:
        try:
            return self._states[poi_id]
        except KeyError:
            raise KeyError(f"Unknown point of interest: {poi_id}") from None

    def _set_active(self, state: PoiState, active: bool) -> None:
        state.is_active = active
        logger.debug("POI '%s' %s", state.poi_id, "opened" if active else "closed")
        self._notify_state_changed(state.poi_id, active)

    def _notify_state_changed(self, poi_id: str, active: bool) -> None:
        """Notify all registered callbacks of a state change."""
        for callback in self._on_state_changed:
            try:
                callback(poi_id, active)
            except Exception:
                logger.exception("Error in POI state change callback")
