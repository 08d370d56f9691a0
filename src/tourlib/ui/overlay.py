"""
Overlay State

Presentation state for the loading indicator and the POI detail cards.
Rendering of this state is left to the window layer.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Optional

from ..config.settings import LOADING_FAILED_MESSAGE
from ..core.navigation import NavigationController
from ..core.poi import PoiRegistry
from ..core.tour import TourState
from ..loaders.descriptors import LoadProgress

logger = logging.getLogger(__name__)


class LoadingIndicator:
    """Tracks load progress and the persistent failure message."""

    def __init__(self):
        self.progress = LoadProgress()
        self.visible = True
        self.failed = False
        self.message = "Loading..."

    def on_progress(self, progress: LoadProgress) -> None:
        """Progress observer; must stay cheap, it runs inside the loader."""
        if self.failed:
            return
        self.progress = progress
        self.message = f"Loading... {int(progress.fraction * 100)}%"

    def on_tour_state_changed(self, old_state: TourState, new_state: TourState) -> None:
        if new_state == TourState.READY:
            self.visible = False
        elif new_state == TourState.FAILED:
            # No recovery path: stays up until the page/app is reloaded
            self.failed = True
            self.visible = True
            self.message = LOADING_FAILED_MESSAGE


@dataclass
class DetailCard:
    """Button label and detail text for one POI."""

    poi_id: str
    label: str
    text: str
    visible: bool = False


class PoiOverlay:
    """Mirrors navigation state into per-POI card visibility."""

    def __init__(self, registry: PoiRegistry, navigation: NavigationController):
        self.cards: Dict[str, DetailCard] = {
            poi.id: DetailCard(poi.id, poi.label, poi.detail_text) for poi in registry
        }
        navigation.register_state_change_callback(self._on_state_changed)

    def _on_state_changed(self, poi_id: str, active: bool) -> None:
        self.cards[poi_id].visible = active

    @property
    def visible_card(self) -> Optional[DetailCard]:
        for card in self.cards.values():
            if card.visible:
                return card
        return None
