"""Tour configuration loaded from JSON, with built-in defaults."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from ..core.poi import CameraPose, PointOfInterest, PoiRegistry
from ..loaders.descriptors import ResourceDescriptor
from .settings import ESTABLISHING_POSE, TOUR_CONFIG_PATH

logger = logging.getLogger(__name__)


@dataclass
class TourConfig:
    """Static configuration tables for one tour."""

    resources: List[ResourceDescriptor]
    points_of_interest: List[PointOfInterest]
    model_resource: str
    establishing_pose: CameraPose = field(default_factory=lambda: CameraPose.from_dict(ESTABLISHING_POSE))

    def registry(self) -> PoiRegistry:
        return PoiRegistry(self.points_of_interest)

    @classmethod
    def from_dict(cls, payload: dict) -> "TourConfig":
        resources = [ResourceDescriptor.from_dict(entry) for entry in payload.get("resources", [])]
        points = [PointOfInterest.from_dict(entry) for entry in payload.get("points_of_interest", [])]
        model_resource = payload.get("model_resource")
        if model_resource is None:
            model_resource = next((r.name for r in resources if getattr(r.kind, "value", None) == "model"), None)
        if model_resource is None:
            raise ValueError("Tour config needs a model resource")
        pose = payload.get("establishing_pose", ESTABLISHING_POSE)
        return cls(
            resources=resources,
            points_of_interest=points,
            model_resource=model_resource,
            establishing_pose=CameraPose.from_dict(pose),
        )


def default_tour_config() -> TourConfig:
    """Built-in tables from :mod:`tourlib.data`."""
    from ..data.points_of_interest import POINTS_OF_INTEREST
    from ..data.resources import MODEL_RESOURCE, RESOURCE_MANIFEST

    return TourConfig(
        resources=list(RESOURCE_MANIFEST),
        points_of_interest=list(POINTS_OF_INTEREST),
        model_resource=MODEL_RESOURCE,
    )


def load_tour_config(path: Optional[Path | str] = None) -> TourConfig:
    """
    Load the tour configuration from JSON.

    Falls back to the built-in tables when the file does not exist. A file
    that exists but is malformed raises.

    Args:
        path: JSON file (defaults to TOUR_CONFIG_PATH)
    """
    config_path = Path(path) if path is not None else TOUR_CONFIG_PATH

    if not config_path.exists():
        logger.info("Tour config not found at %s, using built-in tables", config_path)
        return default_tour_config()

    with config_path.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    config = TourConfig.from_dict(payload)
    logger.info(
        "Loaded tour config %s: %d resources, %d points of interest",
        config_path, len(config.resources), len(config.points_of_interest),
    )
    return config
