"""Camera poses and the point-of-interest registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pyrr import Vector3


def _vec3(values) -> Vector3:
    vec = Vector3([float(v) for v in values])
    if vec.shape != (3,):
        raise ValueError(f"Expected 3 components, got {values!r}")
    return vec


@dataclass(frozen=True)
class CameraPose:
    """Full camera placement: position, Euler orientation, look-at target, zoom."""

    position: Vector3
    orientation: Vector3
    look_at_target: Vector3
    zoom: float = 1.0

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "CameraPose":
        return cls(
            position=_vec3(payload["position"]),
            orientation=_vec3(payload.get("orientation", (0.0, 0.0, 0.0))),
            look_at_target=_vec3(payload.get("look_at_target", payload.get("target", (0.0, 0.0, 0.0)))),
            zoom=float(payload.get("zoom", 1.0)),
        )


@dataclass(frozen=True)
class PointOfInterest:
    """A selectable feature anchored to the loaded model."""

    id: str
    label: str
    detail_text: str
    anchor_position: Vector3  # local to the loaded model
    target_pose: CameraPose

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "PointOfInterest":
        return cls(
            id=str(payload["id"]),
            label=str(payload.get("label", payload["id"])),
            detail_text=str(payload.get("detail_text", "")),
            anchor_position=_vec3(payload["anchor_position"]),
            target_pose=CameraPose.from_dict(payload["target_pose"]),
        )


class PoiRegistry:
    """Ordered, id-unique collection of points of interest."""

    def __init__(self, points: Iterable[PointOfInterest] = ()):
        self._points: Dict[str, PointOfInterest] = {}
        for poi in points:
            if poi.id in self._points:
                raise ValueError(f"Duplicate point of interest id: {poi.id}")
            self._points[poi.id] = poi

    def get(self, poi_id: str) -> PointOfInterest:
        """Raises KeyError for unknown ids."""
        return self._points[poi_id]

    def first(self) -> Optional[PointOfInterest]:
        return next(iter(self._points.values()), None)

    def ids(self) -> List[str]:
        return list(self._points.keys())

    def __contains__(self, poi_id: object) -> bool:
        return poi_id in self._points

    def __iter__(self) -> Iterator[PointOfInterest]:
        return iter(self._points.values())

    def __len__(self) -> int:
        return len(self._points)
