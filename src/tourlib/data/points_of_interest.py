"""Points of interest placed around the King's Hall model."""

from typing import List

from pyrr import Vector3

from ..core.poi import CameraPose, PointOfInterest

OWL_ZUN_TEXT = """Bronze Owl Zun
Period: early Western Zhou (c. 11th century BC)
Material: bronze
Excavated: Baoji, Shaanxi

The vessel is cast as an exaggerated owl: a broad body, wings pressed to its
sides, round staring eyes and a sharp, powerful beak. It keeps the features of
a real bird while adding abstract geometric ornament, showing the distinctive
taste and skill of early bronze casting.

Used as a wine vessel, probably in sacrifices or banquets. Owls were linked to
night and mystery, and to communication between heaven, earth and the
ancestors. The piece shows Western Zhou reverence for nature and religion, and
the close tie between ritual objects and power."""

POINTS_OF_INTEREST: List[PointOfInterest] = [
    PointOfInterest(
        id="owl",
        label="Bronze Owl Zun",
        detail_text=OWL_ZUN_TEXT,
        anchor_position=Vector3([0.0, 1.2, 0.0]),
        target_pose=CameraPose(
            position=Vector3([1.5, 1.6, 2.5]),
            orientation=Vector3([0.0, 0.5, 0.0]),
            look_at_target=Vector3([0.0, 1.2, 0.0]),
            zoom=1.2,
        ),
    ),
    PointOfInterest(
        id="throne",
        label="Throne",
        detail_text="The raised throne at the far end of the hall, flanked by banners.",
        anchor_position=Vector3([0.0, 1.0, -6.0]),
        target_pose=CameraPose(
            position=Vector3([0.0, 2.0, -2.0]),
            orientation=Vector3([0.0, 0.0, 0.0]),
            look_at_target=Vector3([0.0, 1.0, -6.0]),
            zoom=1.0,
        ),
    ),
    PointOfInterest(
        id="hearth",
        label="Hearth",
        detail_text="The central hearth that once heated the hall.",
        anchor_position=Vector3([3.0, 0.5, -2.0]),
        target_pose=CameraPose(
            position=Vector3([5.0, 2.5, 1.0]),
            orientation=Vector3([0.0, -0.6, 0.0]),
            look_at_target=Vector3([3.0, 0.5, -2.0]),
            zoom=1.1,
        ),
    ),
]
