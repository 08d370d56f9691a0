"""Resource manifest: every asset the tour needs before it can start."""

from typing import List

from ..loaders.descriptors import ResourceDescriptor, ResourceKind

MODEL_RESOURCE = "kingsHall"

RESOURCE_MANIFEST: List[ResourceDescriptor] = [
    # 3D models
    ResourceDescriptor(MODEL_RESOURCE, ResourceKind.MODEL, "kings_hall/scene.gltf"),

    # More assets are added here, e.g.
    # ResourceDescriptor("backgroundMusic", ResourceKind.AUDIO, "kings_hall/background.wav"),
    # ResourceDescriptor("defaultFont", ResourceKind.FONT, "fonts/helvetiker_regular.typeface.json"),
    # ResourceDescriptor("artifactData", ResourceKind.DOCUMENT, "data/artifacts.json"),
]


def get_resources_by_kind(kind: ResourceKind) -> List[ResourceDescriptor]:
    """All manifest entries of one kind."""
    return [resource for resource in RESOURCE_MANIFEST if resource.kind == kind]


def has_resource(name: str) -> bool:
    """Check whether the manifest declares a resource."""
    return any(resource.name == name for resource in RESOURCE_MANIFEST)
