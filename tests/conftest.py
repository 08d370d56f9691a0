"""Shared fakes for loader, navigation and tour tests"""

import asyncio
from typing import Dict, List, Optional

import pytest
from pyrr import Vector3

from tourlib.core.poi import CameraPose, PointOfInterest, PoiRegistry
from tourlib.loaders.base import Loadable
from tourlib.loaders.descriptors import ResourceDescriptor, ResourceKind
from tourlib.loaders.errors import TransportError
from tourlib.loaders.gltf_loader import SceneFragment


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now


class FakeTransport:
    """In-memory transport: location -> bytes, anything else is a 404."""

    def __init__(self, files: Optional[Dict[str, bytes]] = None):
        self.files = dict(files or {})
        self.requested: List[str] = []

    def resolve(self, location: str, relative_to: Optional[str] = None) -> str:
        if relative_to is not None and "/" in relative_to:
            return relative_to.rsplit("/", 1)[0] + "/" + location
        return location

    async def fetch(self, location: str) -> bytes:
        self.requested.append(location)
        await asyncio.sleep(0)
        if location not in self.files:
            raise TransportError("HTTP error! status: 404", location=location)
        return self.files[location]

    async def aclose(self) -> None:
        pass


class ScriptedStrategy(Loadable):
    """
    Loading strategy whose outcome per resource name is scripted.

    ``results`` maps name -> asset, ``errors`` maps name -> exception.
    Names listed in ``gated`` wait until :meth:`release` is called.
    """

    def __init__(self, kind, results=None, errors=None, gated=()):
        super().__init__(transport=None)
        self.kind = kind
        self.results = dict(results or {})
        self.errors = dict(errors or {})
        self.gated = set(gated)
        self.started: List[str] = []
        self._gates: Dict[str, asyncio.Event] = {}

    def release(self, name: str) -> None:
        self._gate(name).set()

    def _gate(self, name: str) -> asyncio.Event:
        if name not in self._gates:
            self._gates[name] = asyncio.Event()
        return self._gates[name]

    async def load(self, descriptor: ResourceDescriptor):
        self.started.append(descriptor.name)
        await asyncio.sleep(0)
        if descriptor.name in self.gated:
            await self._gate(descriptor.name).wait()
        if descriptor.name in self.errors:
            raise self.errors[descriptor.name]
        return self.results.get(descriptor.name, f"asset:{descriptor.name}")

    def decode(self, data, descriptor):
        raise NotImplementedError


class TransitionSpy:
    """Records transition requests instead of animating."""

    def __init__(self):
        self.requests = []

    def request_transition(self, target_pose, duration, now=None):
        self.requests.append((target_pose, duration))


def make_pose(x: float, zoom: float = 1.0) -> CameraPose:
    return CameraPose(
        position=Vector3([x, 2.0, 5.0]),
        orientation=Vector3([0.0, x * 0.1, 0.0]),
        look_at_target=Vector3([x, 0.0, 0.0]),
        zoom=zoom,
    )


def make_registry() -> PoiRegistry:
    return PoiRegistry([
        PointOfInterest("owl", "Owl", "Bronze owl", Vector3([0.0, 1.2, 0.0]), make_pose(1.0, zoom=1.2)),
        PointOfInterest("throne", "Throne", "Raised throne", Vector3([0.0, 1.0, -6.0]), make_pose(-3.0)),
        PointOfInterest("hearth", "Hearth", "Central hearth", Vector3([3.0, 0.5, -2.0]), make_pose(4.0, zoom=1.1)),
    ])


def hall_fragment() -> SceneFragment:
    return SceneFragment(name="hall", nodes=[], meshes=[])


@pytest.fixture
def clock():
    return FakeClock(10.0)


@pytest.fixture
def registry():
    return make_registry()


@pytest.fixture
def hall_descriptor():
    return ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf")
