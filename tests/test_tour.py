"""Tests for the tour lifecycle: load, establishing shot, intro fly-to"""

import asyncio

import numpy as np
import pytest
from pyrr import Vector3

from tourlib.animation import CameraParameter
from tourlib.core.poi import CameraPose
from tourlib.core.tour import TourState, VirtualTour
from tourlib.loaders import (
    DecodeError,
    ResourceDescriptor,
    ResourceKind,
    ResourceLoader,
    TransportError,
)
from tourlib.ui import LoadingIndicator, PoiOverlay

from conftest import FakeTransport, ScriptedStrategy, hall_fragment

ESTABLISHING = CameraPose(
    position=Vector3([6.0, 8.0, 14.0]),
    orientation=Vector3([0.0, 0.0, 0.0]),
    look_at_target=Vector3([0.0, 0.0, 0.0]),
    zoom=1.0,
)

DESCRIPTORS = [
    ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf"),
    ResourceDescriptor("notes", ResourceKind.DOCUMENT, "hall/notes.json"),
]


def _tour(registry, clock, errors=None):
    loader = ResourceLoader(
        FakeTransport(),
        strategies=[
            ScriptedStrategy(ResourceKind.MODEL, results={"hall": hall_fragment()}, errors=errors),
            ScriptedStrategy(ResourceKind.DOCUMENT),
        ],
    )
    tour = VirtualTour(
        loader,
        registry,
        "hall",
        establishing_pose=ESTABLISHING,
        transition_duration=2.0,
        settle_delay=1.0,
        clock=clock,
    )
    return tour, loader


def test_start_reaches_ready(registry, clock):
    """Successful load populates the scene and places the establishing shot"""
    tour, loader = _tour(registry, clock)
    states = []
    tour.register_state_change_callback(lambda old, new: states.append(new))

    assert asyncio.run(tour.start(DESCRIPTORS)) is True

    assert tour.state == TourState.READY
    assert states == [TourState.LOADING, TourState.READY]
    assert tour.model_node.payload is loader.get("hall")
    assert np.array_equal(tour.camera.position, ESTABLISHING.position)
    assert tour.camera.zoom == 1.0
    assert tour.intro_pending


def test_anchors_follow_model(registry, clock):
    """One anchor per POI, placed in model-local space"""
    tour, _ = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS))

    assert set(tour.anchors) == {"owl", "throne", "hearth"}
    assert np.allclose(np.asarray(tour.anchor_world_position("throne")), [0.0, 1.0, -6.0])

    tour.model_node.position = Vector3([2.0, 0.0, 0.0])
    assert np.allclose(np.asarray(tour.anchor_world_position("throne")), [2.0, 1.0, -6.0])


def test_intro_flies_to_first_poi_after_settle_delay(registry, clock):
    """First POI transition starts only once the settle delay has passed"""
    tour, _ = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS))
    started_at = clock.now

    tour.tick(now=started_at + 0.5)
    assert not tour.transitions.is_active
    assert np.array_equal(tour.camera.position, ESTABLISHING.position)

    tour.tick(now=started_at + 1.0)
    assert tour.transitions.is_active
    assert not tour.intro_pending

    owl = registry.get("owl").target_pose
    tour.tick(now=started_at + 3.0)

    assert not tour.transitions.is_active
    assert np.array_equal(tour.camera.position, owl.position)
    assert tour.camera.zoom == 1.2
    # The intro is a camera move only; nothing is selected
    assert tour.navigation.active_poi_id is None


def test_user_selection_cancels_intro(registry, clock):
    """Activating a POI before the intro fires keeps the user's target"""
    tour, _ = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS))

    tour.activate("throne")
    assert not tour.intro_pending

    tour.tick(now=clock.now + 1.0)
    throne = registry.get("throne").target_pose
    transition = tour.transitions.get_transition(CameraParameter.POSITION)
    assert np.allclose(np.asarray(transition.end_value), np.asarray(throne.position))


def test_activation_mid_flight_redirects(registry, clock):
    """Selecting while the camera is moving converges on the new POI"""
    tour, _ = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS))
    t0 = clock.now

    tour.tick(now=t0 + 1.0)      # intro toward owl begins
    tour.tick(now=t0 + 2.0)      # halfway
    clock.now = t0 + 2.0
    tour.activate("hearth")

    tour.tick(now=t0 + 4.0)

    hearth = registry.get("hearth").target_pose
    assert np.array_equal(tour.camera.position, hearth.position)
    assert tour.camera.zoom == 1.1


def test_failure_is_terminal(registry, clock):
    """A load error leaves the tour FAILED with a persistent message"""
    tour, loader = _tour(registry, clock, errors={"hall": TransportError("HTTP error! status: 404")})
    indicator = LoadingIndicator()
    loader.set_progress_callback(indicator.on_progress)
    tour.register_state_change_callback(indicator.on_tour_state_changed)

    assert asyncio.run(tour.start(DESCRIPTORS)) is False

    assert tour.state == TourState.FAILED
    assert isinstance(tour.failure, TransportError)
    assert tour.model_node is None
    assert tour.anchors == {}
    assert indicator.failed
    assert indicator.visible
    message = indicator.message

    # Late progress never overwrites the failure message
    indicator.on_progress(loader.progress)
    assert indicator.message == message

    with pytest.raises(RuntimeError):
        tour.activate("owl")

    tour.tick(now=clock.now + 10.0)
    assert not tour.transitions.is_active


def test_unexpected_loader_error_fails_tour(registry, clock):
    """A strategy raising a plain exception still ends in FAILED"""
    tour, _ = _tour(registry, clock, errors={"hall": ValueError("bad accessor")})

    assert asyncio.run(tour.start(DESCRIPTORS)) is False

    assert tour.state == TourState.FAILED
    assert isinstance(tour.failure, DecodeError)
    assert isinstance(tour.failure.__cause__, ValueError)
    assert tour.model_node is None


def test_loader_crash_fails_tour(registry, clock, monkeypatch):
    """Errors outside the loader's own error kinds leave the tour FAILED, not LOADING"""
    tour, loader = _tour(registry, clock)

    async def crash(descriptors):
        raise RuntimeError("loop closed")

    monkeypatch.setattr(loader, "load_all", crash)

    assert asyncio.run(tour.start(DESCRIPTORS)) is False
    assert tour.state == TourState.FAILED
    assert isinstance(tour.failure.__cause__, RuntimeError)


def test_missing_model_resource_fails(registry, clock):
    """A batch without the configured model is a failure"""
    tour, _ = _tour(registry, clock)

    assert asyncio.run(tour.start(DESCRIPTORS[1:])) is False
    assert tour.state == TourState.FAILED


def test_start_twice_raises(registry, clock):
    """The tour only starts once"""
    tour, _ = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS))

    with pytest.raises(RuntimeError):
        asyncio.run(tour.start(DESCRIPTORS))


def test_navigation_requires_ready(registry, clock):
    """activate before loading completes is rejected"""
    tour, _ = _tour(registry, clock)

    with pytest.raises(RuntimeError):
        tour.activate("owl")


def test_overlay_tracks_selection(registry, clock):
    """Detail card visibility mirrors the active POI"""
    tour, _ = _tour(registry, clock)
    overlay = PoiOverlay(registry, tour.navigation)
    asyncio.run(tour.start(DESCRIPTORS))

    assert overlay.visible_card is None

    tour.activate("owl")
    assert overlay.visible_card.poi_id == "owl"

    tour.activate("hearth")
    assert overlay.visible_card.poi_id == "hearth"
    assert not overlay.cards["owl"].visible

    tour.deactivate("hearth")
    assert overlay.visible_card is None


def test_owl_zoom_pinned_after_activation(registry, clock):
    """Activating the owl settles on zoom 1.2 exactly and stays there"""
    tour, loader = _tour(registry, clock)
    asyncio.run(tour.start(DESCRIPTORS[:1]))
    assert loader.get("hall") is not None

    tour.activate("owl")
    tour.tick(now=clock.now + 1.0)
    assert tour.camera.zoom != 1.2

    tour.tick(now=clock.now + 2.0)
    assert tour.camera.zoom == 1.2

    for step in range(1, 5):
        tour.tick(now=clock.now + 2.0 + step)
        assert tour.camera.zoom == 1.2
