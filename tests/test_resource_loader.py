"""Tests for the parallel resource loader"""

import asyncio

import pytest

from tourlib.loaders import (
    DecodeError,
    LoadProgress,
    ResourceDescriptor,
    ResourceKind,
    ResourceLoader,
    TransportError,
    UnsupportedKindError,
)
from tourlib.loaders.resource_table import ResourceTable

from conftest import FakeTransport, ScriptedStrategy, hall_fragment


def _loader(*strategies):
    return ResourceLoader(FakeTransport(), strategies=strategies)


def _descriptors():
    return [
        ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf"),
        ResourceDescriptor("floor", ResourceKind.TEXTURE, "hall/floor.png"),
        ResourceDescriptor("notes", ResourceKind.DOCUMENT, "hall/notes.json"),
    ]


def test_load_all_notifies_once_per_item():
    """Every success notifies exactly once, with a monotonic fraction ending at 1.0"""
    model = ScriptedStrategy(ResourceKind.MODEL, results={"hall": hall_fragment()})
    texture = ScriptedStrategy(ResourceKind.TEXTURE)
    document = ScriptedStrategy(ResourceKind.DOCUMENT)
    loader = _loader(model, texture, document)

    seen = []
    loader.set_progress_callback(seen.append)

    asyncio.run(loader.load_all(_descriptors()))

    assert len(seen) == 3
    assert [p.loaded_count for p in seen] == [1, 2, 3]
    assert all(p.total_count == 3 for p in seen)
    fractions = [p.fraction for p in seen]
    assert fractions == sorted(fractions)
    assert fractions[-1] == 1.0
    assert {p.last_completed_name for p in seen} == {"hall", "floor", "notes"}
    assert loader.progress.is_complete


def test_loaded_resources_are_retrievable():
    """get/has round-trip for every loaded name"""
    fragment = hall_fragment()
    loader = _loader(
        ScriptedStrategy(ResourceKind.MODEL, results={"hall": fragment}),
        ScriptedStrategy(ResourceKind.TEXTURE),
        ScriptedStrategy(ResourceKind.DOCUMENT),
    )

    asyncio.run(loader.load_all(_descriptors()))

    assert loader.get("hall") is fragment
    assert loader.has("floor")
    assert loader.get("floor") == "asset:floor"
    assert sorted(loader.get_resource_names()) == ["floor", "hall", "notes"]
    assert loader.get_entry("notes").kind == ResourceKind.DOCUMENT
    assert [e.name for e in loader.get_resources_by_kind(ResourceKind.MODEL)] == ["hall"]


def test_absent_name_is_not_an_error():
    """Lookups of names never loaded return None / False"""
    loader = _loader()

    assert loader.get("missing") is None
    assert not loader.has("missing")


def test_empty_batch_resolves_without_notifications():
    """An empty descriptor list resolves immediately with fraction 0"""
    loader = _loader()
    seen = []
    loader.set_progress_callback(seen.append)

    asyncio.run(loader.load_all([]))

    assert seen == []
    assert loader.progress.total_count == 0
    assert loader.progress.fraction == 0.0


def test_first_failure_rejects_batch():
    """A failing item rejects the batch, is never stored and never notified"""
    model = ScriptedStrategy(ResourceKind.MODEL, results={"hall": hall_fragment()})
    texture = ScriptedStrategy(
        ResourceKind.TEXTURE,
        errors={"floor": DecodeError("Cannot decode image: truncated")},
    )
    document = ScriptedStrategy(ResourceKind.DOCUMENT)
    loader = _loader(model, texture, document)

    seen = []
    loader.set_progress_callback(seen.append)

    with pytest.raises(DecodeError) as excinfo:
        asyncio.run(loader.load_all(_descriptors()))

    error = excinfo.value
    assert error.name == "floor"
    assert error.kind == ResourceKind.TEXTURE
    assert error.location == "hall/floor.png"
    assert "floor" in str(error)

    assert not loader.has("floor")
    assert "floor" not in [p.last_completed_name for p in seen]


def test_transport_failure_carries_error_kind():
    """Transport failures surface as TransportError"""
    loader = _loader(
        ScriptedStrategy(ResourceKind.MODEL, errors={"hall": TransportError("HTTP error! status: 404")}),
    )

    with pytest.raises(TransportError) as excinfo:
        asyncio.run(loader.load_all([ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf")]))

    assert excinfo.value.name == "hall"
    assert not loader.has("hall")


def test_unsupported_kind_rejected_before_fetching():
    """A kind without a strategy fails before any item starts"""
    model = ScriptedStrategy(ResourceKind.MODEL)
    loader = _loader(model)

    descriptors = [
        ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf"),
        ResourceDescriptor("intro", "video", "hall/intro.mp4"),
    ]

    with pytest.raises(UnsupportedKindError) as excinfo:
        asyncio.run(loader.load_all(descriptors))

    assert excinfo.value.name == "intro"
    assert "video" in str(excinfo.value)
    assert model.started == []
    assert not loader.has("hall")


def test_late_success_after_failure_is_discarded():
    """Items still in flight when the batch fails never reach the table"""

    async def scenario():
        model = ScriptedStrategy(ResourceKind.MODEL, gated={"hall"})
        texture = ScriptedStrategy(ResourceKind.TEXTURE, errors={"floor": DecodeError("bad image")})
        loader = _loader(model, texture)

        seen = []
        loader.set_progress_callback(seen.append)

        with pytest.raises(DecodeError):
            await loader.load_all([
                ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf"),
                ResourceDescriptor("floor", ResourceKind.TEXTURE, "hall/floor.png"),
            ])

        # Let the orphaned model load finish
        model.release("hall")
        for _ in range(5):
            await asyncio.sleep(0)

        return loader, seen

    loader, seen = asyncio.run(scenario())

    assert not loader.has("hall")
    assert seen == []


def test_unexpected_strategy_error_fails_the_batch():
    """Arbitrary exceptions from a strategy surface as DecodeError and stop the batch"""

    async def scenario():
        model = ScriptedStrategy(ResourceKind.MODEL, gated={"hall"})
        texture = ScriptedStrategy(ResourceKind.TEXTURE, errors={"floor": RuntimeError("worker died")})
        loader = _loader(model, texture)

        with pytest.raises(DecodeError) as excinfo:
            await loader.load_all([
                ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf"),
                ResourceDescriptor("floor", ResourceKind.TEXTURE, "hall/floor.png"),
            ])

        model.release("hall")
        for _ in range(5):
            await asyncio.sleep(0)

        return loader, excinfo.value

    loader, error = asyncio.run(scenario())

    assert error.name == "floor"
    assert error.kind == ResourceKind.TEXTURE
    assert error.location == "hall/floor.png"
    assert isinstance(error.__cause__, RuntimeError)
    assert "worker died" in str(error)
    assert not loader.has("hall")


def test_failing_progress_observer_does_not_break_loading():
    """An observer that raises is logged and the batch still completes"""
    loader = _loader(ScriptedStrategy(ResourceKind.MODEL), ScriptedStrategy(ResourceKind.TEXTURE))
    calls = []

    def observer(progress):
        calls.append(progress.loaded_count)
        raise ValueError("observer bug")

    loader.set_progress_callback(observer)
    asyncio.run(loader.load_all([
        ResourceDescriptor("a", ResourceKind.MODEL, "a.gltf"),
        ResourceDescriptor("b", ResourceKind.TEXTURE, "b.png"),
    ]))

    assert sorted(calls) == [1, 2]
    assert loader.has("a")
    assert loader.has("b")
    assert loader.progress.fraction == 1.0


def test_reinvocation_resets_progress():
    """A second load_all starts counting from zero"""
    loader = _loader(ScriptedStrategy(ResourceKind.MODEL), ScriptedStrategy(ResourceKind.TEXTURE))
    seen = []
    loader.set_progress_callback(seen.append)

    asyncio.run(loader.load_all([
        ResourceDescriptor("a", ResourceKind.MODEL, "a.gltf"),
        ResourceDescriptor("b", ResourceKind.TEXTURE, "b.png"),
    ]))
    seen.clear()
    asyncio.run(loader.load_all([ResourceDescriptor("c", ResourceKind.TEXTURE, "c.png")]))

    assert [(p.loaded_count, p.total_count) for p in seen] == [(1, 1)]
    # Earlier results stay in the table
    assert loader.has("a")
    assert loader.has("c")


def test_dispose_clears_table():
    """dispose() removes every entry and resets progress"""
    loader = _loader(ScriptedStrategy(ResourceKind.MODEL))
    asyncio.run(loader.load_all([ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf")]))
    assert loader.has("hall")

    loader.dispose()

    assert not loader.has("hall")
    assert loader.get("hall") is None
    assert loader.progress == LoadProgress()


def test_register_strategy_replaces_kind():
    """Registering a strategy for an existing kind replaces it"""
    loader = _loader(ScriptedStrategy(ResourceKind.MODEL, results={"hall": "old"}))
    loader.register_strategy(ScriptedStrategy(ResourceKind.MODEL, results={"hall": "new"}))

    asyncio.run(loader.load_all([ResourceDescriptor("hall", ResourceKind.MODEL, "hall/scene.gltf")]))

    assert loader.get("hall") == "new"


def test_default_strategies_cover_every_kind():
    """The default loader handles all five resource kinds"""
    loader = ResourceLoader(FakeTransport())

    for kind in ResourceKind:
        assert kind in loader._strategies


def test_load_progress_fraction():
    """Fraction is loaded/total, 0 for an empty batch"""
    assert LoadProgress(0, 0).fraction == 0.0
    assert LoadProgress(1, 4).fraction == 0.25
    assert not LoadProgress(0, 0).is_complete
    assert LoadProgress(4, 4).is_complete


def test_resource_table_basics():
    """Table insert/get/clear"""
    table = ResourceTable()
    table.insert("hall", ResourceKind.MODEL, "fragment")

    assert "hall" in table
    assert len(table) == 1
    assert table.get("hall") == "fragment"
    assert [entry.name for entry in table] == ["hall"]

    table.clear()
    assert len(table) == 0
    assert table.get("hall") is None
