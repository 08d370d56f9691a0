"""Tests for tour configuration loading and the built-in tables"""

import json

import pytest

from tourlib.config.tour_config import default_tour_config, load_tour_config
from tourlib.core.poi import PoiRegistry
from tourlib.data.resources import MODEL_RESOURCE, has_resource
from tourlib.loaders.descriptors import LoadProgress, ResourceKind
from tourlib.ui import LoadingIndicator


def test_missing_file_uses_built_in_tables(tmp_path):
    """No config file falls back to the bundled manifest and POIs"""
    config = load_tour_config(tmp_path / "missing.json")

    assert config.model_resource == MODEL_RESOURCE
    assert has_resource(config.model_resource)
    assert config.registry().first().id == "owl"


def test_built_in_owl_pose():
    """The first POI zooms in slightly"""
    owl = default_tour_config().registry().get("owl")

    assert owl.target_pose.zoom == 1.2
    assert "Owl" in owl.label


def test_load_from_json(tmp_path):
    """Resources, POIs and the establishing pose come from JSON"""
    path = tmp_path / "tour.json"
    path.write_text(json.dumps({
        "resources": [
            {"name": "hall", "kind": "glb", "location": "hall.glb"},
            {"name": "music", "kind": "audio", "location": "music.wav"},
        ],
        "points_of_interest": [{
            "id": "door",
            "label": "Door",
            "detail_text": "The main door.",
            "anchor_position": [0, 1, 4],
            "target_pose": {"position": [0, 2, 8], "target": [0, 1, 4], "zoom": 1.1},
        }],
        "establishing_pose": {"position": [10, 10, 10]},
    }))

    config = load_tour_config(path)

    assert [r.kind for r in config.resources] == [ResourceKind.MODEL, ResourceKind.AUDIO]
    assert config.model_resource == "hall"
    door = config.registry().get("door")
    assert list(door.target_pose.look_at_target) == [0.0, 1.0, 4.0]
    assert door.target_pose.zoom == 1.1
    assert list(config.establishing_pose.position) == [10.0, 10.0, 10.0]


def test_unknown_kind_is_kept_for_the_loader(tmp_path):
    """Unrecognised kinds survive parsing so loading can reject them"""
    path = tmp_path / "tour.json"
    path.write_text(json.dumps({
        "model_resource": "hall",
        "resources": [{"name": "clip", "kind": "video", "location": "clip.mp4"}],
    }))

    config = load_tour_config(path)

    assert config.resources[0].kind == "video"


def test_config_without_model_is_rejected(tmp_path):
    """A manifest must name a model"""
    path = tmp_path / "tour.json"
    path.write_text(json.dumps({"resources": [{"name": "notes", "kind": "document", "location": "n.json"}]}))

    with pytest.raises(ValueError):
        load_tour_config(path)


def test_duplicate_poi_ids_rejected():
    """Registry ids are unique"""
    owl = default_tour_config().registry().get("owl")

    with pytest.raises(ValueError):
        PoiRegistry([owl, owl])


def test_resource_kind_aliases():
    """Legacy manifest names map onto kinds"""
    assert ResourceKind.parse("gltf") == ResourceKind.MODEL
    assert ResourceKind.parse("Image") == ResourceKind.TEXTURE
    assert ResourceKind.parse("json") == ResourceKind.DOCUMENT
    with pytest.raises(ValueError):
        ResourceKind.parse("video")


def test_loading_indicator_percentage():
    """Progress renders as a whole percentage"""
    indicator = LoadingIndicator()

    indicator.on_progress(LoadProgress(1, 3, "hall"))

    assert indicator.message == "Loading... 33%"
    assert indicator.visible
