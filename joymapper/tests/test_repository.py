"""Tests for the JSON button map format and the file store."""

import json

import pytest

from joymapper.button_map import ButtonMap
from joymapper.device import Device
from joymapper.json_io import parse_json, to_json, write_json
from joymapper.models import FEATURE_UNKNOWN, DriverPrimitive, Feature
from joymapper.repository import JsonButtonMapStore, resource_path_for


def _sample_map():
    return {
        "game.controller.default": [
            Feature.scalar("a", DriverPrimitive.button(0)),
            Feature.scalar("lefttrigger", DriverPrimitive.semiaxis(4, 1, center=-1, range=2)),
            Feature.analog_stick(
                "leftstick",
                up=DriverPrimitive.semiaxis(1, -1),
                down=DriverPrimitive.semiaxis(1, 1),
                right=DriverPrimitive.semiaxis(0, 1),
                left=DriverPrimitive.semiaxis(0, -1),
            ),
            Feature.scalar("up", DriverPrimitive.hat(0, "up")),
            Feature.motor("strongmotor", DriverPrimitive.motor(0)),
        ],
        "game.controller.snes": [
            Feature.scalar("b", DriverPrimitive.button(0)),
        ],
    }


class TestJsonIO:
    def test_round_trip(self):
        data = _sample_map()
        assert parse_json(to_json(data)) == data

    def test_document_layout(self):
        doc = json.loads(to_json(_sample_map()))
        first = doc["controllers"]["game.controller.default"][1]
        assert first == {
            "name": "lefttrigger",
            "type": "scalar",
            "primitives": ["Axis 4+ center=-1 range=2"],
        }

    def test_unknown_feature_type(self):
        text = json.dumps({"controllers": {"c": [
            {"name": "wheel", "type": "relpointer", "primitives": ["Button 1"]},
        ]}})
        assert parse_json(text)["c"][0].type == FEATURE_UNKNOWN

    @pytest.mark.parametrize("text", [
        "not json",
        "[]",
        '{"controllers": []}',
        '{"controllers": {"c": {}}}',
        '{"controllers": {"c": [{"type": "scalar"}]}}',
        '{"controllers": {"c": [{"name": "a", "primitives": ["Key A"]}]}}',
        '{"controllers": {"c": [{"name": "a", "type": [], "primitives": ["Button 0"]}]}}',
        '{"controllers": {"c": [{"name": "a", "type": {}, "primitives": ["Button 0"]}]}}',
    ])
    def test_malformed_documents_raise(self, text):
        with pytest.raises(ValueError):
            parse_json(text)

    def test_write_json(self, tmp_path):
        path = write_json(_sample_map(), tmp_path / "map.json")
        assert parse_json(path.read_text(encoding="utf-8")) == _sample_map()


class TestJsonButtonMapStore:
    def test_save_and_load(self, tmp_path):
        store = JsonButtonMapStore(tmp_path / "maps")
        store.save("pad", _sample_map())
        assert store.load("pad") == _sample_map()
        assert store.path_for("pad").exists()

    def test_save_leaves_no_temp_files(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        store.save("pad", _sample_map())
        store.save("pad", {})
        assert [p.name for p in tmp_path.iterdir()] == ["pad.json"]

    def test_load_missing_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            JsonButtonMapStore(tmp_path).load("missing")

    @pytest.mark.parametrize("name", ["../outside", "..", "a/b", "a\\b", "", ".hidden"])
    def test_rejects_unsafe_resource_names(self, tmp_path, name):
        store = JsonButtonMapStore(tmp_path / "maps")
        with pytest.raises(ValueError):
            store.path_for(name)
        with pytest.raises(ValueError):
            store.save(name, {})
        assert ButtonMap(name, store).refresh() is False
        assert not (tmp_path / "outside.json").exists()

    def test_resource_path_for_is_accepted(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        device = Device(name="Pad/2: <Pro>", provider="xinput", vendor_id=1)
        store.save(resource_path_for(device), {})
        assert store.list_resources() == [resource_path_for(device)]

    def test_list_resources(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        assert JsonButtonMapStore(tmp_path / "nope").list_resources() == []
        store.save("beta", {})
        store.save("alpha", {})
        assert store.list_resources() == ["alpha", "beta"]

    def test_corrupt_file_fails_refresh(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        store.path_for("pad").write_text("{broken", encoding="utf-8")
        assert ButtonMap("pad", store).refresh() is False

    def test_non_string_feature_type_fails_refresh(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        store.path_for("pad").write_text(
            '{"controllers": {"c": [{"name": "a", "type": [], "primitives": ["Button 0"]}]}}',
            encoding="utf-8",
        )
        button_map = ButtonMap("pad", store)
        assert button_map.refresh() is False
        assert button_map.get_button_map() == {}

    def test_button_map_round_trip(self, tmp_path):
        store = JsonButtonMapStore(tmp_path)
        button_map = ButtonMap("pad", store)
        button_map.map_features("game.controller.default", [
            Feature.scalar("a", DriverPrimitive.button(0)),
        ])
        assert button_map.save_button_map()

        reloaded = ButtonMap("pad", store)
        assert [f.name for f in reloaded.get_button_map()["game.controller.default"]] == ["a"]


class TestResourcePath:
    def test_includes_identity(self):
        device = Device(
            name="Wireless Controller", provider="udev",
            vendor_id=0x054C, product_id=0x09CC,
            button_count=13, hat_count=1, axis_count=6,
        )
        assert resource_path_for(device) == (
            "udev_Wireless Controller_v054C_p09CC_13b_1h_6a"
        )

    def test_unsafe_characters_are_replaced(self):
        device = Device(name="Pad/2: <Pro>", provider="xinput", button_count=10)
        path = resource_path_for(device)
        assert "/" not in path and ":" not in path and "<" not in path
        assert path.startswith("xinput_Pad_2_ _Pro_")
