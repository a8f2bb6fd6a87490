"""Tests for the ``python -m joymapper`` entry point."""

import pytest

from joymapper import __main__ as cli
from joymapper import config
from joymapper.models import DriverPrimitive, Feature
from joymapper.repository import JsonButtonMapStore


DEFAULT = "game.controller.default"
SNES = "game.controller.snes"


def _button(name: str, index: int) -> Feature:
    return Feature.scalar(name, DriverPrimitive.button(index))


@pytest.fixture
def store(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "_config_dir", lambda: tmp_path)
    monkeypatch.setattr(cli, "_apply_debug_logging", lambda settings: None)
    return JsonButtonMapStore(tmp_path / "maps")


def _run(store, *argv):
    return cli.main(["--storage-dir", str(store.base_dir), *argv])


class TestShow:
    def test_prints_map(self, store, capsys):
        store.save("pad", {DEFAULT: [_button("a", 0)]})
        assert _run(store, "show", "pad") == 0
        assert '"Button 0"' in capsys.readouterr().out

    def test_missing_map(self, store, capsys):
        assert _run(store, "show", "nothing") == 1
        assert "nothing" in capsys.readouterr().err


    def test_refuses_path_outside_storage(self, store, tmp_path, capsys):
        JsonButtonMapStore(tmp_path).save("secret", {DEFAULT: [_button("a", 0)]})
        assert _run(store, "show", "../secret") == 1
        assert "Button 0" not in capsys.readouterr().out


class TestTransform:
    def test_maps_new_controller(self, store, capsys):
        for name in ("pad_one", "pad_two"):
            store.save(name, {
                DEFAULT: [_button("a", 0), _button("b", 1)],
                SNES: [_button("b", 0), _button("a", 1)],
            })
        store.save("new_pad", {DEFAULT: [_button("a", 3), _button("b", 4)]})

        assert _run(store, "transform", "new_pad", DEFAULT, SNES) == 0
        assert "Mapped 2 features" in capsys.readouterr().out

        snes = {f.name: f.primitives for f in store.load("new_pad")[SNES]}
        assert snes == {
            "b": [DriverPrimitive.button(3)],
            "a": [DriverPrimitive.button(4)],
        }

    def test_nothing_learned(self, store, capsys):
        store.save("new_pad", {DEFAULT: [_button("a", 3)]})
        assert _run(store, "transform", "new_pad", DEFAULT, SNES) == 1
        assert "No transformation" in capsys.readouterr().err

    def test_missing_source_controller(self, store, capsys):
        store.save("new_pad", {SNES: [_button("a", 3)]})
        assert _run(store, "transform", "new_pad", DEFAULT, SNES) == 1
        assert "has no features" in capsys.readouterr().err
