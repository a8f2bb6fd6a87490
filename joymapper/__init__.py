# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Joystick button maps and cross-controller feature transformation.

Quick start::

    from joymapper import (
        ButtonMap,
        ControllerTransformer,
        JsonButtonMapStore,
    )

    store = JsonButtonMapStore("path/to/buttonmaps")
    transformer = ControllerTransformer()
    for device, button_map in known_maps:
        transformer.on_add(device, button_map.get_button_map())

    target = ButtonMap("my_pad", store, device)
    features = target.get_button_map()["game.controller.default"]
    target.map_features(
        "game.controller.snes",
        transformer.transform_features(
            device, "game.controller.default", "game.controller.snes", features,
        ),
    )
    target.save_button_map()
"""

from __future__ import annotations

from .models import (
    FEATURE_ACCELEROMETER,
    FEATURE_ANALOG_STICK,
    FEATURE_MOTOR,
    FEATURE_SCALAR,
    FEATURE_TYPES,
    FEATURE_UNKNOWN,
    PRIMITIVE_TYPES,
    ButtonMapData,
    DriverPrimitive,
    Feature,
    FeatureVector,
)
from .button_map_utils import primitives_equal
from .device import AxisConfiguration, Device, DeviceConfiguration
from .button_map import RESOURCE_LIFETIME_MS, ButtonMap, ButtonMapStore
from .transformer import (
    MAX_OBSERVED_DEVICES,
    ControllerTransformer,
    ControllerTranslation,
    FeatureTranslation,
)
from .json_io import parse_json, to_json, write_json
from .repository import JsonButtonMapStore, resource_path_for
from .registry import DeviceRegistry, device_from_joystick

__all__ = [
    # Models
    "DriverPrimitive",
    "Feature",
    "FeatureVector",
    "ButtonMapData",
    "FEATURE_TYPES",
    "FEATURE_UNKNOWN",
    "FEATURE_SCALAR",
    "FEATURE_MOTOR",
    "FEATURE_ANALOG_STICK",
    "FEATURE_ACCELEROMETER",
    "PRIMITIVE_TYPES",
    "primitives_equal",
    # Devices
    "Device",
    "DeviceConfiguration",
    "AxisConfiguration",
    "DeviceRegistry",
    "device_from_joystick",
    # Button maps
    "ButtonMap",
    "ButtonMapStore",
    "RESOURCE_LIFETIME_MS",
    # Transformation
    "ControllerTransformer",
    "ControllerTranslation",
    "FeatureTranslation",
    "MAX_OBSERVED_DEVICES",
    # Persistence
    "JsonButtonMapStore",
    "resource_path_for",
    "parse_json",
    "to_json",
    "write_json",
]
