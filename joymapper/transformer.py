# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Learn feature correspondences between controller profiles.

Every device that has been mapped to more than one controller profile is
evidence of how the profiles relate: features of two profiles backed by
the same primitives on the same device are "the same" input.  The
transformer counts each such pattern and later replays the most common
one to synthesize a mapping for a profile a device was never mapped to.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from .button_map_utils import primitives_equal
from .device import Device
from .models import Feature, FeatureVector

log = logging.getLogger(__name__)

# Sanity cap on the number of devices learned from
MAX_OBSERVED_DEVICES = 200


@dataclass(frozen=True)
class ControllerTranslation:
    """Unordered pair of controller ids, stored smaller id first."""
    from_controller: str
    to_controller: str

    def __post_init__(self) -> None:
        if not self.from_controller < self.to_controller:
            raise ValueError(
                f"Controller {self.from_controller!r} must sort before "
                f"{self.to_controller!r}"
            )


@dataclass(frozen=True, order=True)
class FeatureTranslation:
    from_feature: str
    to_feature: str


# One transformation pattern: every translation seen together on a device
FeatureMap = frozenset[FeatureTranslation]

# Pattern -> number of devices it was observed on
FeatureMaps = dict[FeatureMap, int]


class ControllerTransformer:
    """Frequency table of feature translations between controller profiles.

    Learned state lives in memory only and is rebuilt each run by feeding
    observed button maps to :meth:`on_add`.  Not thread-safe.
    """

    def __init__(self, max_observed_devices: int = MAX_OBSERVED_DEVICES) -> None:
        self._max_observed_devices = max_observed_devices
        self._observed_devices: list[Device] = []
        self._controller_map: dict[ControllerTranslation, FeatureMaps] = {}

    # -- Observation -------------------------------------------------------

    def on_add(self, device: Device, button_map: Mapping[str, FeatureVector]) -> None:
        """Learn from the button map of one device."""
        if len(self._observed_devices) >= self._max_observed_devices:
            return

        # Skip devices we've already encountered
        if device in self._observed_devices:
            return

        self._observed_devices.append(device)

        controllers = sorted(button_map)
        for i, controller_to in enumerate(controllers):
            for controller_from in controllers[:i]:
                self._add_controller_map(
                    controller_from, button_map[controller_from],
                    controller_to, button_map[controller_to],
                )

    def _add_controller_map(
        self,
        controller_from: str,
        features_from: Iterable[Feature],
        controller_to: str,
        features_to: FeatureVector,
    ) -> bool:
        key = ControllerTranslation(controller_from, controller_to)

        translations: set[FeatureTranslation] = set()
        for from_feature in features_from:
            to_feature = next(
                (f for f in features_to if primitives_equal(from_feature, f)),
                None,
            )
            if to_feature is not None:
                translations.add(FeatureTranslation(from_feature.name, to_feature.name))

        if not translations:
            return False

        feature_maps = self._controller_map.setdefault(key, {})
        feature_map = frozenset(translations)
        feature_maps[feature_map] = feature_maps.get(feature_map, 0) + 1
        return True

    # -- Queries -----------------------------------------------------------

    @property
    def observed_devices(self) -> tuple[Device, ...]:
        return tuple(self._observed_devices)

    def feature_maps(self, controller_a: str, controller_b: str) -> FeatureMaps:
        """Return a copy of the learned patterns between two controllers."""
        if controller_a == controller_b:
            return {}
        key = ControllerTranslation(*sorted((controller_a, controller_b)))
        return dict(self._controller_map.get(key, {}))

    def transform_features(
        self,
        device: Device,
        from_controller: str,
        to_controller: str,
        features: Iterable[Feature],
    ) -> FeatureVector:
        """Translate *features* of *from_controller* into *to_controller*.

        Uses the pattern observed on the most devices.  On a tie the
        pattern learned first wins.  Features the pattern does not cover
        are dropped.  Returns an empty list when nothing was learned for
        the pair.
        """
        if from_controller == to_controller:
            return []

        swap = from_controller > to_controller
        key = ControllerTranslation(
            to_controller if swap else from_controller,
            from_controller if swap else to_controller,
        )

        feature_maps = self._controller_map.get(key, {})

        max_count = 0
        best_map: FeatureMap | None = None
        for feature_map, count in feature_maps.items():
            log.debug(
                "Found %d controller transformations from %s to %s with %d features",
                count, from_controller, to_controller, len(feature_map),
            )
            if count > max_count:
                max_count = count
                best_map = feature_map

        if best_map is None:
            return []

        log.debug(
            "Best transformation for %s with %d translations:",
            device.name or "device", len(best_map),
        )

        features = list(features)
        transformed: FeatureVector = []
        for translation in sorted(best_map):
            source = translation.to_feature if swap else translation.from_feature
            target = translation.from_feature if swap else translation.to_feature
            log.debug("    %s -> %s", source, target)

            match = next((f for f in features if f.name == source), None)
            if match is not None:
                transformed.append(match.copy(name=target))

        return transformed

    # -- Devices -----------------------------------------------------------

    def create_device(self, device_info: Device) -> Device:
        """Build a device, adopting the configuration of a matching observed one."""
        result = copy.deepcopy(device_info)

        for device in self._observed_devices:
            if device == device_info:
                result.configuration = copy.deepcopy(device.configuration)

        return result
