# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Per-device button map with staged edits and a short-lived load cache.

A :class:`ButtonMap` holds the features of every controller profile one
device has been mapped to.  Edits are staged in memory (with a single
level of undo) until :meth:`ButtonMap.save_button_map` writes them
through the persistence store.  While nothing is staged, reads reload
the map from the store at most once per resource lifetime.
"""

from __future__ import annotations

import copy
import logging
import time
from collections.abc import Callable, Iterable
from typing import Protocol

from .device import Device
from .models import PRIMITIVE_SEMIAXIS, ButtonMapData, DriverPrimitive, Feature, FeatureVector

log = logging.getLogger(__name__)

RESOURCE_LIFETIME_MS = 2000


class ButtonMapStore(Protocol):
    """Persistence layer contract.

    Implementations raise :class:`OSError` or :class:`ValueError` on
    failure.
    """

    def load(self, resource_path: str) -> ButtonMapData: ...

    def save(self, resource_path: str, data: ButtonMapData) -> None: ...


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class ButtonMap:
    """Button map of one device, backed by *store* under *resource_path*."""

    def __init__(
        self,
        resource_path: str,
        store: ButtonMapStore,
        device: Device | None = None,
        *,
        lifetime_ms: int = RESOURCE_LIFETIME_MS,
        clock: Callable[[], float] = _monotonic_ms,
    ) -> None:
        self._resource_path = resource_path
        self._store = store
        self._device = device if device is not None else Device()
        self._lifetime_ms = lifetime_ms
        self._clock = clock
        self._button_map: ButtonMapData = {}
        self._backup: ButtonMapData | None = None
        self._timestamp: float | None = None
        self._modified = False

    # -- Properties --------------------------------------------------------

    @property
    def resource_path(self) -> str:
        return self._resource_path

    @property
    def device(self) -> Device:
        return self._device

    @property
    def is_modified(self) -> bool:
        return self._modified

    @property
    def has_backup(self) -> bool:
        return self._backup is not None

    def is_valid(self) -> bool:
        return self._device.is_valid()

    # -- Read path ---------------------------------------------------------

    def get_button_map(self) -> ButtonMapData:
        """Return the button map, reloading it first unless edits are staged."""
        if not self._modified:
            self.refresh()
        return self._button_map

    def refresh(self) -> bool:
        """Reload from the store once the cached copy has expired.

        Returns ``False`` if the reload failed; the in-memory map is then
        left as it was.
        """
        now = self._clock()
        if self._timestamp is not None and now < self._timestamp + self._lifetime_ms:
            return True

        try:
            loaded = self._store.load(self._resource_path)
        except (OSError, ValueError):
            log.warning("Failed to load button map %s", self._resource_path, exc_info=True)
            return False

        self._button_map = {
            controller_id: self.sanitize(controller_id, features)
            for controller_id, features in loaded.items()
        }
        self._timestamp = now
        self._backup = None
        return True

    # -- Staged edits ------------------------------------------------------

    def map_features(self, controller_id: str, features: Iterable[Feature]) -> None:
        """Stage *features* for *controller_id*, replacing features by name.

        When several incoming features share a name, the last one is kept.
        """
        # Create a backup to allow revert
        if self._backup is None:
            self._backup = copy.deepcopy(self._button_map)

        incoming = [f.copy() for f in features]

        by_name: dict[str, Feature] = {}
        for feature in incoming:
            if feature.name in by_name:
                log.debug('%s: Duplicate feature "%s" in update', controller_id, feature.name)
            by_name[feature.name] = feature
        new_features = list(by_name.values())

        kept: FeatureVector = []
        for feature in self._button_map.get(controller_id, []):
            if feature.name in by_name:
                log.debug('%s: Overwriting feature "%s"', controller_id, feature.name)
            else:
                kept.append(feature)

        # Update axis configurations
        for feature in incoming:
            updated_axes = sorted({
                p.driver_index for p in feature.primitives
                if p.type == PRIMITIVE_SEMIAXIS
            })
            for axis in updated_axes:
                self._device.configuration.load_axis_from_api(axis, self._device)

        # New assignments come first so they win primitive conflicts
        merged = self.sanitize(controller_id, new_features + kept)
        merged.sort(key=lambda f: f.name)
        self._button_map[controller_id] = merged

        self._modified = True

    def save_button_map(self) -> bool:
        """Write the button map through the store and clear staged state."""
        try:
            self._store.save(self._resource_path, self._button_map)
        except (OSError, ValueError):
            log.warning("Failed to save button map %s", self._resource_path, exc_info=True)
            return False

        self._timestamp = self._clock()
        self._backup = None
        self._modified = False
        return True

    def revert_button_map(self) -> bool:
        """Restore the map as it was before the first staged edit."""
        if self._backup is None:
            return False

        self._button_map = self._backup
        self._backup = None
        return True

    def reset_button_map(self, controller_id: str) -> bool:
        """Clear every feature of *controller_id* and save immediately."""
        if not self._button_map.get(controller_id):
            return False

        self._button_map[controller_id] = []
        return self.save_button_map()

    # -- Conflict resolution -----------------------------------------------

    @staticmethod
    def sanitize(controller_id: str, features: Iterable[Feature]) -> FeatureVector:
        """Resolve primitive conflicts in one profile's feature list.

        A primitive already used by an earlier feature, or earlier in the
        same feature, is replaced by the unknown sentinel.  Features left
        without a valid primitive are dropped.  Returns the new list; the
        input features are not modified.
        """
        sanitized: FeatureVector = []
        for feature in features:
            primitives: list[DriverPrimitive] = []
            for primitive in feature.primitives:
                if not primitive.is_valid:
                    primitives.append(primitive)
                    continue

                owner = next(
                    (f for f in sanitized if primitive in f.primitives),
                    None,
                )
                if owner is None and primitive not in primitives:
                    primitives.append(primitive)
                    continue

                log.error(
                    "%s: %s (%s) conflicts with %s (%s)",
                    controller_id,
                    primitive,
                    owner.name if owner is not None else feature.name,
                    primitive,
                    feature.name,
                )
                primitives.append(DriverPrimitive())

            sanitized.append(Feature(
                name=feature.name,
                type=feature.type,
                primitives=primitives,
            ))

        result: FeatureVector = []
        for feature in sanitized:
            if feature.has_valid_primitive():
                result.append(feature)
            else:
                log.debug("%s: Removing %s from button map", controller_id, feature.name)
        return result
