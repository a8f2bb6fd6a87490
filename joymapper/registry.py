# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Device records for connected joysticks.

Uses pygame's joystick subsystem to enumerate devices and read their
identity (name, SDL GUID, button / hat / axis counts).  Axis calibration
is guessed from each axis' resting value: triggers rest at one end of
their travel rather than in the middle.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING, Any

from .device import AxisConfiguration, Device

if TYPE_CHECKING:
    from .transformer import ControllerTransformer

log = logging.getLogger(__name__)

# Resting values beyond this are treated as a half-axis (trigger)
_TRIGGER_REST_THRESHOLD = 0.5


def decode_guid(guid: str) -> tuple[int, int]:
    """Return ``(vendor_id, product_id)`` from an SDL joystick GUID string.

    Returns ``(0, 0)`` when the GUID is malformed.
    """
    try:
        raw = bytes.fromhex(guid)
    except (TypeError, ValueError):
        return 0, 0
    if len(raw) != 16:
        return 0, 0
    vendor = int.from_bytes(raw[4:6], "little")
    product = int.from_bytes(raw[8:10], "little")
    return vendor, product


def _axis_from_rest(value: float) -> AxisConfiguration:
    if value <= -_TRIGGER_REST_THRESHOLD:
        return AxisConfiguration(center=-1, range=2)
    if value >= _TRIGGER_REST_THRESHOLD:
        return AxisConfiguration(center=1, range=2)
    return AxisConfiguration()


def device_from_joystick(joy: Any, provider: str = "pygame") -> Device:
    """Build a :class:`Device` from an initialised pygame ``Joystick``."""
    vendor, product = decode_guid(joy.get_guid())
    num_axes = joy.get_numaxes()
    return Device(
        name=joy.get_name(),
        provider=provider,
        vendor_id=vendor,
        product_id=product,
        button_count=joy.get_numbuttons(),
        hat_count=joy.get_numhats(),
        axis_count=num_axes,
        index=joy.get_id(),
        driver_axes={i: _axis_from_rest(joy.get_axis(i)) for i in range(num_axes)},
    )


class DeviceRegistry:
    """Enumerates connected joysticks as :class:`Device` records.

    When a transformer is attached, every record goes through
    :meth:`ControllerTransformer.create_device` so a device seen before
    picks up its learned configuration.

    pygame is initialised lazily on the first :meth:`scan`.
    """

    def __init__(self, transformer: ControllerTransformer | None = None) -> None:
        self._transformer = transformer
        self._ready = False

    def ensure_ready(self) -> bool:
        """Initialise pygame's joystick subsystem.  Returns ``True`` on success."""
        if self._ready:
            return True
        try:
            import pygame

            prev = os.environ.get("SDL_VIDEODRIVER")
            os.environ["SDL_VIDEODRIVER"] = "dummy"
            try:
                pygame.display.init()
            finally:
                if prev is not None:
                    os.environ["SDL_VIDEODRIVER"] = prev
                else:
                    os.environ.pop("SDL_VIDEODRIVER", None)

            pygame.joystick.init()
        except (ImportError, RuntimeError):
            log.warning("Joystick subsystem unavailable", exc_info=True)
            return False
        self._ready = True
        return True

    def shutdown(self) -> None:
        if not self._ready:
            return
        import pygame
        pygame.joystick.quit()
        pygame.display.quit()
        self._ready = False

    def scan(self) -> list[Device]:
        """Return a device record for every connected joystick."""
        if not self.ensure_ready():
            return []

        import pygame

        # Re-init so newly connected devices are picked up
        pygame.joystick.quit()
        pygame.joystick.init()
        pygame.event.pump()

        devices: list[Device] = []
        for i in range(pygame.joystick.get_count()):
            joy = pygame.joystick.Joystick(i)
            joy.init()
            info = device_from_joystick(joy)
            if self._transformer is not None:
                info = self._transformer.create_device(info)
            log.debug(
                "Found %s (%04X:%04X) with %d buttons, %d hats, %d axes",
                info.name, info.vendor_id, info.product_id,
                info.button_count, info.hat_count, info.axis_count,
            )
            devices.append(info)
        return devices
