# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Physical device identity and learned configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class AxisConfiguration:
    """Resting value and travel of one driver axis."""
    center: int = 0
    range: int = 1


@dataclass
class DeviceConfiguration:
    """State derived for a device rather than reported by it."""
    axes: dict[int, AxisConfiguration] = field(default_factory=dict)

    def axis(self, axis_index: int) -> AxisConfiguration:
        return self.axes.get(axis_index, AxisConfiguration())

    def load_axis_from_api(self, axis_index: int, device: Device) -> None:
        """Re-derive the calibration of *axis_index* from the driver report."""
        reported = device.driver_axes.get(axis_index, AxisConfiguration())
        self.axes[axis_index] = AxisConfiguration(
            center=reported.center,
            range=reported.range,
        )


@dataclass
class Device:
    """A physical input device as seen by the driver.

    Two devices are equal when their identity fields match; the driver
    axis report and the configuration are not part of the identity.
    """
    name: str = ""
    provider: str = ""
    vendor_id: int = 0
    product_id: int = 0
    button_count: int = 0
    hat_count: int = 0
    axis_count: int = 0
    index: int = 0
    driver_axes: dict[int, AxisConfiguration] = field(
        default_factory=dict, compare=False, repr=False,
    )
    configuration: DeviceConfiguration = field(
        default_factory=DeviceConfiguration, compare=False, repr=False,
    )

    def is_valid(self) -> bool:
        return bool(self.name) and bool(self.provider)
