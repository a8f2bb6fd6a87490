# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Typed data models for driver primitives and controller features."""

from __future__ import annotations

import re
from dataclasses import dataclass, field


# ── Driver primitive types ──────────────────────────────────────────────

PRIMITIVE_UNKNOWN  = "unknown"
PRIMITIVE_BUTTON   = "button"
PRIMITIVE_HAT      = "hat"
PRIMITIVE_SEMIAXIS = "semiaxis"
PRIMITIVE_MOTOR    = "motor"

PRIMITIVE_TYPES: set[str] = {
    PRIMITIVE_UNKNOWN,
    PRIMITIVE_BUTTON,
    PRIMITIVE_HAT,
    PRIMITIVE_SEMIAXIS,
    PRIMITIVE_MOTOR,
}

HAT_UP    = "up"
HAT_DOWN  = "down"
HAT_RIGHT = "right"
HAT_LEFT  = "left"

HAT_DIRECTIONS: tuple[str, ...] = (HAT_UP, HAT_DOWN, HAT_RIGHT, HAT_LEFT)

# ── Feature types ───────────────────────────────────────────────────────

FEATURE_UNKNOWN       = "unknown"
FEATURE_SCALAR        = "scalar"
FEATURE_MOTOR         = "motor"
FEATURE_ANALOG_STICK  = "analog_stick"
FEATURE_ACCELEROMETER = "accelerometer"

FEATURE_TYPES: set[str] = {
    FEATURE_UNKNOWN,
    FEATURE_SCALAR,
    FEATURE_MOTOR,
    FEATURE_ANALOG_STICK,
    FEATURE_ACCELEROMETER,
}

# ── Primitive roles within a feature ────────────────────────────────────
# Index of each primitive in Feature.primitives, by feature type.

SCALAR_PRIMITIVE = 0

ANALOG_STICK_UP    = 0
ANALOG_STICK_DOWN  = 1
ANALOG_STICK_RIGHT = 2
ANALOG_STICK_LEFT  = 3

ACCELEROMETER_POSITIVE_X = 0
ACCELEROMETER_POSITIVE_Y = 1
ACCELEROMETER_POSITIVE_Z = 2

PRIMITIVE_COUNTS: dict[str, int] = {
    FEATURE_UNKNOWN: 0,
    FEATURE_SCALAR: 1,
    FEATURE_MOTOR: 1,
    FEATURE_ANALOG_STICK: 4,
    FEATURE_ACCELEROMETER: 3,
}


# ── Binding strings ─────────────────────────────────────────────────────
# Same spelling the input capture layer reports: "Button 3", "Axis 1+",
# "Hat 0 Up".  Semiaxes with a non-default center or range carry them as
# trailing key=value pairs.

_BUTTON_RE = re.compile(r"^Button (\d+)$")
_MOTOR_RE = re.compile(r"^Motor (\d+)$")
_HAT_RE = re.compile(r"^Hat (\d+) (Up|Down|Right|Left)$")
_AXIS_RE = re.compile(
    r"^Axis (\d+)([+-])(?: center=(-?\d+))?(?: range=(\d+))?$"
)


@dataclass(frozen=True)
class DriverPrimitive:
    """One concrete hardware signal on a physical device.

    The default instance is the *unknown* sentinel that marks a cleared
    or invalid assignment.  Use the factory classmethods to build the
    other kinds; fields that do not apply to a kind keep their defaults
    so structural equality compares only the identifying fields.
    """
    type: str = PRIMITIVE_UNKNOWN
    driver_index: int = 0
    hat_direction: str = ""
    semiaxis_direction: int = 0
    center: int = 0
    range: int = 1

    # ── Factories ────────────────────────────────────────────────────

    @classmethod
    def button(cls, index: int) -> DriverPrimitive:
        return cls(type=PRIMITIVE_BUTTON, driver_index=index)

    @classmethod
    def hat(cls, index: int, direction: str) -> DriverPrimitive:
        if direction not in HAT_DIRECTIONS:
            raise ValueError(f"Unknown hat direction {direction!r}")
        return cls(type=PRIMITIVE_HAT, driver_index=index, hat_direction=direction)

    @classmethod
    def semiaxis(
        cls,
        index: int,
        direction: int,
        center: int = 0,
        range: int = 1,
    ) -> DriverPrimitive:
        if direction not in (1, -1):
            raise ValueError(f"semiaxis direction must be +1 or -1, got {direction}")
        return cls(
            type=PRIMITIVE_SEMIAXIS,
            driver_index=index,
            semiaxis_direction=direction,
            center=center,
            range=range,
        )

    @classmethod
    def motor(cls, index: int) -> DriverPrimitive:
        return cls(type=PRIMITIVE_MOTOR, driver_index=index)

    # ── Queries ──────────────────────────────────────────────────────

    @property
    def is_valid(self) -> bool:
        return self.type != PRIMITIVE_UNKNOWN

    def to_binding(self) -> str:
        """Return the binding string for this primitive."""
        if self.type == PRIMITIVE_BUTTON:
            return f"Button {self.driver_index}"
        if self.type == PRIMITIVE_MOTOR:
            return f"Motor {self.driver_index}"
        if self.type == PRIMITIVE_HAT:
            return f"Hat {self.driver_index} {self.hat_direction.capitalize()}"
        if self.type == PRIMITIVE_SEMIAXIS:
            sign = "+" if self.semiaxis_direction > 0 else "-"
            text = f"Axis {self.driver_index}{sign}"
            if self.center != 0:
                text += f" center={self.center}"
            if self.range != 1:
                text += f" range={self.range}"
            return text
        return "Unknown"

    @classmethod
    def from_binding(cls, text: str) -> DriverPrimitive:
        """Parse a binding string produced by :meth:`to_binding`.

        Raises :class:`ValueError` for anything else.
        """
        text = text.strip()
        if text == "Unknown":
            return cls()
        m = _BUTTON_RE.match(text)
        if m:
            return cls.button(int(m.group(1)))
        m = _MOTOR_RE.match(text)
        if m:
            return cls.motor(int(m.group(1)))
        m = _HAT_RE.match(text)
        if m:
            return cls.hat(int(m.group(1)), m.group(2).lower())
        m = _AXIS_RE.match(text)
        if m:
            return cls.semiaxis(
                int(m.group(1)),
                1 if m.group(2) == "+" else -1,
                center=int(m.group(3) or 0),
                range=int(m.group(4) or 1),
            )
        raise ValueError(f"Unrecognised binding {text!r}")

    def __str__(self) -> str:
        return self.to_binding()


@dataclass
class Feature:
    """A named logical input of a controller profile.

    *primitives* is ordered by role, see the ``ANALOG_STICK_*`` and
    ``ACCELEROMETER_*`` constants.
    """
    name: str
    type: str = FEATURE_SCALAR
    primitives: list[DriverPrimitive] = field(default_factory=list)

    def primitive(self, index: int) -> DriverPrimitive:
        """Return the primitive in role *index*, or the unknown sentinel."""
        if 0 <= index < len(self.primitives):
            return self.primitives[index]
        return DriverPrimitive()

    def has_valid_primitive(self) -> bool:
        return any(p.is_valid for p in self.primitives)

    def copy(self, name: str | None = None) -> Feature:
        """Return a copy with its own primitive list, optionally renamed."""
        return Feature(
            name=self.name if name is None else name,
            type=self.type,
            primitives=list(self.primitives),
        )

    # ── Convenience factories ────────────────────────────────────────

    @classmethod
    def scalar(cls, name: str, primitive: DriverPrimitive) -> Feature:
        return cls(name=name, type=FEATURE_SCALAR, primitives=[primitive])

    @classmethod
    def motor(cls, name: str, primitive: DriverPrimitive) -> Feature:
        return cls(name=name, type=FEATURE_MOTOR, primitives=[primitive])

    @classmethod
    def analog_stick(
        cls,
        name: str,
        *,
        up: DriverPrimitive,
        down: DriverPrimitive,
        right: DriverPrimitive,
        left: DriverPrimitive,
    ) -> Feature:
        return cls(
            name=name,
            type=FEATURE_ANALOG_STICK,
            primitives=[up, down, right, left],
        )

    @classmethod
    def accelerometer(
        cls,
        name: str,
        *,
        x: DriverPrimitive,
        y: DriverPrimitive,
        z: DriverPrimitive,
    ) -> Feature:
        return cls(
            name=name,
            type=FEATURE_ACCELEROMETER,
            primitives=[x, y, z],
        )


FeatureVector = list[Feature]

# controller profile id -> features mapped for that profile
ButtonMapData = dict[str, FeatureVector]
