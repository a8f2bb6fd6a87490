# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Helpers shared by the button map and the controller transformer."""

from __future__ import annotations

from .models import (
    ACCELEROMETER_POSITIVE_X,
    ACCELEROMETER_POSITIVE_Y,
    ACCELEROMETER_POSITIVE_Z,
    ANALOG_STICK_DOWN,
    ANALOG_STICK_LEFT,
    ANALOG_STICK_RIGHT,
    ANALOG_STICK_UP,
    FEATURE_ACCELEROMETER,
    FEATURE_ANALOG_STICK,
    FEATURE_MOTOR,
    FEATURE_SCALAR,
    SCALAR_PRIMITIVE,
    Feature,
)

# Roles compared for each feature type.  Types missing here never match.
_COMPARED_ROLES: dict[str, tuple[int, ...]] = {
    FEATURE_SCALAR: (SCALAR_PRIMITIVE,),
    FEATURE_MOTOR: (SCALAR_PRIMITIVE,),
    FEATURE_ANALOG_STICK: (
        ANALOG_STICK_UP,
        ANALOG_STICK_DOWN,
        ANALOG_STICK_RIGHT,
        ANALOG_STICK_LEFT,
    ),
    FEATURE_ACCELEROMETER: (
        ACCELEROMETER_POSITIVE_X,
        ACCELEROMETER_POSITIVE_Y,
        ACCELEROMETER_POSITIVE_Z,
    ),
}


def primitives_equal(lhs: Feature, rhs: Feature) -> bool:
    """Check if two features of the same type are backed by the same primitives."""
    if lhs.type != rhs.type:
        return False
    roles = _COMPARED_ROLES.get(lhs.type)
    if roles is None:
        return False
    return all(lhs.primitive(role) == rhs.primitive(role) for role in roles)
