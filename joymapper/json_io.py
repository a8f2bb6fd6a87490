# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Button map JSON serialization and deserialization.

Document layout::

    {
      "controllers": {
        "game.controller.default": [
          {"name": "a", "type": "scalar", "primitives": ["Button 0"]},
          {"name": "leftstick", "type": "analog_stick",
           "primitives": ["Axis 1-", "Axis 1+", "Axis 0+", "Axis 0-"]}
        ]
      }
    }

Primitives are stored as binding strings (see
:meth:`~joymapper.models.DriverPrimitive.to_binding`).
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .models import (
    FEATURE_TYPES,
    FEATURE_UNKNOWN,
    ButtonMapData,
    DriverPrimitive,
    Feature,
)


# ── Deserialization ──────────────────────────────────────────────────────

def parse_json(source: str | bytes) -> ButtonMapData:
    """Parse a button map document.

    Raises :class:`ValueError` on malformed JSON or an unexpected layout.
    """
    raw = json.loads(source)
    if not isinstance(raw, dict) or not isinstance(raw.get("controllers"), dict):
        raise ValueError("Expected an object with a 'controllers' object")

    data: ButtonMapData = {}
    for controller_id, entries in raw["controllers"].items():
        if not isinstance(entries, list):
            raise ValueError(f"Features of {controller_id!r} must be a list")
        data[controller_id] = [_parse_feature(e) for e in entries]
    return data


def _parse_feature(entry: Any) -> Feature:
    if not isinstance(entry, dict) or not entry.get("name"):
        raise ValueError(f"Invalid feature entry {entry!r}")

    ftype = entry.get("type", FEATURE_UNKNOWN)
    if not isinstance(ftype, str):
        raise ValueError(f"Type of {entry['name']!r} must be a string")
    if ftype not in FEATURE_TYPES:
        ftype = FEATURE_UNKNOWN

    bindings = entry.get("primitives", [])
    if not isinstance(bindings, list):
        raise ValueError(f"Primitives of {entry['name']!r} must be a list")

    return Feature(
        name=str(entry["name"]),
        type=ftype,
        primitives=[DriverPrimitive.from_binding(str(b)) for b in bindings],
    )


# ── Serialization ────────────────────────────────────────────────────────

def to_json(data: ButtonMapData) -> str:
    """Return the JSON document for *data*."""
    doc = {
        "controllers": {
            controller_id: [
                {
                    "name": f.name,
                    "type": f.type,
                    "primitives": [p.to_binding() for p in f.primitives],
                }
                for f in features
            ]
            for controller_id, features in sorted(data.items())
        },
    }
    return json.dumps(doc, indent=2, ensure_ascii=False) + "\n"


def write_json(data: ButtonMapData, path: str | Path) -> Path:
    """Write *data* to *path*, returning the path."""
    dest = Path(path)
    dest.write_text(to_json(data), encoding="utf-8")
    return dest
