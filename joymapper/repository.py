# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""File-system persistence for button maps.

Each device's button map is one JSON file ``<base_dir>/<resource>.json``.
The resource name is derived from the device identity by
:func:`resource_path_for`.
"""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path

from .device import Device
from .json_io import parse_json, write_json
from .models import ButtonMapData


_UNSAFE_RE = re.compile(r"[^\w .()-]")
_RESOURCE_RE = re.compile(r"^[\w .()-]+$")


def _is_valid_resource_name(name: str) -> bool:
    if not name or not _RESOURCE_RE.match(name):
        return False
    return not name.startswith(".")


def resource_path_for(device: Device) -> str:
    """Return a filesystem-safe resource name for *device*."""
    name = _UNSAFE_RE.sub("_", device.name).strip() or "device"
    provider = _UNSAFE_RE.sub("_", device.provider).strip() or "unknown"
    stem = f"{provider}_{name}"
    if device.vendor_id or device.product_id:
        stem += f"_v{device.vendor_id:04X}_p{device.product_id:04X}"
    return f"{stem}_{device.button_count}b_{device.hat_count}h_{device.axis_count}a"


class JsonButtonMapStore:
    """Button map store writing one JSON document per resource."""

    def __init__(self, base_dir: str | Path) -> None:
        self._base_dir = Path(base_dir)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def path_for(self, resource_path: str) -> Path:
        """Return the file backing *resource_path*.

        Raises :class:`ValueError` for names that could leave the base
        directory.
        """
        if not _is_valid_resource_name(resource_path):
            raise ValueError(f"Invalid resource name {resource_path!r}")
        return self._base_dir / f"{resource_path}.json"

    def list_resources(self) -> list[str]:
        """Return sorted resource names stored under the base directory."""
        if not self._base_dir.is_dir():
            return []
        return sorted(
            p.stem for p in self._base_dir.glob("*.json")
            if not p.name.startswith(".")
        )

    def load(self, resource_path: str) -> ButtonMapData:
        """Load a stored button map.

        Raises :class:`FileNotFoundError` if it doesn't exist and
        :class:`ValueError` if it can't be parsed.
        """
        path = self.path_for(resource_path)
        if not path.exists():
            raise FileNotFoundError(f"Button map {resource_path!r} not found at {path}")
        return parse_json(path.read_text(encoding="utf-8"))

    def save(self, resource_path: str, data: ButtonMapData) -> None:
        """Write *data* atomically (temp file + rename)."""
        self._base_dir.mkdir(parents=True, exist_ok=True)
        dest = self.path_for(resource_path)

        fd, tmp_path = tempfile.mkstemp(
            suffix=".json", dir=str(self._base_dir), prefix=".tmp_"
        )
        try:
            os.close(fd)
            write_json(data, tmp_path)
            Path(tmp_path).replace(dest)
        except BaseException:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise
