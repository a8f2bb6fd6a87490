# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""
Persistent settings for joymapper.

Settings are stored as a JSON file in the OS-appropriate config directory
(``~/.config/joymapper`` on Linux, ``%APPDATA%/joymapper`` on Windows).
Button maps live in a ``buttonmaps`` folder next to it unless
``storage_dir`` points elsewhere.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from PySide6.QtCore import QStandardPaths

from .button_map import RESOURCE_LIFETIME_MS
from .transformer import MAX_OBSERVED_DEVICES


# -- Defaults --------------------------------------------------------------

_APP_DIR_NAME = "joymapper"
_CONFIG_FILE  = "settings.json"
_STORAGE_DIR  = "buttonmaps"


def _config_dir() -> Path:
    """Return (and create) the per-user config directory."""
    base = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.GenericConfigLocation,
    )
    path = Path(base) / _APP_DIR_NAME
    path.mkdir(parents=True, exist_ok=True)
    return path


@dataclass
class Settings:
    """User-tunable settings."""

    # Storage
    storage_dir: str = ""                  # empty = <config dir>/buttonmaps
    resource_lifetime_ms: int = RESOURCE_LIFETIME_MS

    # Learning
    max_observed_devices: int = MAX_OBSERVED_DEVICES

    # Debug
    debug_logging: bool = False
    debug_log_level: str = "WARNING"     # DEBUG / INFO / WARNING / ERROR

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load from disk, returning defaults if the file is missing or bad.

        Unknown keys in the JSON are ignored so that adding or removing
        fields never breaks an older settings file.
        """
        path = Path(path) if path is not None else _config_dir() / _CONFIG_FILE
        if not path.exists():
            return cls()
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return cls()
        if not isinstance(raw, dict):
            return cls()
        # Keep only known keys whose value has the type of the field default
        defaults = cls()
        kwargs = {}
        for f in fields(cls):
            if f.name in raw and type(raw[f.name]) is type(getattr(defaults, f.name)):
                kwargs[f.name] = raw[f.name]
        return cls(**kwargs)

    def save(self, path: str | Path | None = None) -> None:
        """Write current settings to disk."""
        path = Path(path) if path is not None else _config_dir() / _CONFIG_FILE
        path.write_text(
            json.dumps(asdict(self), indent=2, ensure_ascii=False),
            encoding="utf-8",
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def storage_path(self) -> Path:
        """Return the directory button maps are stored in."""
        if self.storage_dir:
            return Path(self.storage_dir)
        return _config_dir() / _STORAGE_DIR

    def cache_dir(self) -> Path:
        """Return the directory debug logs are written to."""
        path = _config_dir() / "cache"
        path.mkdir(parents=True, exist_ok=True)
        return path
