# Copyright (C) 2025-2026 Joymapper Contributors
# SPDX-License-Identifier: AGPL-3.0-or-later
# See LICENSE for the full text.

"""Command-line entry point: ``python -m joymapper``."""

from __future__ import annotations

import argparse
import logging
import sys

from .button_map import ButtonMap
from .config import Settings
from .device import Device
from .json_io import to_json
from .registry import DeviceRegistry
from .repository import JsonButtonMapStore
from .transformer import ControllerTransformer

log = logging.getLogger("joymapper")


def _apply_debug_logging(settings: Settings) -> None:
    """Configure Python logging based on the user's debug settings."""
    if settings.debug_logging:
        level = getattr(logging, settings.debug_log_level, logging.WARNING)
        log_file = settings.cache_dir() / "joymapper_debug.log"
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            handlers=[
                logging.FileHandler(str(log_file), encoding="utf-8"),
                logging.StreamHandler(sys.stderr),
            ],
            force=True,
        )
    else:
        logging.basicConfig(level=logging.WARNING, force=True)


def _open_map(settings: Settings, store: JsonButtonMapStore, resource: str) -> ButtonMap:
    # Stored maps carry no hardware identity; the resource name stands in for it
    device = Device(name=resource, provider="storage")
    return ButtonMap(
        resource, store, device, lifetime_ms=settings.resource_lifetime_ms,
    )


def _learn_all(
    settings: Settings, store: JsonButtonMapStore,
) -> ControllerTransformer:
    transformer = ControllerTransformer(settings.max_observed_devices)
    for resource in store.list_resources():
        button_map = _open_map(settings, store, resource)
        transformer.on_add(button_map.device, button_map.get_button_map())
    log.info(
        "Learned from %d button maps", len(transformer.observed_devices),
    )
    return transformer


def cmd_show(settings: Settings, store: JsonButtonMapStore, args: argparse.Namespace) -> int:
    button_map = _open_map(settings, store, args.resource)
    if not button_map.refresh():
        print(f"No button map named {args.resource!r}", file=sys.stderr)
        return 1
    sys.stdout.write(to_json(button_map.get_button_map()))
    return 0


def cmd_transform(settings: Settings, store: JsonButtonMapStore, args: argparse.Namespace) -> int:
    transformer = _learn_all(settings, store)

    button_map = _open_map(settings, store, args.resource)
    features = button_map.get_button_map().get(args.from_controller)
    if not features:
        print(
            f"{args.resource!r} has no features for {args.from_controller!r}",
            file=sys.stderr,
        )
        return 1

    transformed = transformer.transform_features(
        button_map.device, args.from_controller, args.to_controller, features,
    )
    if not transformed:
        print(
            f"No transformation known from {args.from_controller!r} "
            f"to {args.to_controller!r}",
            file=sys.stderr,
        )
        return 1

    button_map.map_features(args.to_controller, transformed)
    if not button_map.save_button_map():
        print(f"Failed to save {args.resource!r}", file=sys.stderr)
        return 1

    print(f"Mapped {len(transformed)} features to {args.to_controller}")
    return 0


def cmd_devices(settings: Settings, store: JsonButtonMapStore, args: argparse.Namespace) -> int:
    registry = DeviceRegistry(ControllerTransformer(settings.max_observed_devices))
    try:
        for device in registry.scan():
            print(
                f"{device.index}: {device.name} "
                f"[{device.vendor_id:04X}:{device.product_id:04X}] "
                f"buttons={device.button_count} hats={device.hat_count} "
                f"axes={device.axis_count}"
            )
    finally:
        registry.shutdown()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="joymapper",
        description="Manage joystick button maps and transfer them between controllers.",
    )
    parser.add_argument(
        "--storage-dir", help="directory holding button maps (overrides settings)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_show = sub.add_parser("show", help="print a stored button map")
    p_show.add_argument("resource")
    p_show.set_defaults(func=cmd_show)

    p_transform = sub.add_parser(
        "transform", help="derive a controller's features from another controller",
    )
    p_transform.add_argument("resource")
    p_transform.add_argument("from_controller", metavar="FROM")
    p_transform.add_argument("to_controller", metavar="TO")
    p_transform.set_defaults(func=cmd_transform)

    p_devices = sub.add_parser("devices", help="list connected joysticks")
    p_devices.set_defaults(func=cmd_devices)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = Settings.load()
    if args.storage_dir:
        settings.storage_dir = args.storage_dir
    _apply_debug_logging(settings)
    store = JsonButtonMapStore(settings.storage_path())
    return args.func(settings, store, args)


if __name__ == "__main__":
    sys.exit(main())
