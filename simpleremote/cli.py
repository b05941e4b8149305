import argparse
import asyncio
import sys
from typing import List, Optional

from . import config
from .controller import DeviceSessionController
from .logging_config import log
from .models import RokuDevice
from .prefs import PreferencesStore
from .roku_client import RokuApiClient, normalize_location
from .view_state import KIND_DEVICE_RECONNECTED


def _positive_float(raw: str) -> float:
    """Parse a strictly positive float for argparse."""
    try:
        value = float(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number: {raw!r}")
    if value <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {raw!r}")
    return value


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="simpleremote",
        description="Select, remember and reconnect to a streaming player on the local network",
    )
    parser.add_argument(
        "--prefs",
        default=None,
        help=f"Preferences file (default: {config.PREFS_FILE})",
    )
    parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=None,
        help="Overall reconnect timeout in seconds",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("reconnect", help="Reconnect to the last used device")

    select = sub.add_parser("select", help="Select a device and remember it")
    select.add_argument("--location", required=True, help="Device host, host:port or URL")
    select.add_argument("--name", required=True, help="Friendly device name")
    select.add_argument("--device-id", default="", help="Device identifier")

    sub.add_parser("forget", help="Forget the remembered device")
    sub.add_parser("status", help="Show the remembered device")
    return parser.parse_args(argv)


def build_controller(args: argparse.Namespace) -> DeviceSessionController:
    """Build a controller over the preferences file named in `args`."""
    prefs = PreferencesStore(args.prefs)
    return DeviceSessionController(RokuApiClient(), prefs, reconnect_timeout=args.timeout)


async def _reconnect(controller: DeviceSessionController) -> int:
    """Run one reconnect and map the outcome to an exit code."""
    final = await controller.start_reconnect()
    return 0 if final.kind == KIND_DEVICE_RECONNECTED else 1


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line and return its exit code."""
    args = parse_args(argv)
    controller = build_controller(args)
    controller.view_state.observe(lambda state: print(f"[state] {state}"))

    try:
        if args.command == "reconnect":
            return asyncio.run(_reconnect(controller))
        if args.command == "select":
            try:
                location = normalize_location(args.location)
            except ValueError as e:
                print(f"error: {e}", file=sys.stderr)
                return 2
            controller.select_from_user(RokuDevice(location, args.name, args.device_id))
            return 0
        if args.command == "forget":
            controller.forget_device()
            return 0
        location, name = controller.last_device_record()
        if location is None and name is None:
            print("No remembered device.")
        else:
            print(f"Remembered device: {name or '?'} at {location or '?'}")
        return 0
    finally:
        controller.client.close()
        log.debug(f"command {args.command} finished")

