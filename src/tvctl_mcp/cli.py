"""Command-line interface.

Usage::

    tvctl West screen-off
    tvctl 192.0.2.10 power-on --port 8089
    tvctl --list
    tvctl --commands

Exit status is 0 on success, 1 when the transaction fails and 2 for an
invalid invocation or configuration.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from . import __version__
from .client import TVClient
from .config import DeviceDirectory, load_config
from .errors import ConfigurationError
from .protocol.commands import Command
from .protocol.framing import WireEncoding, format_hex

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tvctl",
        description="Send power and screen commands to networked displays.",
    )
    parser.add_argument("target", nargs="?", help="device name or IP address")
    parser.add_argument(
        "command",
        nargs="?",
        help="one of: " + ", ".join(c.cli_name for c in Command),
    )
    parser.add_argument("--config", help="path to the JSON configuration file")
    parser.add_argument("--port", type=int, help="override the control port")
    parser.add_argument(
        "--ascii-hex",
        action="store_true",
        help="send frames as ASCII hex digits instead of raw bytes",
    )
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("--list", action="store_true", help="list configured devices")
    parser.add_argument(
        "--commands", action="store_true", help="list commands and their frames"
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true")
    verbosity.add_argument("-q", "--quiet", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def cmd_list(directory: DeviceDirectory) -> int:
    """Print the configured devices."""
    if not directory:
        print("No devices configured.")
        return EXIT_OK
    for name in directory:
        device = directory[name]
        line = f"{device.name:<16} {device.host:<16} {device.mac or '-':<18}"
        if device.description:
            line += f" {device.description}"
        print(line.rstrip())
    return EXIT_OK


def cmd_commands(client: TVClient) -> int:
    """Print every command with the frame it sends."""
    for command, frame in client.frame_table().items():
        print(f"{command.cli_name:<12} {format_hex(frame)}")
    return EXIT_OK


def cmd_send(client: TVClient, directory: DeviceDirectory, args) -> int:
    """Run one transaction and report it."""
    command = Command.from_name(args.command)
    device = directory.resolve(args.target)
    result = client.execute(device, command)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    elif result.success:
        print(f"{command.cli_name} sent to {device.name} ({device.host}:{result.port})")
        if result.wake_error:
            print(f"Warning: {result.wake_error}")
        if result.response is None:
            print("No response")
        else:
            print(f"Response: {format_hex(result.response.raw)} {result.response.text!r}")
    else:
        print(
            f"Failed to send {command.cli_name} to {device.name}: "
            f"{result.reason.value} error: {result.message}",
            file=sys.stderr,
        )
    return EXIT_OK if result.success else EXIT_FAILED


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.INFO
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")

    try:
        directory, settings = load_config(args.config)
        if args.port is not None:
            settings = settings.with_port(args.port)
        if args.ascii_hex:
            settings = settings.with_wire_encoding(WireEncoding.ASCII_HEX)
        client = TVClient(settings)

        if args.list:
            return cmd_list(directory)
        if args.commands:
            return cmd_commands(client)
        if not args.target or not args.command:
            parser.print_usage(sys.stderr)
            print("tvctl: error: a device and a command are required", file=sys.stderr)
            return EXIT_USAGE
        return cmd_send(client, directory, args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_USAGE
    except KeyboardInterrupt:
        print("\nCancelled", file=sys.stderr)
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
