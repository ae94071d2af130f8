"""MCP server entry point for display power and screen control.

Exposes tools and resources via the Model Context Protocol using the
official Python MCP SDK with stdio transport. Devices and settings come
from the same JSON configuration file as the ``tvctl`` command line.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP

from .client import TVClient
from .config import DeviceDirectory, load_config
from .errors import ConfigurationError
from .protocol.commands import Command
from .protocol.framing import format_hex

logger = logging.getLogger(__name__)

mcp = FastMCP(
    "tvctl",
    instructions="Power and screen control for networked displays",
)

# Loaded on first use
_directory: DeviceDirectory | None = None
_client: TVClient | None = None


def _get_client() -> tuple[DeviceDirectory, TVClient]:
    """Load the configuration once and return the directory and client."""
    global _directory, _client
    if _client is None or _directory is None:
        directory, settings = load_config()
        _directory, _client = directory, TVClient(settings)
    return _directory, _client


def _run(device: str, command: Command) -> dict[str, Any]:
    try:
        directory, client = _get_client()
        descriptor = directory.resolve(device)
    except ConfigurationError as e:
        return {"error": str(e)}
    result = client.execute(descriptor, command)
    return result.to_dict()


# ─── DEVICE TOOLS ────────────────────────────────────────────────────

@mcp.tool()
def list_devices() -> dict[str, Any]:
    """List the displays in the device directory."""
    try:
        directory, _ = _get_client()
    except ConfigurationError as e:
        return {"error": str(e)}
    return {"devices": [directory[name].to_dict() for name in directory]}


@mcp.tool()
def list_commands() -> dict[str, Any]:
    """List the supported commands and the frame bytes each one sends."""
    try:
        _, client = _get_client()
    except ConfigurationError as e:
        return {"error": str(e)}
    return {
        "commands": [
            {"name": command.cli_name, "frame": format_hex(frame)}
            for command, frame in client.frame_table().items()
        ]
    }


# ─── CONTROL TOOLS ───────────────────────────────────────────────────

@mcp.tool()
def send_command(device: str, command: str) -> dict[str, Any]:
    """Send a control command to a display.

    Args:
        device: Device name from the directory, or an IP address.
        command: power-on, power-off, screen-on or screen-off.
    """
    try:
        parsed = Command.from_name(command)
    except ConfigurationError as e:
        return {"error": str(e)}
    return _run(device, parsed)


@mcp.tool()
def power_on(device: str) -> dict[str, Any]:
    """Power a display on.

    Broadcasts a Wake-on-LAN packet when the device has a hardware address
    on file, then waits for it to boot before sending the command. Expect
    the call to take at least ten seconds.

    Args:
        device: Device name from the directory, or an IP address.
    """
    return _run(device, Command.POWER_ON)


@mcp.tool()
def power_off(device: str) -> dict[str, Any]:
    """Power a display off (standby).

    Args:
        device: Device name from the directory, or an IP address.
    """
    return _run(device, Command.POWER_OFF)


@mcp.tool()
def screen_on(device: str) -> dict[str, Any]:
    """Turn the panel back on without a full power cycle."""
    return _run(device, Command.SCREEN_ON)


@mcp.tool()
def screen_off(device: str) -> dict[str, Any]:
    """Blank the panel while the display stays powered."""
    return _run(device, Command.SCREEN_OFF)


# ─── MCP RESOURCES ───────────────────────────────────────────────────

@mcp.resource("tvctl://devices")
def resource_devices() -> str:
    """Configured displays."""
    return json.dumps(list_devices())


@mcp.resource("tvctl://commands")
def resource_commands() -> str:
    """Supported commands with their frames."""
    return json.dumps(list_commands())


# ─── ENTRY POINT ─────────────────────────────────────────────────────

def main():
    """Run the MCP server with stdio transport."""
    logging.basicConfig(level=logging.INFO)
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
