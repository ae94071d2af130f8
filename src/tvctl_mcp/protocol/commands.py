"""Command identifiers and the fixed frame table.

The byte sequences are dictated by the display firmware. They are stored
literally and never derived: the checksum byte is a per-command constant.
"""

from __future__ import annotations

from enum import Enum
from typing import Mapping

from ..errors import ConfigurationError


class Command(str, Enum):
    """The four supported control commands."""

    POWER_ON = "power_on"
    POWER_OFF = "power_off"
    SCREEN_ON = "screen_on"
    SCREEN_OFF = "screen_off"

    @property
    def cli_name(self) -> str:
        return self.value.replace("_", "-")

    @classmethod
    def from_name(cls, name: str) -> Command:
        """Look up a command by name.

        Accepts ``power-on``, ``power_on``, ``PowerOn`` and ``poweron`` alike.

        Raises:
            ConfigurationError: If the name matches no command.
        """
        key = name.strip().lower().replace("-", "").replace("_", "")
        for command in cls:
            if command.value.replace("_", "") == key:
                return command
        raise ConfigurationError(
            f"Unknown command '{name}'. Valid: {[c.cli_name for c in cls]}"
        )


COMMAND_FRAMES: dict[Command, bytes] = {
    Command.POWER_ON: bytes.fromhex("DD FF 00 08 C1 15 00 00 01 BB BB DD BB CC"),
    Command.POWER_OFF: bytes.fromhex("DD FF 00 08 C1 15 00 00 01 AA AA DD BB CC"),
    Command.SCREEN_ON: bytes.fromhex("DD FF 00 07 C1 31 00 01 01 F6 BB CC"),
    Command.SCREEN_OFF: bytes.fromhex("DD FF 00 07 C1 31 00 01 00 F7 BB CC"),
}


def frame_table(overrides: Mapping[Command, bytes] | None = None) -> dict[Command, bytes]:
    """Return the effective frame table with any overrides applied."""
    table = dict(COMMAND_FRAMES)
    if overrides:
        table.update(overrides)
    return table


def encode(command: Command, overrides: Mapping[Command, bytes] | None = None) -> bytes:
    """Return the frame bytes for a command.

    Args:
        command: One of the four ``Command`` members.
        overrides: Optional per-installation replacements for table entries.
    """
    if overrides and command in overrides:
        return bytes(overrides[command])
    return COMMAND_FRAMES[command]
