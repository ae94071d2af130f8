"""Device directory and client settings.

Both are loaded once from a JSON file and are read-only afterwards::

    {
      "port": 8088,
      "wire_encoding": "binary",
      "frames": {"screen_on": "DD FF 00 07 C1 31 00 01 01 F6 BB CC"},
      "devices": [
        {"name": "West", "ip_address": "192.0.2.10",
         "mac_address": "00:1A:2B:3C:4D:5E", "description": "West lobby"}
      ]
    }
"""

from __future__ import annotations

import ipaddress
import json
import logging
import os
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from .errors import ConfigurationError
from .protocol.commands import Command
from .protocol.framing import WireEncoding, parse_frame
from .transport.tcp_connection import (
    CONNECT_TIMEOUT,
    DEFAULT_PORT,
    RECEIVE_SIZE,
    RECEIVE_TIMEOUT,
    SEND_TIMEOUT,
)
from .transport.wake import BROADCAST_ADDRESS, WAKE_PORT

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "TVCTL_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/tvctl/config.json")
WAKE_DELAY = 10.0
RESPONSE_DELAY = 0.5

_MAC_RE = re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$")


@dataclass(frozen=True)
class DeviceDescriptor:
    """One display in the directory."""

    name: str
    host: str
    mac: str | None = None
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "ip_address": self.host,
            "mac_address": self.mac,
            "description": self.description,
        }


@dataclass(frozen=True)
class ClientSettings:
    """Ports, timeouts and delays used by a transaction.

    The delays are explicit so tests can substitute near-zero values.
    """

    port: int = DEFAULT_PORT
    connect_timeout: float = CONNECT_TIMEOUT
    send_timeout: float = SEND_TIMEOUT
    receive_timeout: float = RECEIVE_TIMEOUT
    receive_size: int = RECEIVE_SIZE
    wake_delay: float = WAKE_DELAY
    response_delay: float = RESPONSE_DELAY
    broadcast_address: str = BROADCAST_ADDRESS
    wake_port: int = WAKE_PORT
    wire_encoding: WireEncoding = WireEncoding.BINARY
    frame_overrides: Mapping[Command, bytes] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "frame_overrides", MappingProxyType(dict(self.frame_overrides))
        )

    def with_port(self, port: int) -> ClientSettings:
        if not 0 < port < 65536:
            raise ConfigurationError(f"Port must be 1-65535, got {port}")
        return replace(self, port=port)

    def with_wire_encoding(self, encoding: WireEncoding) -> ClientSettings:
        return replace(self, wire_encoding=encoding)


class DeviceDirectory(Mapping[str, DeviceDescriptor]):
    """Read-only, case-insensitive mapping of device names to descriptors."""

    def __init__(self, devices: list[DeviceDescriptor] | None = None) -> None:
        entries: dict[str, DeviceDescriptor] = {}
        for device in devices or []:
            key = device.name.lower()
            if key in entries:
                raise ConfigurationError(f"Duplicate device name '{device.name}'")
            entries[key] = device
        self._entries = MappingProxyType(entries)

    def __getitem__(self, name: str) -> DeviceDescriptor:
        return self._entries[name.lower()]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (device.name for device in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def names(self) -> list[str]:
        return list(self)

    def resolve(self, target: str) -> DeviceDescriptor:
        """Find a device by name, or accept a literal IP address.

        A literal address yields an ad-hoc descriptor with no hardware
        address, so power-on against it skips the wake packet.

        Raises:
            ConfigurationError: If ``target`` is neither.
        """
        if not target:
            raise ConfigurationError("No device given")
        if target in self:
            return self[target]
        try:
            ipaddress.ip_address(target)
        except ValueError:
            raise ConfigurationError(
                f"Device '{target}' not found. Available: {self.names()}"
            ) from None
        return DeviceDescriptor(name=target, host=target)


def normalize_mac(mac: str) -> str:
    """Validate a colon-hex hardware address and upper-case it."""
    if not _MAC_RE.match(mac):
        raise ConfigurationError(
            f"Invalid hardware address {mac!r}: expected six colon-separated hex octets"
        )
    return mac.upper()


def parse_device(entry: Mapping[str, Any]) -> DeviceDescriptor:
    """Build a descriptor from one ``devices`` entry."""
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Device entry must be an object, got {entry!r}")
    name = str(entry.get("name", "")).strip()
    if not name:
        raise ConfigurationError(f"Device entry without a name: {dict(entry)}")
    host = str(entry.get("ip_address", "")).strip()
    if not host:
        raise ConfigurationError(f"Device '{name}' has no ip_address")
    mac = entry.get("mac_address")
    return DeviceDescriptor(
        name=name,
        host=host,
        mac=normalize_mac(str(mac).strip()) if mac else None,
        description=str(entry.get("description", "")),
    )


def parse_frame_overrides(frames: Mapping[str, str]) -> dict[Command, bytes]:
    """Convert ``{"screen_on": "DD FF ..."}`` into validated frame bytes."""
    if not isinstance(frames, Mapping):
        raise ConfigurationError(f"frames must be an object, got {frames!r}")
    overrides: dict[Command, bytes] = {}
    for name, text in frames.items():
        command = Command.from_name(name)
        try:
            data = bytes.fromhex(str(text))
        except ValueError as e:
            raise ConfigurationError(f"Frame for '{name}' is not hex: {e}") from e
        if parse_frame(data) is None:
            raise ConfigurationError(
                f"Frame for '{name}' must start with DD FF and end with BB CC"
            )
        overrides[command] = data
    return overrides


def _positive(options: Mapping[str, Any], key: str, default: float, allow_zero: bool = False) -> float:
    value = options.get(key, default)
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{key} must be a number, got {value!r}") from None
    if number < 0 or (number == 0 and not allow_zero):
        raise ConfigurationError(f"{key} must be positive, got {value!r}")
    return number


def _integer(options: Mapping[str, Any], key: str, default: int, minimum: int = 1) -> int:
    value = options.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigurationError(f"{key} must be an integer, got {value!r}")
    try:
        number = int(value)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {value!r}") from None
    if number < minimum:
        raise ConfigurationError(f"{key} must be at least {minimum}, got {value!r}")
    return number


def parse_settings(options: Mapping[str, Any]) -> ClientSettings:
    """Build ``ClientSettings`` from the top-level configuration keys."""
    encoding = options.get("wire_encoding", WireEncoding.BINARY.value)
    try:
        wire_encoding = WireEncoding(encoding)
    except ValueError:
        raise ConfigurationError(
            f"Unknown wire_encoding {encoding!r}. "
            f"Valid: {[e.value for e in WireEncoding]}"
        ) from None

    settings = ClientSettings(
        connect_timeout=_positive(options, "connect_timeout", CONNECT_TIMEOUT),
        send_timeout=_positive(options, "send_timeout", SEND_TIMEOUT),
        receive_timeout=_positive(options, "receive_timeout", RECEIVE_TIMEOUT),
        receive_size=_integer(options, "receive_size", RECEIVE_SIZE),
        wake_delay=_positive(options, "wake_delay", WAKE_DELAY, allow_zero=True),
        response_delay=_positive(options, "response_delay", RESPONSE_DELAY, allow_zero=True),
        broadcast_address=str(options.get("broadcast_address", BROADCAST_ADDRESS)),
        wake_port=_integer(options, "wake_port", WAKE_PORT),
        wire_encoding=wire_encoding,
        frame_overrides=parse_frame_overrides(options.get("frames", {})),
    )
    return settings.with_port(_integer(options, "port", DEFAULT_PORT))


def parse_config(options: Mapping[str, Any]) -> tuple[DeviceDirectory, ClientSettings]:
    """Build the directory and settings from a decoded configuration."""
    if not isinstance(options, Mapping):
        raise ConfigurationError("Configuration must be a JSON object")
    entries = options.get("devices", [])
    if not isinstance(entries, list):
        raise ConfigurationError(f"devices must be a list, got {entries!r}")
    devices = [parse_device(entry) for entry in entries]
    return DeviceDirectory(devices), parse_settings(options)


def config_path(path: str | os.PathLike | None = None) -> tuple[Path, bool]:
    """Resolve the configuration file path.

    Returns:
        The path and whether it was asked for explicitly (argument or
        environment variable) rather than being the default location.
    """
    if path:
        return Path(path).expanduser(), True
    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser(), True
    return DEFAULT_CONFIG_PATH.expanduser(), False


def load_config(
    path: str | os.PathLike | None = None,
) -> tuple[DeviceDirectory, ClientSettings]:
    """Load the device directory and client settings.

    A missing file at the default location yields an empty directory and
    default settings; a missing file that was asked for is an error.

    Raises:
        ConfigurationError: If the file is missing, unreadable, or invalid.
    """
    resolved, explicit = config_path(path)
    if not resolved.exists():
        if explicit:
            raise ConfigurationError(f"Config file not found: {resolved}")
        logger.debug("No config file at %s, using defaults", resolved)
        return DeviceDirectory(), ClientSettings()

    try:
        with open(resolved) as f:
            options = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Config load error ({resolved}): {e}") from e

    directory, settings = parse_config(options)
    logger.info("Loaded %d device(s) from %s", len(directory), resolved)
    return directory, settings
