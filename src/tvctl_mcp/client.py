"""Device transaction client.

One transaction, strictly in order::

    [wake packet -> settle delay]   power-on only
    connect -> send -> response delay -> best-effort read -> close

Success means connect and send both completed. The reply is diagnostic
only and never changes the outcome. Nothing is retried.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

from .config import ClientSettings, DeviceDescriptor, DeviceDirectory
from .errors import (
    AddressResolutionError,
    DeviceConnectionError,
    ResponseTimeout,
    TransmissionError,
    WakeSignalError,
)
from .protocol.commands import Command, encode, frame_table
from .protocol.framing import format_hex, to_wire
from .protocol.parser import DeviceResponse, parse_response
from .transport.tcp_connection import TCPConnection
from .transport.wake import send_wake_packet

logger = logging.getLogger(__name__)


class FailureReason(str, Enum):
    """Why a transaction failed."""

    ADDRESS_RESOLUTION = "address_resolution"
    CONNECTION = "connection"
    TRANSMISSION = "transmission"


@dataclass
class TransactionResult:
    """Outcome of one command transaction."""

    success: bool
    command: Command
    host: str
    port: int
    reason: FailureReason | None = None
    message: str = ""
    response: DeviceResponse | None = None
    wake_sent: bool = False
    wake_error: str | None = None
    bytes_sent: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": self.success,
            "command": self.command.value,
            "host": self.host,
            "port": self.port,
            "reason": self.reason.value if self.reason else None,
            "message": self.message,
            "response": self.response.to_dict() if self.response else None,
            "wake_sent": self.wake_sent,
            "wake_error": self.wake_error,
            "bytes_sent": self.bytes_sent,
        }


class TVClient:
    """Sends control commands to displays.

    Args:
        settings: Port, timeouts, delays and wire encoding.
        sleep: Called for the settle and response delays.
        connection_factory: Builds the stream connection for a transaction.
        wake: Broadcasts the magic packet for a hardware address.
    """

    def __init__(
        self,
        settings: ClientSettings | None = None,
        sleep: Callable[[float], None] = time.sleep,
        connection_factory: Callable[..., TCPConnection] = TCPConnection,
        wake: Callable[..., None] = send_wake_packet,
    ) -> None:
        self._settings = settings or ClientSettings()
        self._sleep = sleep
        self._connection_factory = connection_factory
        self._wake = wake

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    def frame_for(self, command: Command) -> bytes:
        """Frame bytes for a command, with configured overrides applied."""
        return encode(command, self._settings.frame_overrides)

    def frame_table(self) -> dict[Command, bytes]:
        """Every command with the frame it sends, overrides applied."""
        return frame_table(self._settings.frame_overrides)

    def execute_by_name(
        self, directory: DeviceDirectory, target: str, command: Command
    ) -> TransactionResult:
        """Resolve ``target`` in the directory, then run the transaction.

        Raises:
            ConfigurationError: If ``target`` is unknown. Raised before any
                network activity.
        """
        return self.execute(directory.resolve(target), command)

    def execute(self, device: DeviceDescriptor, command: Command) -> TransactionResult:
        """Run one transaction against a device. Never raises network errors."""
        settings = self._settings
        result = TransactionResult(
            success=False, command=command, host=device.host, port=settings.port
        )
        payload = to_wire(self.frame_for(command), settings.wire_encoding)

        if command is Command.POWER_ON:
            self._wake_phase(device, result)

        logger.info(
            "Sending %s to %s (%s:%d)",
            command.cli_name, device.name, device.host, settings.port,
        )
        conn = self._connection_factory(
            device.host, settings.port, connect_timeout=settings.connect_timeout
        )
        try:
            conn.open()
        except AddressResolutionError as e:
            return self._fail(result, FailureReason.ADDRESS_RESOLUTION, e)
        except DeviceConnectionError as e:
            return self._fail(result, FailureReason.CONNECTION, e)

        try:
            try:
                result.bytes_sent = conn.write(payload, timeout=settings.send_timeout)
            except (TransmissionError, DeviceConnectionError) as e:
                return self._fail(result, FailureReason.TRANSMISSION, e)

            result.success = True
            result.message = f"Sent {command.cli_name}: {format_hex(payload)}"
            result.response = self._response_phase(conn)
        finally:
            conn.close()

        logger.info("%s to %s succeeded", command.cli_name, device.name)
        return result

    def _wake_phase(self, device: DeviceDescriptor, result: TransactionResult) -> None:
        settings = self._settings
        try:
            self._wake(device.mac, settings.broadcast_address, settings.wake_port)
        except WakeSignalError as e:
            logger.warning("Wake packet for %s not sent: %s", device.name, e)
            result.wake_error = str(e)
        else:
            result.wake_sent = True

        logger.info("Waiting %gs for %s to boot", settings.wake_delay, device.name)
        self._sleep(settings.wake_delay)

    def _response_phase(self, conn: TCPConnection) -> DeviceResponse | None:
        settings = self._settings
        self._sleep(settings.response_delay)
        try:
            data = conn.read(settings.receive_size, timeout=settings.receive_timeout)
        except ResponseTimeout as e:
            logger.info("%s", e)
            return None
        except OSError as e:
            logger.info("Connection closed before a response: %s", e)
            return None

        if data is None:
            logger.info("No response")
            return None
        response = parse_response(data)
        logger.info("Response: %r", response)
        return response

    @staticmethod
    def _fail(
        result: TransactionResult, reason: FailureReason, error: Exception
    ) -> TransactionResult:
        result.reason = reason
        result.message = str(error)
        logger.error("Transaction failed (%s): %s", reason.value, error)
        return result
