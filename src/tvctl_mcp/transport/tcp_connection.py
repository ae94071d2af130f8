"""TCP stream connection to the display's control port.

Every operation carries its own timeout so an unresponsive display can
never block the caller indefinitely.
"""

from __future__ import annotations

import logging
import socket

from ..errors import (
    AddressResolutionError,
    DeviceConnectionError,
    ResponseTimeout,
    TransmissionError,
)

logger = logging.getLogger(__name__)

DEFAULT_PORT = 8088
CONNECT_TIMEOUT = 5.0
SEND_TIMEOUT = 5.0
RECEIVE_TIMEOUT = 5.0
RECEIVE_SIZE = 1024


class TCPConnection:
    """Manages one TCP connection to a display.

    Usage::

        with TCPConnection("192.0.2.10") as conn:
            conn.write(frame_bytes)
            response = conn.read()
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        connect_timeout: float = CONNECT_TIMEOUT,
    ) -> None:
        self._host = host
        self._port = port
        self._connect_timeout = connect_timeout
        self._sock: socket.socket | None = None

    @property
    def connected(self) -> bool:
        return self._sock is not None

    @property
    def address(self) -> tuple[str, int]:
        return (self._host, self._port)

    def open(self) -> None:
        """Connect to the display.

        Raises:
            AddressResolutionError: If the host name cannot be resolved.
            DeviceConnectionError: If the connection is refused, unreachable,
                or not established within the connect timeout.
        """
        try:
            self._sock = socket.create_connection(
                (self._host, self._port), timeout=self._connect_timeout
            )
        except socket.gaierror as e:
            raise AddressResolutionError(
                f"Could not resolve {self._host}: {e}"
            ) from e
        except socket.timeout as e:
            raise DeviceConnectionError(
                f"Timed out connecting to {self._host}:{self._port} "
                f"after {self._connect_timeout:g}s"
            ) from e
        except OSError as e:
            raise DeviceConnectionError(
                f"Could not connect to {self._host}:{self._port}: {e}"
            ) from e

        logger.info("Connected to %s:%d", self._host, self._port)

    def close(self) -> None:
        """Close the connection. Safe to call more than once."""
        if self._sock is None:
            return

        try:
            self._sock.close()
        except OSError as e:
            logger.warning("Error closing connection: %s", e)
        finally:
            self._sock = None
            logger.info("Disconnected from %s:%d", self._host, self._port)

    def write(self, data: bytes, timeout: float = SEND_TIMEOUT) -> int:
        """Send data in a single write.

        Returns:
            Number of bytes written, always ``len(data)``.

        Raises:
            DeviceConnectionError: If not connected.
            TransmissionError: On timeout, socket error, or a short write.
        """
        sock = self._require_socket()
        sock.settimeout(timeout)
        try:
            sent = sock.send(data)
        except socket.timeout as e:
            raise TransmissionError(
                f"Timed out sending to {self._host}:{self._port} after {timeout:g}s"
            ) from e
        except OSError as e:
            raise TransmissionError(
                f"Send to {self._host}:{self._port} failed: {e}"
            ) from e

        if sent != len(data):
            raise TransmissionError(
                f"Short write to {self._host}:{self._port}: "
                f"{sent} of {len(data)} bytes accepted"
            )
        logger.debug("Sent %d bytes: %s", sent, data.hex(" "))
        return sent

    def read(self, size: int = RECEIVE_SIZE, timeout: float = RECEIVE_TIMEOUT) -> bytes | None:
        """Read up to ``size`` bytes.

        Returns:
            The bytes read, or ``None`` if the peer closed the connection
            without sending anything.

        Raises:
            DeviceConnectionError: If not connected.
            ResponseTimeout: If nothing arrives within ``timeout``.
        """
        sock = self._require_socket()
        sock.settimeout(timeout)
        try:
            data = sock.recv(size)
        except socket.timeout as e:
            raise ResponseTimeout(
                f"No response from {self._host}:{self._port} within {timeout:g}s"
            ) from e

        if not data:
            return None
        logger.debug("Received %d bytes: %s", len(data), data.hex(" "))
        return data

    def _require_socket(self) -> socket.socket:
        if self._sock is None:
            raise DeviceConnectionError("Not connected to device")
        return self._sock

    def __enter__(self) -> TCPConnection:
        self.open()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
