"""Loopback TCP peer that stands in for a display in tests."""

from __future__ import annotations

import socket
import threading


def free_port() -> int:
    """Return a loopback port with nothing listening on it."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class MockDisplay:
    """Accepts one connection, records what it receives, optionally replies.

    Usage::

        with MockDisplay(reply=b"OK") as display:
            ...connect to ("127.0.0.1", display.port)...
        assert display.received == expected
    """

    def __init__(self, reply: bytes | None = None) -> None:
        self._reply = reply
        self._server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._server.bind(("127.0.0.1", 0))
        self._server.listen(1)
        self._server.settimeout(5)
        self.host, self.port = self._server.getsockname()
        self.received = b""
        self.connections = 0
        self._thread = threading.Thread(target=self._serve, daemon=True)

    def _serve(self) -> None:
        try:
            conn, _ = self._server.accept()
        except OSError:
            return
        with conn:
            self.connections += 1
            conn.settimeout(5)
            try:
                self.received += conn.recv(4096)
                if self._reply:
                    conn.sendall(self._reply)
                while True:
                    chunk = conn.recv(4096)
                    if not chunk:
                        break
                    self.received += chunk
            except OSError:
                pass

    def start(self) -> MockDisplay:
        self._thread.start()
        return self

    def stop(self) -> None:
        self._thread.join(timeout=10)
        self._server.close()

    def __enter__(self) -> MockDisplay:
        return self.start()

    def __exit__(self, *exc_info) -> None:
        self.stop()
