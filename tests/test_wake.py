"""Tests for Wake-on-LAN packets."""

from unittest.mock import patch

import pytest

from tvctl_mcp.errors import WakeSignalError
from tvctl_mcp.transport.wake import (
    BROADCAST_ADDRESS,
    MAGIC_PACKET_SIZE,
    WAKE_PORT,
    build_magic_packet,
    send_wake_packet,
)

MAC = "00:1A:2B:3C:4D:5E"
MAC_BYTES = bytes([0x00, 0x1A, 0x2B, 0x3C, 0x4D, 0x5E])


def test_magic_packet_layout():
    """6 x 0xFF followed by the hardware address 16 times."""
    packet = build_magic_packet(MAC)
    assert len(packet) == MAGIC_PACKET_SIZE == 102
    assert packet[:6] == b"\xFF" * 6
    assert packet[6:] == MAC_BYTES * 16


def test_magic_packet_invalid_mac():
    with pytest.raises(WakeSignalError):
        build_magic_packet("00:1A:2B:3C:4D")
    with pytest.raises(WakeSignalError):
        build_magic_packet("ZZ:1A:2B:3C:4D:5E")


def test_send_to_broadcast_port_9():
    with patch("tvctl_mcp.transport.wake.send_magic_packet") as send:
        send_wake_packet(MAC)
    send.assert_called_once_with(MAC, ip_address="255.255.255.255", port=9)
    assert BROADCAST_ADDRESS == "255.255.255.255"
    assert WAKE_PORT == 9


def test_send_without_mac():
    with patch("tvctl_mcp.transport.wake.send_magic_packet") as send:
        with pytest.raises(WakeSignalError):
            send_wake_packet(None)
    send.assert_not_called()


def test_send_invalid_mac_is_not_sent():
    with patch("tvctl_mcp.transport.wake.send_magic_packet") as send:
        with pytest.raises(WakeSignalError):
            send_wake_packet("not-a-mac")
    send.assert_not_called()


def test_send_network_failure():
    with patch(
        "tvctl_mcp.transport.wake.send_magic_packet",
        side_effect=OSError("Network is unreachable"),
    ):
        with pytest.raises(WakeSignalError, match="unreachable"):
            send_wake_packet(MAC)


def test_send_logs_the_packet_it_validated(caplog):
    with patch("tvctl_mcp.transport.wake.send_magic_packet"):
        with caplog.at_level("DEBUG", logger="tvctl_mcp.transport.wake"):
            send_wake_packet(MAC)
    assert "(102 bytes)" in caplog.text
    assert "ff ff ff ff ff ff 00 1a 2b 3c 4d 5e" in caplog.text
