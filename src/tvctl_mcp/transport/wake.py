"""Wake-on-LAN magic packets.

A magic packet is 6 bytes of 0xFF followed by the target's 6-byte hardware
address repeated 16 times, 102 bytes in all, broadcast as one UDP datagram.
"""

from __future__ import annotations

import logging

from wakeonlan import create_magic_packet, send_magic_packet

from ..errors import WakeSignalError

logger = logging.getLogger(__name__)

BROADCAST_ADDRESS = "255.255.255.255"
WAKE_PORT = 9
MAGIC_PACKET_SIZE = 102


def build_magic_packet(mac: str) -> bytes:
    """Build the magic packet for a hardware address.

    Raises:
        WakeSignalError: If the address is malformed.
    """
    try:
        return create_magic_packet(mac)
    except ValueError as e:
        raise WakeSignalError(f"Invalid hardware address {mac!r}: {e}") from e


def send_wake_packet(
    mac: str | None,
    broadcast: str = BROADCAST_ADDRESS,
    port: int = WAKE_PORT,
) -> None:
    """Broadcast a magic packet. Fire-and-forget: nothing is awaited.

    Raises:
        WakeSignalError: If there is no hardware address, it is malformed,
            or the local network stack refuses the datagram.
    """
    if not mac:
        raise WakeSignalError("No hardware address on file")

    packet = build_magic_packet(mac)
    logger.debug("Magic packet for %s (%d bytes): %s", mac, len(packet), packet.hex(" "))
    try:
        send_magic_packet(mac, ip_address=broadcast, port=port)
    except OSError as e:
        raise WakeSignalError(f"Could not send wake packet to {mac}: {e}") from e

    logger.info("Wake packet for %s sent to %s:%d", mac, broadcast, port)
