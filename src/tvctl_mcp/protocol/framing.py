"""Command frame layout and wire encodings.

Frame layout::

    +--------+--------+--------+----------+-----------+----------+--------+
    | Start  | Length |  Code  | Sub-code |   Data    | Checksum |  End   |
    | 2 bytes| 2 bytes| 2 bytes| 2 bytes  | 1-3 bytes |  1 byte  | 2 bytes|
    +--------+--------+--------+----------+-----------+----------+--------+

- Start: 0xDD 0xFF
- Length: big-endian count of bytes from Code through Checksum
- Code: 0xC1 0x15 for power commands, 0xC1 0x31 for screen commands
- Checksum: a literal per-command constant, not computed
- End: 0xBB 0xCC

The length field is reported as declared and never enforced: the device
firmware's own screen frames declare 7 bytes while carrying 6.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

START_MARKER = b"\xDD\xFF"
END_MARKER = b"\xBB\xCC"
CODE_POWER = 0xC115
CODE_SCREEN = 0xC131
# start(2) + length(2) + code(2) + sub-code(2) + data(1) + checksum(1) + end(2)
MIN_FRAME_SIZE = 12


class WireEncoding(str, Enum):
    """How frame bytes are put on the wire."""

    BINARY = "binary"
    ASCII_HEX = "ascii-hex"


@dataclass(frozen=True)
class Frame:
    """A frame split into its fields."""

    code: int
    subcode: int
    data: bytes
    checksum: int
    declared_length: int

    @property
    def body_length(self) -> int:
        """Actual number of bytes from Code through Checksum."""
        return 2 + 2 + len(self.data) + 1

    def __repr__(self) -> str:
        return (
            f"Frame(code=0x{self.code:04X}, subcode=0x{self.subcode:04X}, "
            f"data={self.data.hex(' ')}, checksum=0x{self.checksum:02X}, "
            f"declared_length={self.declared_length})"
        )


def parse_frame(data: bytes) -> Frame | None:
    """Split a byte sequence into frame fields.

    Args:
        data: Candidate frame bytes, markers included.

    Returns:
        A ``Frame``, or ``None`` if the markers are missing or the sequence
        is too short to hold every field.
    """
    if len(data) < MIN_FRAME_SIZE:
        return None
    if data[:2] != START_MARKER or data[-2:] != END_MARKER:
        return None

    body = data[4:-2]
    return Frame(
        code=int.from_bytes(body[0:2], "big"),
        subcode=int.from_bytes(body[2:4], "big"),
        data=bytes(body[4:-1]),
        checksum=body[-1],
        declared_length=int.from_bytes(data[2:4], "big"),
    )


def to_wire(frame: bytes, encoding: WireEncoding = WireEncoding.BINARY) -> bytes:
    """Render frame bytes for transmission.

    ``ASCII_HEX`` sends the frame as upper-case hex digits with no
    separators, e.g. ``b"DDFF0007C131000100F7BBCC"``.
    """
    if encoding is WireEncoding.ASCII_HEX:
        return frame.hex().upper().encode("ascii")
    return bytes(frame)


def format_hex(data: bytes) -> str:
    """Space-separated upper-case hex, as frames are written in the docs."""
    return data.hex(" ").upper()
