"""Protocol layer: frame layout, command table, and reply decoding."""

from .framing import Frame, WireEncoding, parse_frame, to_wire
from .commands import Command, encode
from .parser import DeviceResponse, parse_response
