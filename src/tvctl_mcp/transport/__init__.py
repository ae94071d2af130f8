"""Transport layer: TCP control connection and Wake-on-LAN broadcast."""

from .tcp_connection import TCPConnection
from .wake import build_magic_packet, send_wake_packet
