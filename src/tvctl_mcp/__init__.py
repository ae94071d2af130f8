"""Power and screen control for networked displays, as a CLI and an MCP server."""

__version__ = "0.1.0"

from .client import FailureReason, TransactionResult, TVClient
from .config import ClientSettings, DeviceDescriptor, DeviceDirectory, load_config
from .protocol.commands import Command, encode
