"""Error taxonomy for device transactions.

Configuration problems are raised before any network activity. Network
errors are raised by the transport layer and folded into a
``TransactionResult`` by :class:`tvctl_mcp.client.TVClient`, so none of them
escapes a transaction.
"""

from __future__ import annotations


class TVControlError(Exception):
    """Base class for all tvctl errors."""


class ConfigurationError(TVControlError):
    """Unknown device, missing parameter, or malformed configuration file."""


class WakeSignalError(TVControlError):
    """The Wake-on-LAN magic packet could not be built or sent."""


class DeviceConnectionError(TVControlError, ConnectionError):
    """The TCP stream to the device could not be established."""


class AddressResolutionError(DeviceConnectionError):
    """The device host name could not be resolved."""


class TransmissionError(TVControlError):
    """The command frame could not be fully sent."""


class ResponseTimeout(TVControlError, TimeoutError):
    """No reply arrived within the receive window. Not a failure."""
