"""Transport layer for pyaurora.

Transports own the single half-duplex connection to an ABC and expose two
operations: reading holding register ranges and writing one holding register.

Usage:
    from pyaurora.transports import create_transport_from_uri

    transport = create_transport_from_uri("tcp://192.168.1.100:502")
    async with transport:
        registers = await transport.read_holding_registers([RegisterRange(740, 741)])
"""

from __future__ import annotations

from .config import TransportConfig, TransportType
from .exceptions import (
    InvalidAddressError,
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .factory import create_transport, create_transport_from_uri
from .mock import MockTransport
from .modbus import ModbusTransport
from .modbus_serial import ModbusSerialTransport
from .protocol import DEFAULT_MAX_REGISTERS, BaseTransport, HoldingRegisterTransport

__all__ = [
    # Factory functions (recommended)
    "create_transport",
    "create_transport_from_uri",
    # Configuration
    "TransportConfig",
    "TransportType",
    # Protocol
    "DEFAULT_MAX_REGISTERS",
    "HoldingRegisterTransport",
    "BaseTransport",
    # Transport implementations
    "ModbusTransport",
    "ModbusSerialTransport",
    "MockTransport",
    # Exceptions
    "TransportError",
    "TransportConnectionError",
    "TransportTimeoutError",
    "TransportReadError",
    "TransportWriteError",
    "InvalidAddressError",
]
