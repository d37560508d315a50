"""Python library for WaterFurnace Aurora heat pump controllers over Modbus.

Usage:
    Session usage:
        from pyaurora import AuroraABC, create_transport_from_uri

        transport = create_transport_from_uri("tcp://192.168.1.100:502")
        async with transport:
            abc = await AuroraABC.connect(transport)
            await abc.refresh()
            print(abc.mode, abc.compressor_speed)

    Raw register queries:
        registers = await abc.query_registers("known")
"""

from __future__ import annotations

from .devices import AuroraABC, AuroraState, OperatingMode
from .exceptions import AuroraError, DecodeError, ValidationError
from .planner import Query, ReadRequest, RegisterRange, parse_query, plan_reads
from .reader import BatchReader, read_query
from .registers import decode_registers
from .transports import (
    InvalidAddressError,
    MockTransport,
    ModbusSerialTransport,
    ModbusTransport,
    TransportConfig,
    TransportError,
    TransportTimeoutError,
    create_transport,
    create_transport_from_uri,
)

__version__ = "0.1.0"

__all__ = [
    # Session
    "AuroraABC",
    "AuroraState",
    "OperatingMode",
    # Planning and reading
    "Query",
    "ReadRequest",
    "RegisterRange",
    "parse_query",
    "plan_reads",
    "BatchReader",
    "read_query",
    "decode_registers",
    # Transports
    "TransportConfig",
    "ModbusTransport",
    "ModbusSerialTransport",
    "MockTransport",
    "create_transport",
    "create_transport_from_uri",
    # Exceptions
    "AuroraError",
    "DecodeError",
    "ValidationError",
    "TransportError",
    "TransportTimeoutError",
    "InvalidAddressError",
]
