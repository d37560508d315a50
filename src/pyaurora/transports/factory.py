"""Factory functions for creating transport instances.

This module provides convenience functions to create transport instances
for communicating with an ABC via different connections.

Example:
    # Modbus TCP gateway
    transport = create_transport_from_uri("tcp://192.168.1.100:502")
    async with transport:
        registers = await transport.read_holding_registers([RegisterRange(740, 741)])

    # RS485 adapter
    transport = create_transport_from_uri("/dev/ttyUSB0")

    # Captured register dump
    transport = create_transport_from_uri("tests/samples/abc_registers.json")
"""

from __future__ import annotations

from typing import Any

from .config import TransportConfig, TransportType
from .mock import MockTransport
from .modbus import ModbusTransport
from .modbus_serial import ModbusSerialTransport
from .protocol import BaseTransport


def create_transport(config: TransportConfig) -> BaseTransport:
    """Create a transport from a validated configuration.

    The transport is returned unconnected (except the mock, which has
    nothing to connect to); use it as an async context manager or call
    ``connect()``.

    Args:
        config: Transport configuration

    Returns:
        Transport instance for ``config.transport_type``

    Raises:
        ValidationError: If the configuration is incomplete
    """
    config.validate()

    if config.transport_type == TransportType.MODBUS_TCP:
        assert config.host is not None
        return ModbusTransport(
            host=config.host,
            port=config.port,
            unit_id=config.unit_id,
            timeout=config.timeout,
            retries=config.retries,
            max_registers=config.max_registers,
        )
    if config.transport_type == TransportType.MODBUS_SERIAL:
        assert config.serial_port is not None
        return ModbusSerialTransport(
            port=config.serial_port,
            unit_id=config.unit_id,
            timeout=config.timeout,
            retries=config.retries,
            max_registers=config.max_registers,
        )

    assert config.mock_path is not None
    return MockTransport.from_file(config.mock_path, max_registers=config.max_registers)


def create_transport_from_uri(uri: str, **kwargs: Any) -> BaseTransport:
    """Create a transport from a connection URI.

    Args:
        uri: ``tcp://host[:port]``, ``rfc2217://host[:port]``,
            ``telnet://host[:port]``, a serial device path, or the path of a
            JSON register dump
        **kwargs: Extra configuration fields (unit_id, timeout, retries,
            max_registers)

    Returns:
        Transport instance

    Raises:
        ValidationError: If the URI cannot be parsed or the configuration is
            invalid
    """
    return create_transport(TransportConfig.from_uri(uri, **kwargs))


__all__ = [
    "create_transport",
    "create_transport_from_uri",
]
