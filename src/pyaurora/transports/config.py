"""Transport configuration.

This module provides the TransportConfig dataclass for configuring
transport instances in a uniform way, supporting serialization to/from
dictionaries and parsing of connection URIs.

Example:
    config = TransportConfig.from_uri("tcp://192.168.1.100:502")
    config.validate()

    # Serialize to dict for storage
    data = config.to_dict()

    # Restore from dict
    restored = TransportConfig.from_dict(data)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any
from urllib.parse import ParseResult, urlparse

from pyaurora.exceptions import ValidationError

from .protocol import DEFAULT_MAX_REGISTERS

DEFAULT_TCP_PORT = 502
DEFAULT_TELNET_PORT = 23


def _uri_port(parsed: ParseResult, uri: str) -> int | None:
    try:
        return parsed.port
    except ValueError as err:
        raise ValidationError(f"Invalid port in {uri!r}: {err}") from err


class TransportType(str, Enum):
    """Transport type enumeration.

    String enum for easy serialization and comparison.
    """

    # Modbus TCP via RS485-to-Ethernet gateway
    MODBUS_TCP = "modbus_tcp"

    # Modbus RTU over a local serial port or an RFC 2217 serial server
    MODBUS_SERIAL = "modbus_serial"

    # JSON register dump served from memory
    MOCK = "mock"


@dataclass
class TransportConfig:
    """Configuration for a single transport connection.

    Timeout and retries are fixed for the lifetime of the transport created
    from this configuration.

    Attributes:
        transport_type: Type of transport
        host: Gateway host (MODBUS_TCP only)
        port: Gateway TCP port (MODBUS_TCP only, default 502)
        serial_port: Device path or pyserial URL (MODBUS_SERIAL only)
        mock_path: JSON register dump (MOCK only)
        unit_id: Modbus unit ID (default 1)
        timeout: Per-request timeout in seconds (default 15.0)
        retries: Retries per request after a timeout (default 2)
        max_registers: Largest register count per read request (default 100)
    """

    transport_type: TransportType
    host: str | None = None
    port: int = DEFAULT_TCP_PORT
    serial_port: str | None = None
    mock_path: str | None = None
    unit_id: int = 1
    timeout: float = 15.0
    retries: int = 2
    max_registers: int = DEFAULT_MAX_REGISTERS

    def validate(self) -> None:
        """Validate configuration completeness.

        Raises:
            ValidationError: If configuration is invalid
        """
        if self.transport_type == TransportType.MODBUS_TCP:
            if not self.host:
                raise ValidationError("host required for MODBUS_TCP transport")
            if not 0 < self.port <= 65535:
                raise ValidationError(f"port must be 1-65535, got {self.port}")
        elif self.transport_type == TransportType.MODBUS_SERIAL:
            if not self.serial_port:
                raise ValidationError("serial_port required for MODBUS_SERIAL transport")
        elif self.transport_type == TransportType.MOCK and not self.mock_path:
            raise ValidationError("mock_path required for MOCK transport")

        if not 1 <= self.unit_id <= 247:
            raise ValidationError(f"unit_id must be 1-247, got {self.unit_id}")
        if self.timeout <= 0:
            raise ValidationError(f"timeout must be positive, got {self.timeout}")
        if self.retries < 0:
            raise ValidationError(f"retries must not be negative, got {self.retries}")
        if self.max_registers < 1:
            raise ValidationError(f"max_registers must be at least 1, got {self.max_registers}")

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary for serialization.

        Returns:
            Dictionary with all configuration values, suitable for
            JSON serialization.
        """
        return {
            "transport_type": self.transport_type.value,
            "host": self.host,
            "port": self.port,
            "serial_port": self.serial_port,
            "mock_path": self.mock_path,
            "unit_id": self.unit_id,
            "timeout": self.timeout,
            "retries": self.retries,
            "max_registers": self.max_registers,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TransportConfig:
        """Create configuration from dictionary.

        Args:
            data: Dictionary with configuration values

        Returns:
            TransportConfig instance

        Raises:
            ValidationError: If transport_type is missing or unknown
        """
        try:
            transport_type = TransportType(data["transport_type"])
        except (KeyError, ValueError) as err:
            raise ValidationError(
                f"Invalid transport_type: {data.get('transport_type')!r}"
            ) from err

        return cls(
            transport_type=transport_type,
            host=data.get("host"),
            port=data.get("port", DEFAULT_TCP_PORT),
            serial_port=data.get("serial_port"),
            mock_path=data.get("mock_path"),
            unit_id=data.get("unit_id", 1),
            timeout=data.get("timeout", 15.0),
            retries=data.get("retries", 2),
            max_registers=data.get("max_registers", DEFAULT_MAX_REGISTERS),
        )

    @classmethod
    def from_uri(cls, uri: str, **kwargs: Any) -> TransportConfig:
        """Create configuration from a connection URI.

        Supported forms:
            - ``tcp://host[:port]``: Modbus TCP gateway
            - ``rfc2217://host[:port]`` / ``telnet://host[:port]``: network
              serial server (default port 23)
            - path of an existing ``.json`` file: register dump mock
            - any other path: local serial device

        Args:
            uri: Connection URI
            **kwargs: Extra fields (unit_id, timeout, retries, max_registers)

        Raises:
            ValidationError: If the URI is malformed or its scheme is unsupported
        """
        if not uri:
            raise ValidationError("Empty connection URI")

        parsed = urlparse(uri)
        if parsed.scheme == "tcp":
            if not parsed.hostname:
                raise ValidationError(f"Missing host in {uri!r}")
            return cls(
                transport_type=TransportType.MODBUS_TCP,
                host=parsed.hostname,
                port=_uri_port(parsed, uri) or DEFAULT_TCP_PORT,
                **kwargs,
            )
        if parsed.scheme in ("rfc2217", "telnet"):
            if not parsed.hostname:
                raise ValidationError(f"Missing host in {uri!r}")
            return cls(
                transport_type=TransportType.MODBUS_SERIAL,
                serial_port=(
                    f"rfc2217://{parsed.hostname}:{_uri_port(parsed, uri) or DEFAULT_TELNET_PORT}"
                ),
                **kwargs,
            )
        if parsed.scheme:
            raise ValidationError(f"Unsupported URI scheme {parsed.scheme!r} in {uri!r}")

        path = Path(uri)
        if path.suffix == ".json" and path.is_file():
            return cls(transport_type=TransportType.MOCK, mock_path=uri, **kwargs)
        return cls(transport_type=TransportType.MODBUS_SERIAL, serial_port=uri, **kwargs)
