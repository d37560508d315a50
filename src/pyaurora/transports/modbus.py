"""Modbus TCP transport.

Talks to the ABC through an RS485-to-Ethernet gateway (e.g. a Waveshare
adapter wired to the AID port).

IMPORTANT: Single-Client Limitation
------------------------------------
The ABC bus is half duplex and the gateway forwards one request at a time.
A second client on the same gateway interleaves requests and corrupts
response framing, so keep a single connection per gateway.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._modbus_base import BaseModbusTransport
from .protocol import DEFAULT_MAX_REGISTERS

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusTcpClient

__all__ = ["ModbusTransport"]


class ModbusTransport(BaseModbusTransport):
    """Modbus TCP transport for local ABC communication.

    Example:
        transport = ModbusTransport(host="192.168.1.100")
        async with transport:
            registers = await transport.read_holding_registers([RegisterRange(740, 741)])
    """

    transport_type: str = "modbus_tcp"

    def __init__(
        self,
        host: str,
        port: int = 502,
        *,
        unit_id: int = 1,
        timeout: float = 15.0,
        retries: int = 2,
        retry_delay: float = 0.5,
        pymodbus_retries: int = 0,
        max_registers: int = DEFAULT_MAX_REGISTERS,
    ) -> None:
        """Initialize the TCP transport.

        Args:
            host: Gateway IP address or hostname
            port: Gateway TCP port
            unit_id: Modbus unit ID of the ABC
            timeout: Per-request timeout in seconds
            retries: Retries per request after a timeout
            retry_delay: First backoff delay in seconds, doubled per retry
            pymodbus_retries: Retries left to pymodbus itself (normally 0)
            max_registers: Largest register count per read request
        """
        super().__init__(
            unit_id=unit_id,
            timeout=timeout,
            retries=retries,
            retry_delay=retry_delay,
            pymodbus_retries=pymodbus_retries,
            max_registers=max_registers,
        )
        self._host = host
        self._port = port

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def endpoint(self) -> str:
        return f"Modbus gateway at {self._host}:{self._port}"

    def _create_client(self) -> AsyncModbusTcpClient:
        from pymodbus.client import AsyncModbusTcpClient

        return AsyncModbusTcpClient(
            host=self._host,
            port=self._port,
            timeout=self._timeout,
            retries=self._pymodbus_retries,
        )
