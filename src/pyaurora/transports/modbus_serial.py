"""Modbus RTU serial transport.

Talks to the ABC over an RS485 adapter on its AID port, at 19200 baud, 8
data bits, even parity and 1 stop bit. The port may be a device path
(``/dev/ttyUSB0``) or any URL pyserial understands, such as
``rfc2217://host:port`` for a network serial server.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from ._modbus_base import BaseModbusTransport
from .protocol import DEFAULT_MAX_REGISTERS

if TYPE_CHECKING:
    from pymodbus.client import AsyncModbusSerialClient

__all__ = ["ModbusSerialTransport"]

# Settle time after opening the port before the first request
PORT_SETTLE_SECONDS = 0.2


class ModbusSerialTransport(BaseModbusTransport):
    """Modbus RTU transport for local ABC communication.

    Example:
        transport = ModbusSerialTransport(port="/dev/ttyUSB0")
        async with transport:
            registers = await transport.read_holding_registers([RegisterRange(740, 741)])
    """

    transport_type: str = "modbus_serial"
    permission_hint = " On Linux, add the user to the 'dialout' group."

    def __init__(
        self,
        port: str,
        baudrate: int = 19200,
        *,
        bytesize: int = 8,
        parity: str = "E",
        stopbits: int = 1,
        unit_id: int = 1,
        timeout: float = 15.0,
        retries: int = 2,
        retry_delay: float = 0.5,
        pymodbus_retries: int = 0,
        max_registers: int = DEFAULT_MAX_REGISTERS,
    ) -> None:
        """Initialize the serial transport.

        Args:
            port: Serial device path or pyserial URL
            baudrate: Line speed
            bytesize: Data bits
            parity: "N", "E" or "O"
            stopbits: Stop bits
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
        self._port = port
        self._baudrate = baudrate
        self._bytesize = bytesize
        self._parity = parity
        self._stopbits = stopbits

    @property
    def port(self) -> str:
        return self._port

    @property
    def baudrate(self) -> int:
        return self._baudrate

    @property
    def endpoint(self) -> str:
        return f"serial port {self._port}"

    def _create_client(self) -> AsyncModbusSerialClient:
        from pymodbus.client import AsyncModbusSerialClient

        return AsyncModbusSerialClient(
            port=self._port,
            baudrate=self._baudrate,
            bytesize=self._bytesize,
            parity=self._parity,
            stopbits=self._stopbits,
            timeout=self._timeout,
            retries=self._pymodbus_retries,
        )

    async def _on_connected(self) -> None:
        await asyncio.sleep(PORT_SETTLE_SECONDS)
