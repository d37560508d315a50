"""Shared Modbus logic for the TCP and RTU transports.

:class:`BaseModbusTransport` owns the pymodbus client lifecycle and the
holding register read/write logic with timeout retries. Subclasses only
describe their endpoint and build the pymodbus client:

- ``endpoint``: connection target used in logs and errors
- ``_create_client()``: the pymodbus async client, imported lazily
- ``_on_connected()``: optional hook run after a successful connect
"""

from __future__ import annotations

import asyncio
import logging
from abc import abstractmethod
from collections.abc import Awaitable, Callable, Sequence
from typing import TYPE_CHECKING, Any

from pymodbus.exceptions import ModbusIOException

from .exceptions import (
    InvalidAddressError,
    TransportConnectionError,
    TransportError,
    TransportReadError,
    TransportTimeoutError,
    TransportWriteError,
)
from .protocol import DEFAULT_MAX_REGISTERS, BaseTransport

if TYPE_CHECKING:
    from pyaurora.planner import RegisterRange

_LOGGER = logging.getLogger(__name__)

__all__ = ["BaseModbusTransport", "ILLEGAL_DATA_ADDRESS"]

# Modbus exception code returned for an address the device does not implement
ILLEGAL_DATA_ADDRESS = 0x02


def _is_no_response(err: ModbusIOException) -> bool:
    """Return True if pymodbus gave up waiting for a response."""
    message = str(err).lower()
    return "timeout" in message or "no response" in message


class BaseModbusTransport(BaseTransport):
    """Base class for Modbus-based transports (TCP and Serial).

    Every request holds the connection lock, so only one request/response
    pair is ever outstanding. Timeouts are retried ``retries`` times with
    exponential backoff; an Illegal Data Address response is never retried.

    Subclasses implement ``endpoint`` and ``_create_client()``.
    """

    def __init__(
        self,
        *,
        unit_id: int = 1,
        timeout: float = 15.0,
        retries: int = 2,
        retry_delay: float = 0.5,
        pymodbus_retries: int = 0,
        max_registers: int = DEFAULT_MAX_REGISTERS,
    ) -> None:
        """Initialize base Modbus transport.

        Args:
            unit_id: Modbus unit/slave ID (default 1)
            timeout: Per-request timeout in seconds (default 15)
            retries: Retries per request after a timeout (default 2)
            retry_delay: Initial delay between retries in seconds, doubles each
                attempt (default 0.5)
            pymodbus_retries: Number of retries passed to pymodbus client
                (default 0, retries are counted here)
            max_registers: Largest register count per read request
        """
        super().__init__(max_registers=max_registers)
        self._unit_id = unit_id
        self._timeout = timeout
        self._retries = retries
        self._retry_delay = retry_delay
        self._pymodbus_retries = pymodbus_retries
        self._client: Any = None
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def unit_id(self) -> int:
        """Get the Modbus unit/slave ID."""
        return self._unit_id

    @property
    def timeout(self) -> float:
        """Get the per-request timeout in seconds."""
        return self._timeout

    @property
    def retries(self) -> int:
        """Get the number of timeout retries per request."""
        return self._retries

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    # Appended to the error when the OS refuses access to the endpoint
    permission_hint: str = ""

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Connection target, for logs and error messages."""

    @abstractmethod
    def _create_client(self) -> Any:
        """Build the pymodbus async client."""

    async def _on_connected(self) -> None:
        """Run after the client connects."""

    async def connect(self) -> None:
        """Open the pymodbus client.

        Raises:
            TransportConnectionError: If the endpoint cannot be reached
        """
        try:
            self._client = self._create_client()
            if not await self._client.connect():
                raise TransportConnectionError(f"Failed to connect to {self.endpoint}")
        except PermissionError as err:
            _LOGGER.error("Permission denied opening %s: %s", self.endpoint, err)
            raise TransportConnectionError(
                f"Permission denied for {self.endpoint}.{self.permission_hint}"
            ) from err
        except (TimeoutError, OSError) as err:
            _LOGGER.error("Failed to connect to %s: %s", self.endpoint, err)
            raise TransportConnectionError(
                f"Failed to connect to {self.endpoint}: {err}"
            ) from err

        self._connected = True
        await self._on_connected()
        _LOGGER.info(
            "%s transport connected to %s (unit %s)",
            self.transport_type,
            self.endpoint,
            self._unit_id,
        )

    async def disconnect(self) -> None:
        """Close the pymodbus client."""
        if self._client is not None:
            self._client.close()
            self._client = None
        self._connected = False
        _LOGGER.debug("%s transport disconnected from %s", self.transport_type, self.endpoint)

    # ------------------------------------------------------------------
    # Register Read/Write
    # ------------------------------------------------------------------

    async def _request(
        self,
        description: str,
        call: Callable[[], Awaitable[Any]],
        error_cls: type[TransportError],
    ) -> Any:
        """Send one Modbus request, retrying timeouts with exponential backoff.

        Args:
            description: What is being requested, for logs and errors
            call: Issues the pymodbus request
            error_cls: Raised for failures other than a timeout

        Returns:
            The pymodbus response, which may still be an error response

        Raises:
            TransportTimeoutError: If every attempt timed out
        """
        if self._client is None:
            raise TransportConnectionError("Modbus client not initialized")

        last_err: TransportTimeoutError | None = None
        for attempt in range(self._retries + 1):
            async with self._lock:
                try:
                    return await call()
                except ModbusIOException as err:
                    if not _is_no_response(err):
                        raise error_cls(f"Failed {description}: {err}") from err
                    last_err = TransportTimeoutError(f"Timeout {description}")
                    last_err.__cause__ = err
                except TimeoutError as err:
                    last_err = TransportTimeoutError(f"Timeout {description}")
                    last_err.__cause__ = err
                except OSError as err:
                    raise error_cls(f"Failed {description}: {err}") from err

            # Retry with exponential backoff (skip on last attempt)
            if attempt < self._retries:
                delay = self._retry_delay * (2**attempt)
                _LOGGER.warning(
                    "Retry %d/%d %s after %.1fs",
                    attempt + 1,
                    self._retries,
                    description,
                    delay,
                )
                await asyncio.sleep(delay)

        _LOGGER.error("Failed %s after %d attempts: %s", description, self._retries + 1, last_err)
        raise last_err  # type: ignore[misc]

    async def _read_range(self, register_range: RegisterRange) -> list[int]:
        """Read one contiguous range.

        Raises:
            InvalidAddressError: If the device rejects the range
            TransportTimeoutError: If every attempt timed out
            TransportReadError: On any other read failure
        """
        count = register_range.count
        result = await self._request(
            f"reading holding registers {register_range}",
            lambda: self._client.read_holding_registers(
                address=register_range.start,
                count=count,
                device_id=self._unit_id,
            ),
            TransportReadError,
        )
        if result.isError():
            if getattr(result, "exception_code", None) == ILLEGAL_DATA_ADDRESS:
                raise InvalidAddressError([register_range])
            raise TransportReadError(f"Modbus read error at {register_range}: {result}")
        registers = getattr(result, "registers", None)
        if registers is None or len(registers) != count:
            raise TransportReadError(
                f"Invalid Modbus response for {register_range}: expected {count} registers"
            )
        return list(registers)

    async def read_holding_registers(
        self,
        ranges: Sequence[RegisterRange],
    ) -> dict[int, int]:
        """Read holding registers, one Modbus request per range.

        Args:
            ranges: Inclusive ranges, each within ``max_registers_per_request``

        Returns:
            Address → raw 16-bit value
        """
        self._ensure_connected()

        registers: dict[int, int] = {}
        for register_range in ranges:
            _LOGGER.debug("Reading holding registers %s", register_range)
            values = await self._read_range(register_range)
            for offset, value in enumerate(values):
                registers[register_range.start + offset] = value
        return registers

    async def write_holding_register(self, address: int, value: int) -> None:
        """Write a single holding register.

        Timeouts are retried like reads.

        Args:
            address: Register address
            value: Raw 16-bit value

        Raises:
            TransportWriteError: If write fails
            TransportTimeoutError: If every attempt timed out
        """
        self._ensure_connected()

        result = await self._request(
            f"writing register {address}",
            lambda: self._client.write_register(
                address=address,
                value=value,
                device_id=self._unit_id,
            ),
            TransportWriteError,
        )
        if result.isError():
            _LOGGER.error("Modbus error writing register %d: %s", address, result)
            raise TransportWriteError(f"Modbus write error at address {address}: {result}")

        _LOGGER.debug("Wrote holding register %d = %d", address, value)
