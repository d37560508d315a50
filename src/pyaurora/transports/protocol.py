"""Transport protocol for holding register access.

A transport is the single connection to one ABC. It offers exactly two
operations, both strictly sequential:

- ``read_holding_registers(ranges)``: read one or more inclusive ranges and
  return an address → raw value map. Raises
  :class:`~pyaurora.transports.exceptions.InvalidAddressError` when the
  controller rejects an address and
  :class:`~pyaurora.transports.exceptions.TransportTimeoutError` when the
  configured retries are exhausted.
- ``write_holding_register(address, value)``: write one raw 16-bit value.

Timeout and retry count are fixed when the transport is created.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from .exceptions import TransportConnectionError

if TYPE_CHECKING:
    from pyaurora.planner import RegisterRange

# The ABC answers at most 100 registers per read request
DEFAULT_MAX_REGISTERS = 100


@runtime_checkable
class HoldingRegisterTransport(Protocol):
    """Capability consumed by the planner, reader and session."""

    @property
    def max_registers_per_request(self) -> int:
        """Largest register count a single read may cover."""
        ...

    async def read_holding_registers(
        self,
        ranges: Sequence[RegisterRange],
    ) -> dict[int, int]:
        """Read the given ranges and return address → raw value."""
        ...

    async def write_holding_register(self, address: int, value: int) -> None:
        """Write one raw value."""
        ...


class BaseTransport(ABC):
    """Common connection bookkeeping for concrete transports.

    Subclasses must implement:
    - connect() / disconnect()
    - read_holding_registers() / write_holding_register()
    """

    transport_type: str = "base"

    def __init__(self, *, max_registers: int = DEFAULT_MAX_REGISTERS) -> None:
        """Initialize base transport.

        Args:
            max_registers: Largest register count per read request
        """
        self._connected = False
        self._max_registers = max_registers

    @property
    def is_connected(self) -> bool:
        """Check if the transport is connected."""
        return self._connected

    @property
    def max_registers_per_request(self) -> int:
        """Largest register count a single read may cover."""
        return self._max_registers

    def _ensure_connected(self) -> None:
        """Raise if the transport is not connected.

        Raises:
            TransportConnectionError: If not connected
        """
        if not self._connected:
            raise TransportConnectionError(f"{self.transport_type} transport is not connected")

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Close the connection."""
        ...

    @abstractmethod
    async def read_holding_registers(
        self,
        ranges: Sequence[RegisterRange],
    ) -> dict[int, int]:
        """Read the given ranges and return address → raw value."""
        ...

    @abstractmethod
    async def write_holding_register(self, address: int, value: int) -> None:
        """Write one raw value."""
        ...

    async def __aenter__(self) -> BaseTransport:
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.disconnect()
