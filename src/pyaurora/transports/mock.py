"""In-memory transport backed by a register dump.

Useful for tests and for working offline against a captured register dump.
Behaves like a real controller for addressing purposes: reading an address
outside the documented supported ranges, or one listed in ``rejected``,
fails the whole request with an Illegal Data Address error. Addresses inside
a supported range but absent from the dump read as 0.

Dumps are JSON objects mapping register address (as a string) to raw value:

    {"19": 1205, "20": 1180, "741": 45}
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from pyaurora.registers.definitions import is_valid_address

from .exceptions import InvalidAddressError
from .protocol import DEFAULT_MAX_REGISTERS, BaseTransport

if TYPE_CHECKING:
    from pyaurora.planner import RegisterRange

_LOGGER = logging.getLogger(__name__)

__all__ = ["MockTransport"]


class MockTransport(BaseTransport):
    """Transport serving registers from memory.

    The mock is connected on creation. Every read request and write is
    recorded in ``requests`` and ``writes`` for inspection.
    """

    transport_type: str = "mock"

    def __init__(
        self,
        registers: Mapping[int, int] | None = None,
        *,
        rejected: Iterable[int] = (),
        max_registers: int = DEFAULT_MAX_REGISTERS,
    ) -> None:
        """Initialize mock transport.

        Args:
            registers: Address → raw value
            rejected: Addresses that always fail with Illegal Data Address
            max_registers: Largest register count per read request
        """
        super().__init__(max_registers=max_registers)
        self.registers: dict[int, int] = dict(registers or {})
        self.rejected: set[int] = set(rejected)
        self.requests: list[tuple[RegisterRange, ...]] = []
        self.writes: list[tuple[int, int]] = []
        self._connected = True

    @classmethod
    def from_file(cls, path: str | Path, **kwargs: object) -> MockTransport:
        """Create a mock transport from a JSON register dump.

        Args:
            path: Path of the JSON dump
            **kwargs: Passed to the constructor
        """
        with open(path) as f:
            data = json.load(f)
        registers = {int(address): int(value) for address, value in data.items()}
        _LOGGER.debug("Loaded %d registers from %s", len(registers), path)
        return cls(registers, **kwargs)  # type: ignore[arg-type]

    def _readable(self, address: int) -> bool:
        if address in self.rejected:
            return False
        return address in self.registers or is_valid_address(address)

    async def connect(self) -> None:
        """Mark the transport connected."""
        self._connected = True

    async def disconnect(self) -> None:
        """Mark the transport disconnected."""
        self._connected = False

    async def read_holding_registers(
        self,
        ranges: Sequence[RegisterRange],
    ) -> dict[int, int]:
        """Serve the requested ranges from memory.

        Raises:
            InvalidAddressError: If any address in a range is not readable
        """
        self._ensure_connected()
        self.requests.append(tuple(ranges))

        registers: dict[int, int] = {}
        for register_range in ranges:
            if not all(self._readable(a) for a in register_range.addresses()):
                raise InvalidAddressError([register_range])
            for address in register_range.addresses():
                registers[address] = self.registers.get(address, 0)
        return registers

    async def write_holding_register(self, address: int, value: int) -> None:
        """Record the write and update the stored value."""
        self._ensure_connected()
        self.writes.append((address, value))
        self.registers[address] = value
