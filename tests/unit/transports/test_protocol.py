"""Tests for transport protocol and base classes."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from pyaurora.planner import RegisterRange
from pyaurora.transports.exceptions import TransportConnectionError
from pyaurora.transports.protocol import (
    DEFAULT_MAX_REGISTERS,
    BaseTransport,
    HoldingRegisterTransport,
)


class ConcreteTransport(BaseTransport):
    """Concrete implementation for testing BaseTransport."""

    transport_type = "concrete"

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def read_holding_registers(
        self,
        ranges: Sequence[RegisterRange],
    ) -> dict[int, int]:
        self._ensure_connected()
        return {a: 0 for r in ranges for a in r.addresses()}

    async def write_holding_register(self, address: int, value: int) -> None:
        self._ensure_connected()


class TestBaseTransport:
    """Tests for BaseTransport abstract class."""

    def test_init(self) -> None:
        """Test transport initialization."""
        transport = ConcreteTransport()

        assert transport.is_connected is False
        assert transport.max_registers_per_request == DEFAULT_MAX_REGISTERS

    def test_custom_limit(self) -> None:
        assert ConcreteTransport(max_registers=16).max_registers_per_request == 16

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ConcreteTransport(), HoldingRegisterTransport)

    @pytest.mark.asyncio
    async def test_connect_disconnect(self) -> None:
        """Test connect and disconnect."""
        transport = ConcreteTransport()

        await transport.connect()
        assert transport.is_connected is True

        await transport.disconnect()
        assert transport.is_connected is False

    @pytest.mark.asyncio
    async def test_context_manager(self) -> None:
        transport = ConcreteTransport()
        async with transport as entered:
            assert entered is transport
            assert transport.is_connected is True
        assert transport.is_connected is False

    def test_ensure_connected_raises_when_not_connected(self) -> None:
        """Test _ensure_connected names the transport type."""
        transport = ConcreteTransport()

        with pytest.raises(TransportConnectionError, match="concrete transport is not connected"):
            transport._ensure_connected()

    @pytest.mark.asyncio
    async def test_ensure_connected_passes_when_connected(self) -> None:
        transport = ConcreteTransport()
        await transport.connect()

        # Should not raise
        transport._ensure_connected()
