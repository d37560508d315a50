"""Tests for loop pump variants."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from pyaurora.devices.pump import VS_PUMP_AUTOMATIC, GenericPump, VSPump
from pyaurora.exceptions import ValidationError


@pytest.fixture
def client() -> MagicMock:
    """Session stand-in with energy monitoring."""
    client = MagicMock()
    client.energy_monitoring = True
    client.write_register = AsyncMock()
    return client


class TestGenericPump:
    """Tests for GenericPump."""

    def test_registers(self, client: MagicMock) -> None:
        assert GenericPump(client, "fc1").registers_to_read() == [1104]

    def test_running_from_axb_outputs(self, client: MagicMock) -> None:
        pump = GenericPump(client, "fc1")
        pump.refresh({1104: frozenset({"loop_pump", "dhw"}), 1165: 85})
        assert pump.running is True
        assert pump.watts == 85

        pump.refresh({1104: frozenset({"dhw"})})
        assert pump.running is False

    def test_missing_axb(self, client: MagicMock) -> None:
        pump = GenericPump(client, "open_loop")
        pump.refresh({})
        assert pump.running is False


class TestVSPump:
    """Tests for VSPump."""

    def test_registers(self, client: MagicMock) -> None:
        assert VSPump(client, "vs_pump").registers_to_read() == [1104, (321, 325)]

    def test_refresh_automatic(self, client: MagicMock) -> None:
        pump = VSPump(client, "vs_pump")
        pump.refresh({1104: frozenset(), 321: 30, 322: 100, 323: VS_PUMP_AUTOMATIC, 325: 45})

        assert pump.running is True
        assert pump.speed == 45
        assert pump.min_speed == 30
        assert pump.max_speed == 100
        assert pump.manual_speed is None

    def test_refresh_manual(self, client: MagicMock) -> None:
        pump = VSPump(client, "vs_pump")
        pump.refresh({1104: frozenset(), 323: 60, 325: 0})
        assert pump.manual_speed == 60
        assert pump.running is False

    @pytest.mark.asyncio
    async def test_setters(self, client: MagicMock) -> None:
        pump = VSPump(client, "vs_pump")

        await pump.set_min_speed(20)
        await pump.set_max_speed(90)
        await pump.set_manual_speed(55)
        await pump.set_manual_speed(None)

        assert [c.args for c in client.write_register.await_args_list] == [
            (321, 20),
            (322, 90),
            (323, 55),
            (323, VS_PUMP_AUTOMATIC),
        ]
        assert pump.manual_speed is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 101])
    async def test_out_of_range(self, client: MagicMock, value: int) -> None:
        pump = VSPump(client, "vs_pump")
        with pytest.raises(ValidationError, match="between 1 and 100"):
            await pump.set_max_speed(value)
        with pytest.raises(ValidationError):
            await pump.set_manual_speed(value)
        client.write_register.assert_not_awaited()
