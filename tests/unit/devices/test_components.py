"""Tests for component variant selection and presence."""

from __future__ import annotations

import pytest

from pyaurora.devices.abc_client import AuroraABC
from pyaurora.devices.blower import ECMBlower, PSCBlower
from pyaurora.devices.components import (
    OPTIONAL_COMPONENTS,
    Component,
    ComponentPresence,
    classify_blower,
    classify_pump,
    is_present,
    select_zones,
)
from pyaurora.devices.pump import GenericPump, VSPump
from pyaurora.devices.zones import IZ2Zone, Thermostat
from pyaurora.exceptions import ValidationError
from pyaurora.planner import RegisterRange
from pyaurora.transports.mock import MockTransport


class TestClassification:
    """Tests for the variant lookup tables."""

    @pytest.mark.parametrize(
        "code,variant",
        [(0, PSCBlower), (1, ECMBlower), (2, ECMBlower), (3, ECMBlower), (9, PSCBlower)],
    )
    def test_blower(self, code: int, variant: type) -> None:
        blower = classify_blower(AuroraABC(MockTransport()), code)
        assert type(blower) is variant

    @pytest.mark.parametrize("code,max_speed", [(1, 12), (2, 12), (3, 5)])
    def test_ecm_speed_limit_from_code(self, code: int, max_speed: int) -> None:
        blower = classify_blower(AuroraABC(MockTransport()), code)
        assert isinstance(blower, ECMBlower)
        assert blower.max_speed == max_speed

    def test_variants_are_not_subclasses(self) -> None:
        """Test variants are independent classes chosen only by the tables."""
        assert not issubclass(ECMBlower, PSCBlower)
        assert not issubclass(VSPump, GenericPump)

    def test_blower_iz2_register(self) -> None:
        """Test an ECM blower reads the IZ2 desired speed only when IZ2 is fitted."""
        client = AuroraABC(MockTransport())
        assert 565 not in classify_blower(client, 1).registers_to_read()
        assert 565 in classify_blower(client, 1, iz2=True).registers_to_read()

    @pytest.mark.parametrize(
        "code,variant",
        [
            (0, GenericPump),
            (2, GenericPump),
            (3, VSPump),
            (4, VSPump),
            (5, VSPump),
            (7, GenericPump),
        ],
    )
    def test_pump(self, code: int, variant: type) -> None:
        pump = classify_pump(AuroraABC(MockTransport()), code)
        assert type(pump) is variant

    def test_variants_implement_component(self) -> None:
        client = AuroraABC(MockTransport())
        for component in (
            classify_blower(client, 0),
            classify_blower(client, 1),
            classify_pump(client, 0),
            classify_pump(client, 3),
            Thermostat(client),
            IZ2Zone(client, 1),
        ):
            assert isinstance(component, Component)


class TestSelectZones:
    """Tests for select_zones."""

    @pytest.mark.asyncio
    async def test_single_thermostat_without_iz2(self) -> None:
        client = AuroraABC(MockTransport({812: 3, 483: 4}))
        zones = await select_zones(client)
        assert len(zones) == 1
        assert isinstance(zones[0], Thermostat)

    @pytest.mark.asyncio
    async def test_iz2_zones(self) -> None:
        transport = MockTransport({812: 1, 483: 3})
        zones = await select_zones(AuroraABC(transport))
        assert [type(z) for z in zones] == [IZ2Zone, IZ2Zone, IZ2Zone]
        assert [z.zone_number for z in zones] == [1, 2, 3]

    @pytest.mark.asyncio
    async def test_iz2_zone_count_capped(self) -> None:
        zones = await select_zones(AuroraABC(MockTransport({812: 1, 483: 9})))
        assert len(zones) == 6


class TestPresence:
    """Tests for ComponentPresence."""

    @pytest.mark.parametrize("value,expected", [(3, False), (2, True), (5, True), (17, True)])
    def test_is_present(self, value: int, expected: bool) -> None:
        assert is_present(value) is expected

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value,expected", [(3, False), (2, True), (5, True), (17, True)])
    async def test_is_installed(self, value: int, expected: bool) -> None:
        presence = ComponentPresence(MockTransport({806: value}))
        assert await presence.is_installed("axb") is expected

    @pytest.mark.asyncio
    async def test_cached_after_first_read(self) -> None:
        transport = MockTransport({806: 1})
        presence = ComponentPresence(transport)

        assert presence.cached("axb") is None
        assert await presence.is_installed("axb") is True
        transport.registers[806] = 3
        assert await presence.is_installed("axb") is True

        assert transport.requests == [(RegisterRange(806, 806),)]
        assert presence.cached("axb") is True

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prior", [1, 2, 3, 0xFFFF])
    async def test_add_always_writes_2(self, prior: int) -> None:
        transport = MockTransport({824: prior})
        await ComponentPresence(transport).add("eev2")
        assert transport.writes == [(824, 2)]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prior", [1, 2, 3, 0xFFFF])
    async def test_remove_always_writes_3(self, prior: int) -> None:
        transport = MockTransport({815: prior})
        await ComponentPresence(transport).remove("aoc")
        assert transport.writes == [(815, 3)]

    @pytest.mark.asyncio
    async def test_add_invalidates_cache(self) -> None:
        """Test a write drops the cached value; the next query reads again."""
        transport = MockTransport({812: 3})
        presence = ComponentPresence(transport)

        assert await presence.is_installed("iz2") is False
        await presence.add("iz2")
        assert presence.cached("iz2") is None
        assert await presence.is_installed("iz2") is True
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_remove_invalidates_cache(self) -> None:
        transport = MockTransport({818: 1})
        presence = ComponentPresence(transport)

        await presence.is_installed("moc")
        await presence.remove("moc")
        assert presence.cached("moc") is None

    @pytest.mark.asyncio
    async def test_unknown_component(self) -> None:
        transport = MockTransport()
        presence = ComponentPresence(transport)

        with pytest.raises(ValidationError, match="Unknown component"):
            await presence.add("humidifier")
        assert transport.writes == []

    def test_component_table(self) -> None:
        assert OPTIONAL_COMPONENTS == {
            "thermostat": 800,
            "axb": 806,
            "iz2": 812,
            "aoc": 815,
            "moc": 818,
            "eev2": 824,
        }
