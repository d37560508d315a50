"""Tests for the ABC register map."""

from __future__ import annotations

import pytest

from pyaurora.registers.definitions import (
    ABC_REGISTERS,
    BY_ADDRESS,
    BY_NAME,
    IZ2_MAX_ZONES,
    REGISTER_RANGES,
    is_valid_address,
    iz2_config3_address,
    iz2_status_base,
    iz2_write_base,
    known_addresses,
)


class TestRegisterMap:
    """Consistency checks for ABC_REGISTERS."""

    def test_addresses_unique(self) -> None:
        assert len(BY_ADDRESS) == len(ABC_REGISTERS)

    def test_names_unique(self) -> None:
        assert len(BY_NAME) == len(ABC_REGISTERS)

    def test_spans_do_not_overlap(self) -> None:
        """Test no register falls inside another's packed string."""
        seen: set[int] = set()
        for definition in ABC_REGISTERS:
            span = set(definition.span)
            assert not span & seen, definition.name
            seen |= span

    def test_known_addresses_are_valid(self) -> None:
        """Test every decodable register lies in a supported range."""
        invalid = [a for a in known_addresses() if not is_valid_address(a)]
        assert invalid == []

    def test_known_addresses_include_string_continuations(self) -> None:
        addresses = known_addresses()
        assert {88, 89, 90, 91} <= set(addresses)
        assert list(addresses) == sorted(addresses)

    def test_ranges_ascending_and_disjoint(self) -> None:
        for (_, end), (start, _) in zip(REGISTER_RANGES, REGISTER_RANGES[1:], strict=False):
            assert end < start

    @pytest.mark.parametrize("address,valid", [(0, True), (155, True), (160, False), (741, True)])
    def test_is_valid_address(self, address: int, valid: bool) -> None:
        assert is_valid_address(address) is valid


class TestIZ2Layout:
    """Tests for IZ2 zone register arithmetic."""

    def test_zone_one(self) -> None:
        assert iz2_write_base(1) == 21202
        assert iz2_status_base(1) == 31007
        assert iz2_config3_address(1) == 31200

    def test_zone_stride(self) -> None:
        assert iz2_write_base(3) == 21202 + 18
        assert iz2_status_base(3) == 31007 + 6
        assert iz2_config3_address(3) == 31206

    def test_every_zone_defined(self) -> None:
        for zone in range(1, IZ2_MAX_ZONES + 1):
            assert f"Zone {zone} Ambient Temperature" in BY_NAME
            assert BY_ADDRESS[iz2_status_base(zone)].name == f"Zone {zone} Ambient Temperature"
