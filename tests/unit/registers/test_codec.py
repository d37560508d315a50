"""Tests for register decoding."""

from __future__ import annotations

import pytest

from pyaurora.exceptions import DecodeError
from pyaurora.registers.codec import (
    decode_registers,
    decode_string,
    decode_value,
    rule_for,
    to_signed,
    to_unsigned,
)
from pyaurora.registers.rules import (
    RAW,
    SIGNED_TENTHS,
    TENTHS,
    RuleKind,
    enum,
    flags,
    scaled,
)


def _pack(text: str) -> list[int]:
    """Pack ASCII two bytes per register, high byte first."""
    data = text.encode("ascii")
    if len(data) % 2:
        data += b" "
    return [int.from_bytes(data[i : i + 2], "big") for i in range(0, len(data), 2)]


class TestTwosComplement:
    """Tests for 16-bit sign conversion."""

    @pytest.mark.parametrize(
        "raw,signed",
        [(0, 0), (1, 1), (0x7FFF, 32767), (0x8000, -32768), (0xFFFF, -1), (0xFFFB, -5)],
    )
    def test_to_signed(self, raw: int, signed: int) -> None:
        assert to_signed(raw) == signed

    @pytest.mark.parametrize("value", [-32768, -5, -1, 0, 1, 32767])
    def test_to_unsigned_inverts_to_signed(self, value: int) -> None:
        assert to_signed(to_unsigned(value)) == value


class TestRuleFor:
    """Tests for rule lookup."""

    def test_known_address(self) -> None:
        assert rule_for(19) == SIGNED_TENTHS

    def test_unknown_address_is_raw(self) -> None:
        """Test lookup is total and defaults to raw passthrough."""
        assert rule_for(5000) is RAW
        assert rule_for(65535) is RAW


class TestDecodeValue:
    """Tests for single register decoding."""

    def test_scaled_divisor_10(self) -> None:
        assert decode_value(TENTHS, 1205) == 120.5

    def test_signed_scaled(self) -> None:
        assert decode_value(SIGNED_TENTHS, 0xFFFF) == -0.1
        assert decode_value(SIGNED_TENTHS, 335) == 33.5

    def test_divisor_one_stays_int(self) -> None:
        value = decode_value(scaled(1, signed=True), 0xFFFB)
        assert value == -5
        assert isinstance(value, int)

    @pytest.mark.parametrize("raw", [0, 1, 99, 1205, 32767, 65535])
    def test_scaled_recovers_raw(self, raw: int) -> None:
        """Test decoded value times divisor recovers the raw value."""
        assert round(decode_value(TENTHS, raw) * 10) == raw

    def test_enum(self) -> None:
        rule = enum({0: "auto", 1: "continuous"})
        assert decode_value(rule, 1) == "continuous"

    def test_enum_unknown_code_passes_through(self) -> None:
        rule = enum({0: "auto", 1: "continuous"})
        assert decode_value(rule, 9) == 9

    def test_flags(self) -> None:
        rule = flags({0x01: "cc", 0x04: "rv", 0x08: "blower", 0x400: "lockout"})
        assert decode_value(rule, 0x0D) == frozenset({"cc", "rv", "blower"})
        assert decode_value(rule, 0) == frozenset()

    def test_raw(self) -> None:
        assert decode_value(RAW, 4242) == 4242

    @pytest.mark.parametrize("raw", [-1, 65536])
    def test_out_of_range_raw(self, raw: int) -> None:
        with pytest.raises(DecodeError, match="16-bit"):
            decode_value(TENTHS, raw, address=401)

    def test_string_rule_needs_span(self) -> None:
        rule = rule_for(88)
        assert rule.kind is RuleKind.STRING
        with pytest.raises(DecodeError):
            decode_value(rule, 0x4142, address=88)


class TestDecodeString:
    """Tests for packed string decoding."""

    def test_strips_trailing_padding(self) -> None:
        assert decode_string(88, _pack("ABCVSP  ")) == "ABCVSP"
        assert decode_string(88, [0x4142, 0x4300, 0, 0]) == "ABC"

    def test_non_ascii(self) -> None:
        with pytest.raises(DecodeError, match="non-ASCII"):
            decode_string(88, [0x41C3, 0xA920])


class TestDecodeRegisters:
    """Tests for snapshot decoding."""

    def test_mixed_snapshot(self) -> None:
        raw = {19: 1205, 30: 0x0D, 404: 1, 5000: 77}
        assert decode_registers(raw) == {
            19: 120.5,
            30: frozenset({"cc", "rv", "blower"}),
            404: "ecm_208_230",
            5000: 77,
        }

    def test_bool_register(self) -> None:
        assert decode_registers({362: 1}) == {362: True}
        assert decode_registers({362: 0}) == {362: False}

    def test_string_span(self) -> None:
        """Test a packed string decodes at its first address."""
        raw = dict(zip(range(105, 110), _pack("1234567890"), strict=True))
        snapshot = decode_registers(raw)
        assert snapshot[105] == "1234567890"
        # Continuation registers keep their raw values
        assert snapshot[106] == raw[106]

    def test_incomplete_string_span(self) -> None:
        """Test a partially read string raises instead of decoding garbage."""
        raw = dict(zip(range(88, 91), _pack("ABCVSP"), strict=True))
        with pytest.raises(DecodeError, match="88..91") as exc_info:
            decode_registers(raw)
        assert exc_info.value.address == 88

    def test_empty(self) -> None:
        assert decode_registers({}) == {}
