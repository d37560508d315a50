"""Decoding of raw holding register values.

Pure functions only: no transport or session knowledge. Lookup is keyed by
address and total; an address without a definition decodes as its raw
integer.

Example:
    >>> decode_registers({19: 1205, 404: 1})
    {19: 120.5, 404: 'ecm_208_230'}
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from pyaurora.exceptions import DecodeError

from .definitions import BY_ADDRESS
from .rules import RAW, DecodeRule, RuleKind

UINT16_MAX = 0xFFFF


def rule_for(address: int) -> DecodeRule:
    """Return the decode rule for ``address`` (raw passthrough if unknown)."""
    definition = BY_ADDRESS.get(address)
    return definition.rule if definition is not None else RAW


def to_signed(value: int) -> int:
    """Interpret a 16-bit register value as two's complement."""
    return value - 0x10000 if value & 0x8000 else value


def to_unsigned(value: int) -> int:
    """Encode a signed integer as a 16-bit two's complement register value."""
    return value + 0x10000 if value < 0 else value


def decode_string(address: int, words: Sequence[int]) -> str:
    """Decode ASCII packed two bytes per register, high byte first.

    Trailing spaces and NULs are stripped.

    Raises:
        DecodeError: If the bytes are not ASCII.
    """
    data = b"".join(word.to_bytes(2, "big") for word in words)
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as err:
        raise DecodeError(address, "packed string contains non-ASCII bytes") from err
    return text.rstrip(" \x00")


def decode_value(rule: DecodeRule, value: int, address: int = -1) -> Any:
    """Decode a single-register value according to ``rule``.

    Args:
        rule: Decode rule to apply (must not be a STRING rule)
        value: Raw register value (0..65535)
        address: Register address, used in error messages

    Raises:
        DecodeError: If the raw value is not a 16-bit unsigned integer, or
            the rule is a STRING rule (use :func:`decode_registers`).
    """
    if not 0 <= value <= UINT16_MAX:
        raise DecodeError(address, f"raw value {value} is not a 16-bit register value")

    if rule.kind is RuleKind.RAW:
        return value
    if rule.kind is RuleKind.BOOL:
        return value != 0
    if rule.kind is RuleKind.SCALED:
        number = to_signed(value) if rule.signed else value
        if rule.divisor == 1:
            return number
        return number / rule.divisor
    if rule.kind is RuleKind.ENUM:
        # Unknown codes pass through so new firmware values stay visible
        return (rule.table or {}).get(value, value)
    if rule.kind is RuleKind.FLAGS:
        return frozenset(name for mask, name in (rule.table or {}).items() if value & mask)
    raise DecodeError(address, f"{rule.kind} rule needs a register span")


def decode_registers(raw: Mapping[int, int]) -> dict[int, Any]:
    """Decode a raw address → value map into a snapshot.

    Packed strings are decoded at their first address; the continuation
    registers keep their raw values.

    Raises:
        DecodeError: If a value is malformed or a packed string's span is
            not fully present in ``raw``.
    """
    snapshot: dict[int, Any] = {}
    for address in sorted(raw):
        rule = rule_for(address)
        if rule.kind is RuleKind.STRING:
            span = range(address, address + rule.length)
            missing = [a for a in span if a not in raw]
            if missing:
                raise DecodeError(
                    address,
                    f"packed string spans {span.start}..{span.stop - 1} "
                    f"but {missing} were not read",
                )
            for a in span:
                if not 0 <= raw[a] <= UINT16_MAX:
                    raise DecodeError(a, f"raw value {raw[a]} is not a 16-bit register value")
            snapshot[address] = decode_string(address, [raw[a] for a in span])
        else:
            snapshot[address] = decode_value(rule, raw[address], address)
    return snapshot
