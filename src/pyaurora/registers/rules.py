"""Decode rule model for ABC holding registers.

A :class:`DecodeRule` describes how one raw 16-bit holding register (or, for
packed strings, a fixed span of registers starting at the keyed address) maps
to a semantic value. Rules are plain data; the interpretation lives in
:mod:`pyaurora.registers.codec`.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum


class RuleKind(StrEnum):
    """How a raw register value is interpreted."""

    RAW = "raw"
    SCALED = "scaled"
    ENUM = "enum"
    FLAGS = "flags"
    STRING = "string"
    BOOL = "bool"


@dataclass(frozen=True)
class DecodeRule:
    """Interpretation of a raw register value.

    Attributes:
        kind: Decoding strategy.
        divisor: For SCALED rules, the raw value is divided by this.
        signed: For SCALED rules, interpret the 16-bit field as two's complement.
        table: For ENUM rules the code → name lookup, for FLAGS rules the
            bit mask → flag name lookup.
        length: Number of registers covered by a STRING rule.
    """

    kind: RuleKind = RuleKind.RAW
    divisor: int = 1
    signed: bool = False
    table: Mapping[int, str] | None = field(default=None, compare=False)
    length: int = 1


RAW = DecodeRule()


def scaled(divisor: int, *, signed: bool = False) -> DecodeRule:
    """Rule for a fixed-point value stored as ``value * divisor``."""
    return DecodeRule(kind=RuleKind.SCALED, divisor=divisor, signed=signed)


def enum(table: Mapping[int, str]) -> DecodeRule:
    """Rule for an enumerated code."""
    return DecodeRule(kind=RuleKind.ENUM, table=table)


def flags(table: Mapping[int, str]) -> DecodeRule:
    """Rule for a bitfield expanding to a set of named flags."""
    return DecodeRule(kind=RuleKind.FLAGS, table=table)


def string(length: int) -> DecodeRule:
    """Rule for an ASCII string packed two bytes per register."""
    return DecodeRule(kind=RuleKind.STRING, length=length)


def boolean() -> DecodeRule:
    """Rule for an on/off register (any non-zero value is on)."""
    return DecodeRule(kind=RuleKind.BOOL)


TENTHS = scaled(10)
SIGNED_TENTHS = scaled(10, signed=True)
HUNDREDTHS = scaled(100)
SIGNED = scaled(1, signed=True)
