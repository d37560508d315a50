"""Read planning for holding register queries.

Turns an unordered collection of addresses and inclusive ranges into the
smallest ascending sequence of bounded read requests. Nearby spans are
coalesced into one request when the covering span, gap included, still fits
the per-request limit and every gap address lies in a supported range; a few
registers are over-read in exchange for fewer round trips. Spans wider than
the limit are chunked, and a chunk boundary never falls inside a packed
string. A controller
rejects the whole request if any address in it is unsupported.

Example:
    >>> query = parse_query("6,19..20,25")
    >>> [str(r.span) for r in plan_reads(query.spans, max_registers=100)]
    ['6..25']
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pyaurora.exceptions import ValidationError
from pyaurora.registers.definitions import ABC_REGISTERS, REGISTER_RANGES, is_valid_address
from pyaurora.registers.rules import RuleKind

MAX_ADDRESS = 0xFFFF

_RANGE_TOKEN = re.compile(r"^(\d+)(?:\.\.|-)(\d+)$")


@dataclass(frozen=True, order=True)
class RegisterRange:
    """Inclusive range of holding register addresses."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if not 0 <= self.start <= MAX_ADDRESS or not 0 <= self.end <= MAX_ADDRESS:
            raise ValidationError(
                f"Register range {self.start}..{self.end} is outside 0..{MAX_ADDRESS}"
            )
        if self.start > self.end:
            raise ValidationError(f"Register range {self.start}..{self.end} is reversed")

    @classmethod
    def single(cls, address: int) -> RegisterRange:
        """Range holding exactly one address."""
        return cls(address, address)

    @property
    def count(self) -> int:
        """Number of registers in the range."""
        return self.end - self.start + 1

    def addresses(self) -> range:
        """All addresses in the range."""
        return range(self.start, self.end + 1)

    def __contains__(self, address: object) -> bool:
        return isinstance(address, int) and self.start <= address <= self.end

    def __str__(self) -> str:
        return str(self.start) if self.start == self.end else f"{self.start}..{self.end}"


Span = int | RegisterRange | range | tuple[int, int]


def to_range(span: Span) -> RegisterRange:
    """Normalize an address, ``range``, ``(start, end)`` tuple or RegisterRange.

    A Python ``range`` is taken with its usual exclusive stop.
    """
    if isinstance(span, RegisterRange):
        return span
    if isinstance(span, bool):
        raise ValidationError(f"Not a register address: {span!r}")
    if isinstance(span, int):
        return RegisterRange.single(span)
    if isinstance(span, range):
        if span.step != 1 or len(span) == 0:
            raise ValidationError(f"Register range must be non-empty with step 1: {span!r}")
        return RegisterRange(span.start, span.stop - 1)
    if isinstance(span, tuple) and len(span) == 2:
        return RegisterRange(int(span[0]), int(span[1]))
    raise ValidationError(f"Not a register address or range: {span!r}")


@dataclass(frozen=True)
class Query:
    """A register query.

    Attributes:
        spans: Requested addresses and ranges, in request order.
        implicit: True when the query came from a symbolic token (``known``
            or ``valid``). Implicit queries tolerate rejected addresses.
    """

    spans: tuple[RegisterRange, ...]
    implicit: bool = False


def parse_query(text: str) -> Query:
    """Parse a comma separated query such as ``"6,19..20,25"``.

    Tokens are single addresses, ``N..M`` / ``N-M`` inclusive ranges, or the
    symbolic tokens ``known`` (every register with a decode rule, packed
    strings as their whole span) and ``valid`` (every documented supported
    range). ``valid`` replaces the rest of the query.

    Raises:
        ValidationError: On an empty query or a malformed token.
    """
    spans: list[RegisterRange] = []
    implicit = False

    for token in (t.strip() for t in text.split(",")):
        if not token:
            continue
        if token == "known":
            implicit = True
            spans.extend(
                RegisterRange(r.address, r.address + r.rule.length - 1) for r in ABC_REGISTERS
            )
        elif token == "valid":
            return Query(spans=tuple(RegisterRange(*r) for r in REGISTER_RANGES), implicit=True)
        elif match := _RANGE_TOKEN.match(token):
            spans.append(RegisterRange(int(match.group(1)), int(match.group(2))))
        elif token.isdigit():
            spans.append(RegisterRange.single(int(token)))
        else:
            raise ValidationError(f"Invalid register query token: {token!r}")

    if not spans:
        raise ValidationError(f"Empty register query: {text!r}")
    return Query(spans=tuple(spans), implicit=implicit)


@dataclass(frozen=True)
class ReadRequest:
    """One planned read.

    Attributes:
        span: Covering range actually requested from the transport.
        parts: Disjoint, ascending constituent ranges the caller asked for.
            Addresses in ``span`` but not in a part are over-read gap.
    """

    span: RegisterRange
    parts: tuple[RegisterRange, ...]

    def addresses(self) -> Iterator[int]:
        """Requested addresses (gap excluded), ascending."""
        for part in self.parts:
            yield from part.addresses()

    def __contains__(self, address: object) -> bool:
        return any(address in part for part in self.parts)


def merge_spans(spans: Iterable[Span]) -> list[RegisterRange]:
    """Union overlapping spans into disjoint ascending ranges.

    Adjacent spans stay separate so each can still be read on its own.
    """
    merged: list[RegisterRange] = []
    for current in sorted(to_range(s) for s in spans):
        if merged and current.start <= merged[-1].end:
            last = merged[-1]
            if current.end > last.end:
                merged[-1] = RegisterRange(last.start, current.end)
        else:
            merged.append(current)
    return merged


# Packed strings decode only when read whole, so chunks never cut through one
_STRING_SPANS: tuple[tuple[int, int], ...] = tuple(
    (r.address, r.address + r.rule.length - 1)
    for r in ABC_REGISTERS
    if r.rule.kind is RuleKind.STRING
)


def _chunk_end(start: int, end: int) -> int:
    for first, last in _STRING_SPANS:
        if start < first <= end < last:
            return first - 1
    return end


def _chunks(part: RegisterRange, max_registers: int) -> Iterator[RegisterRange]:
    start = part.start
    while start <= part.end:
        end = min(start + max_registers - 1, part.end)
        if end < part.end:
            end = _chunk_end(start, end)
        yield RegisterRange(start, end)
        start = end + 1


def _gap_readable(previous: RegisterRange, following: RegisterRange) -> bool:
    return all(is_valid_address(a) for a in range(previous.end + 1, following.start))


def plan_reads(spans: Iterable[Span], max_registers: int) -> list[ReadRequest]:
    """Coalesce spans into bounded read requests.

    Args:
        spans: Addresses and ranges to cover, in any order
        max_registers: Maximum registers per request (transport limit)

    Returns:
        Ascending read requests whose parts cover exactly the requested
        addresses and whose spans never exceed ``max_registers``. Gaps
        are only over-read where every gap address is supported.

    Raises:
        ValidationError: If ``max_registers`` is less than 1 or a span is
            out of range.
    """
    if max_registers < 1:
        raise ValidationError(f"max_registers must be at least 1, got {max_registers}")

    parts = [chunk for part in merge_spans(spans) for chunk in _chunks(part, max_registers)]

    requests: list[ReadRequest] = []
    start: int | None = None
    pending: list[RegisterRange] = []
    for part in parts:
        if (
            start is not None
            and part.end - start + 1 <= max_registers
            and _gap_readable(pending[-1], part)
        ):
            pending.append(part)
            continue
        if pending and start is not None:
            requests.append(ReadRequest(RegisterRange(start, pending[-1].end), tuple(pending)))
        start = part.start
        pending = [part]
    if pending and start is not None:
        requests.append(ReadRequest(RegisterRange(start, pending[-1].end), tuple(pending)))
    return requests
