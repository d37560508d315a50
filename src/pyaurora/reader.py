"""Execution of planned register reads.

The reader issues every planned request through the transport, one at a
time, and applies the query's fallback semantics when the controller
rejects an address:

- implicit queries (``known`` / ``valid``) re-read each constituent part of
  the rejected request on its own and silently drop parts that are still
  rejected, since not every model or firmware revision implements every
  register;
- explicit queries propagate the :class:`InvalidAddressError` unchanged.

Timeouts are never retried here; retries belong to the transport.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from pyaurora.planner import Query, ReadRequest, RegisterRange, plan_reads
from pyaurora.transports.exceptions import InvalidAddressError
from pyaurora.transports.protocol import HoldingRegisterTransport

_LOGGER = logging.getLogger(__name__)

__all__ = ["BatchReader", "read_query"]


class BatchReader:
    """Reads planned requests from one transport.

    Example:
        reader = BatchReader(transport)
        requests = plan_reads([6, (19, 20), 25], transport.max_registers_per_request)
        raw = await reader.read(requests, implicit=False)
    """

    def __init__(self, transport: HoldingRegisterTransport) -> None:
        """Initialize the reader.

        Args:
            transport: Transport used for every read
        """
        self._transport = transport

    async def _read_range(self, register_range: RegisterRange) -> dict[int, int]:
        return await self._transport.read_holding_registers([register_range])

    async def _read_parts(self, request: ReadRequest) -> dict[int, int]:
        """Read each part of a rejected request individually."""
        registers: dict[int, int] = {}
        for part in request.parts:
            try:
                registers.update(await self._read_range(part))
            except InvalidAddressError:
                _LOGGER.debug("Skipping unsupported registers %s", part)
        return registers

    async def read(
        self,
        requests: Iterable[ReadRequest],
        *,
        implicit: bool,
    ) -> dict[int, int]:
        """Execute read requests sequentially.

        Args:
            requests: Planned requests, in order
            implicit: Whether the originating query was implicit

        Returns:
            Address → raw value for every requested address that could be
            read. Over-read gap addresses are discarded.

        Raises:
            InvalidAddressError: If an explicit request was rejected
            TransportTimeoutError: If the transport exhausted its retries
        """
        registers: dict[int, int] = {}
        for request in requests:
            try:
                values = await self._read_range(request.span)
            except InvalidAddressError:
                if not implicit:
                    raise
                _LOGGER.debug(
                    "Registers %s rejected, reading %d parts individually",
                    request.span,
                    len(request.parts),
                )
                values = await self._read_parts(request)
            registers.update(
                (address, value) for address, value in values.items() if address in request
            )
        return registers


async def read_query(
    transport: HoldingRegisterTransport,
    query: Query,
    max_registers: int | None = None,
) -> dict[int, int]:
    """Plan and read a query.

    Args:
        transport: Transport to read from
        query: Parsed query
        max_registers: Per-request limit (default: the transport's own)

    Returns:
        Address → raw value. Partial only for implicit queries.
    """
    limit = max_registers or transport.max_registers_per_request
    requests = plan_reads(query.spans, limit)
    _LOGGER.debug(
        "Reading %d spans in %d requests (implicit=%s)",
        len(query.spans),
        len(requests),
        query.implicit,
    )
    return await BatchReader(transport).read(requests, implicit=query.implicit)
