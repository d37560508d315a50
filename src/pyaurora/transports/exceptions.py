"""Transport-specific exceptions.

This module provides exception classes for transport operations,
allowing clients to handle errors appropriately.

All transport exceptions inherit from :class:`~pyaurora.exceptions.AuroraError`.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from pyaurora.exceptions import AuroraError

if TYPE_CHECKING:
    from pyaurora.planner import RegisterRange


class TransportError(AuroraError):
    """Base exception for all transport errors."""

    pass


class TransportConnectionError(TransportError):
    """Failed to connect to the device."""

    pass


class TransportTimeoutError(TransportError):
    """No response within the configured timeout and retries."""

    pass


class TransportReadError(TransportError):
    """Failed to read data from device."""

    pass


class TransportWriteError(TransportError):
    """Failed to write data to device."""

    pass


class InvalidAddressError(TransportReadError):
    """The controller rejected one or more requested register addresses.

    Corresponds to Modbus exception code 2 (Illegal Data Address).
    """

    def __init__(self, ranges: Sequence[RegisterRange]) -> None:
        """Initialize with the rejected ranges.

        Args:
            ranges: The register ranges of the rejected request
        """
        self.ranges = tuple(ranges)
        spans = ", ".join(str(r) for r in self.ranges)
        super().__init__(f"Illegal data address in request for {spans}")
