"""Exception hierarchy for pyaurora.

All errors raised by the library inherit from :class:`AuroraError` so callers
can use a single ``except AuroraError`` to catch validation, decoding and
transport failures alike.
"""

from __future__ import annotations


class AuroraError(Exception):
    """Base exception for all pyaurora errors."""

    pass


class ValidationError(AuroraError, ValueError):
    """A caller-supplied value is outside its documented domain.

    Raised before anything is sent to the transport.
    """

    pass


class DecodeError(AuroraError):
    """A decode rule could not interpret the raw register data."""

    def __init__(self, address: int, message: str) -> None:
        """Initialize with the offending register address.

        Args:
            address: Register the decode rule is keyed on
            message: Description of what was malformed
        """
        self.address = address
        super().__init__(f"Cannot decode register {address}: {message}")
