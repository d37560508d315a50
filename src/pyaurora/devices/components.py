"""Optional sub-assemblies: variant selection and presence.

Variants are chosen once, at session start, from classification registers
that never change while the unit is powered:

- blower type (404): :data:`BLOWER_VARIANTS`, default :class:`PSCBlower`
- pump type (413): :data:`PUMP_VARIANTS`, default :class:`GenericPump`
- IZ2 presence (812) and zone count (483): one :class:`IZ2Zone` per zone,
  otherwise a single :class:`Thermostat`

Optional boards (thermostat, AXB, IZ2, AOC, MOC, EEV2) each have a status
register in which 3 means removed and anything else means present. Writing
2 adds the board and writing 3 removes it; the controller may need a power
cycle before the change takes effect.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from functools import partial
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from pyaurora.exceptions import ValidationError
from pyaurora.planner import RegisterRange
from pyaurora.registers.definitions import IZ2_MAX_ZONES

from .blower import FIVE_SPEED_MAX_SPEED, Blower, ECMBlower, PSCBlower
from .pump import GenericPump, Pump, VSPump
from .zones import IZ2Zone, Thermostat

if TYPE_CHECKING:
    from collections.abc import Mapping

    from pyaurora.planner import Span
    from pyaurora.transports.protocol import HoldingRegisterTransport

    from .abc_client import AuroraABC

_LOGGER = logging.getLogger(__name__)

REG_BLOWER_TYPE = 404
REG_PUMP_TYPE = 413
REG_IZ2_ZONE_COUNT = 483


@runtime_checkable
class Component(Protocol):
    """Capability shared by every selected variant."""

    def registers_to_read(self) -> list[Span]:
        """Registers this component needs on each refresh."""
        ...

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update state from a decoded snapshot."""
        ...


# =============================================================================
# VARIANT TABLES (raw type code → implementation)
# =============================================================================

# Blowers are built from (client, decoded type, *, iz2), pumps from (client, decoded type)
BlowerFactory = Callable[..., Blower]
PumpFactory = Callable[..., Pump]


def _psc_blower(client: AuroraABC, blower_type: Any, *, iz2: bool = False) -> Blower:
    return PSCBlower(client, blower_type)


BLOWER_VARIANTS: dict[int, BlowerFactory] = {
    1: ECMBlower,
    2: ECMBlower,
    3: partial(ECMBlower, max_speed=FIVE_SPEED_MAX_SPEED),
}
DEFAULT_BLOWER: BlowerFactory = _psc_blower

PUMP_VARIANTS: dict[int, PumpFactory] = {
    3: VSPump,
    4: VSPump,
    5: VSPump,
}
DEFAULT_PUMP: PumpFactory = GenericPump


def classify_blower(
    client: AuroraABC,
    code: int,
    blower_type: Any = None,
    *,
    iz2: bool = False,
) -> Blower:
    """Build the blower variant for a raw blower type code.

    Args:
        client: Owning session
        code: Raw value of the blower type register
        blower_type: Decoded blower type, kept for display
        iz2: Whether an IZ2 board is installed
    """
    return BLOWER_VARIANTS.get(code, DEFAULT_BLOWER)(client, blower_type, iz2=iz2)


def classify_pump(client: AuroraABC, code: int, pump_type: Any = None) -> Pump:
    """Build the pump variant for a raw pump type code."""
    return PUMP_VARIANTS.get(code, DEFAULT_PUMP)(client, pump_type)


async def select_zones(client: AuroraABC) -> list[Thermostat] | list[IZ2Zone]:
    """Select the zone topology.

    With an IZ2 board installed the zone count is read from the controller
    and one zone object is built per zone; otherwise the unit has a single
    thermostat.
    """
    if not await client.presence.is_installed("iz2"):
        return [Thermostat(client)]

    raw = await client.read_raw([REG_IZ2_ZONE_COUNT])
    count = raw[REG_IZ2_ZONE_COUNT]
    if count > IZ2_MAX_ZONES:
        _LOGGER.warning("IZ2 reports %d zones, using the first %d", count, IZ2_MAX_ZONES)
        count = IZ2_MAX_ZONES
    return [IZ2Zone(client, i + 1) for i in range(count)]


# =============================================================================
# PRESENCE
# =============================================================================

# Optional component → status register
OPTIONAL_COMPONENTS: dict[str, int] = {
    "thermostat": 800,
    "axb": 806,
    "iz2": 812,
    "aoc": 815,
    "moc": 818,
    "eev2": 824,
}

STATUS_ADDED = 2
STATUS_REMOVED = 3


def is_present(value: int) -> bool:
    """Interpret a component status register value."""
    return value != STATUS_REMOVED


class ComponentPresence:
    """Cached presence of the optional components of one unit.

    Presence is read from the controller the first time it is asked for and
    cached afterwards. ``add``/``remove`` write the status register and drop
    the cached value; reading it again is up to the caller.
    """

    def __init__(self, transport: HoldingRegisterTransport) -> None:
        self._transport = transport
        self._cache: dict[str, bool] = {}

    @staticmethod
    def _register(name: str) -> int:
        try:
            return OPTIONAL_COMPONENTS[name]
        except KeyError:
            raise ValidationError(
                f"Unknown component {name!r}, expected one of {sorted(OPTIONAL_COMPONENTS)}"
            ) from None

    async def is_installed(self, name: str) -> bool:
        """Return whether ``name`` is installed, reading it once."""
        address = self._register(name)
        if name not in self._cache:
            raw = await self._transport.read_holding_registers([RegisterRange.single(address)])
            self._cache[name] = is_present(raw[address])
            _LOGGER.debug("Component %s installed: %s", name, self._cache[name])
        return self._cache[name]

    def cached(self, name: str) -> bool | None:
        """Cached presence of ``name``, or None if not read yet."""
        self._register(name)
        return self._cache.get(name)

    def invalidate(self, name: str) -> None:
        """Forget the cached presence of ``name``."""
        self._register(name)
        self._cache.pop(name, None)

    async def add(self, name: str) -> None:
        """Mark ``name`` as installed (status 2)."""
        address = self._register(name)
        await self._transport.write_holding_register(address, STATUS_ADDED)
        self.invalidate(name)

    async def remove(self, name: str) -> None:
        """Mark ``name`` as removed (status 3)."""
        address = self._register(name)
        await self._transport.write_holding_register(address, STATUS_REMOVED)
        self.invalidate(name)
