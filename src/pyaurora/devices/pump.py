"""Loop pump variants.

The pump type register (413) selects a variable speed pump for the VS pump
codes and a generic fixed speed pump otherwise.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pyaurora.exceptions import ValidationError

from .state import metered_watts, output_active

if TYPE_CHECKING:
    from pyaurora.planner import Span

    from .abc_client import AuroraABC

REG_AXB_OUTPUTS = 1104
REG_PUMP_WATTS = 1165

REG_VS_PUMP_MIN = 321
REG_VS_PUMP_MAX = 322
REG_VS_PUMP_MANUAL = 323
REG_VS_PUMP_SPEED = 325

# Manual control register value that hands speed back to the controller
VS_PUMP_AUTOMATIC = 0x7FFF


def _check_percent(name: str, value: int) -> None:
    if not 1 <= value <= 100:
        raise ValidationError(f"{name} must be between 1 and 100, got {value}")


class GenericPump:
    """Fixed speed loop pump switched by the AXB."""

    def __init__(self, client: AuroraABC, pump_type: Any) -> None:
        self._client = client
        self.type = pump_type
        self.running = False
        self.watts: int | None = None

    def registers_to_read(self) -> list[Span]:
        return [REG_AXB_OUTPUTS]

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.running = output_active(snapshot, REG_AXB_OUTPUTS, "loop_pump")
        self.watts = metered_watts(snapshot, REG_PUMP_WATTS, self._client.energy_monitoring)

    def __repr__(self) -> str:
        return f"<GenericPump type={self.type!r} running={self.running}>"


class VSPump:
    """Variable speed loop pump.

    Attributes:
        speed: Current speed in percent
        min_speed: Lowest automatic speed in percent
        max_speed: Highest automatic speed in percent
        manual_speed: Forced speed in percent, or None under automatic control
    """

    def __init__(self, client: AuroraABC, pump_type: Any) -> None:
        self._client = client
        self.type = pump_type
        self.running = False
        self.watts: int | None = None
        self.speed = 0
        self.min_speed: int | None = None
        self.max_speed: int | None = None
        self.manual_speed: int | None = None

    def registers_to_read(self) -> list[Span]:
        return [REG_AXB_OUTPUTS, (REG_VS_PUMP_MIN, REG_VS_PUMP_SPEED)]

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.speed = snapshot.get(REG_VS_PUMP_SPEED, 0)
        self.running = output_active(snapshot, REG_AXB_OUTPUTS, "loop_pump") or self.speed > 0
        self.watts = metered_watts(snapshot, REG_PUMP_WATTS, self._client.energy_monitoring)
        self.min_speed = snapshot.get(REG_VS_PUMP_MIN)
        self.max_speed = snapshot.get(REG_VS_PUMP_MAX)
        manual = snapshot.get(REG_VS_PUMP_MANUAL, VS_PUMP_AUTOMATIC)
        self.manual_speed = None if manual == VS_PUMP_AUTOMATIC else manual

    def __repr__(self) -> str:
        return f"<VSPump type={self.type!r} running={self.running} speed={self.speed}%>"

    async def set_min_speed(self, value: int) -> None:
        """Set the lowest speed used under automatic control (1-100%)."""
        _check_percent("VS pump min speed", value)
        await self._client.write_register(REG_VS_PUMP_MIN, value)
        self.min_speed = value

    async def set_max_speed(self, value: int) -> None:
        """Set the highest speed used under automatic control (1-100%)."""
        _check_percent("VS pump max speed", value)
        await self._client.write_register(REG_VS_PUMP_MAX, value)
        self.max_speed = value

    async def set_manual_speed(self, value: int | None) -> None:
        """Force a speed (1-100%), or pass None to return to automatic control."""
        if value is not None:
            _check_percent("VS pump manual speed", value)
        await self._client.write_register(
            REG_VS_PUMP_MANUAL, VS_PUMP_AUTOMATIC if value is None else value
        )
        self.manual_speed = value


Pump = GenericPump | VSPump
