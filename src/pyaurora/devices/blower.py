"""Blower variants.

The blower type register (404) selects the implementation at session start:
a fixed speed PSC motor, or an ECM motor with 12 speed settings (5 on the
460V five speed motor). See :data:`pyaurora.devices.components.BLOWER_VARIANTS`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pyaurora.exceptions import ValidationError

from .state import metered_watts, output_active

if TYPE_CHECKING:
    from pyaurora.planner import Span

    from .abc_client import AuroraABC

REG_OUTPUTS = 30
REG_BLOWER_WATTS = 1149

REG_BLOWER_ONLY_SPEED = 340
REG_LO_COMPRESSOR_SPEED = 341
REG_HI_COMPRESSOR_SPEED = 342
REG_ECM_SPEED = 344
REG_AUX_HEAT_SPEED = 347
REG_IZ2_DESIRED_SPEED = 565

ECM_MAX_SPEED = 12
FIVE_SPEED_MAX_SPEED = 5


class PSCBlower:
    """Fixed speed (permanent split capacitor) blower."""

    def __init__(self, client: AuroraABC, blower_type: Any) -> None:
        self._client = client
        self.type = blower_type
        self.running = False
        self.watts: int | None = None

    def registers_to_read(self) -> list[Span]:
        """Blower state comes from registers read on every refresh."""
        return []

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.running = output_active(snapshot, REG_OUTPUTS, "blower")
        self.watts = metered_watts(snapshot, REG_BLOWER_WATTS, self._client.energy_monitoring)

    def __repr__(self) -> str:
        return f"<PSCBlower type={self.type!r} running={self.running}>"


class ECMBlower:
    """Variable speed (electronically commutated) blower.

    Speeds are settings 1..``max_speed`` configured per operating stage.

    Attributes:
        speed: Current speed setting, 0 when stopped
        max_speed: Highest speed setting (12, or 5 on the five speed motor)
        iz2_desired_speed: Speed the IZ2 asks for, read only with IZ2 fitted
    """

    def __init__(
        self,
        client: AuroraABC,
        blower_type: Any,
        *,
        iz2: bool = False,
        max_speed: int = ECM_MAX_SPEED,
    ) -> None:
        self._client = client
        self._iz2 = iz2
        self.type = blower_type
        self.max_speed = max_speed
        self.running = False
        self.watts: int | None = None
        self.speed = 0
        self.blower_only_speed: int | None = None
        self.low_compressor_speed: int | None = None
        self.high_compressor_speed: int | None = None
        self.aux_heat_speed: int | None = None
        self.iz2_desired_speed: int | None = None

    def registers_to_read(self) -> list[Span]:
        registers: list[Span] = [
            (REG_BLOWER_ONLY_SPEED, REG_HI_COMPRESSOR_SPEED),
            REG_ECM_SPEED,
            REG_AUX_HEAT_SPEED,
        ]
        if self._iz2:
            registers.append(REG_IZ2_DESIRED_SPEED)
        return registers

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.speed = snapshot.get(REG_ECM_SPEED, 0)
        self.running = output_active(snapshot, REG_OUTPUTS, "blower") or self.speed > 0
        self.watts = metered_watts(snapshot, REG_BLOWER_WATTS, self._client.energy_monitoring)
        self.blower_only_speed = snapshot.get(REG_BLOWER_ONLY_SPEED)
        self.low_compressor_speed = snapshot.get(REG_LO_COMPRESSOR_SPEED)
        self.high_compressor_speed = snapshot.get(REG_HI_COMPRESSOR_SPEED)
        self.aux_heat_speed = snapshot.get(REG_AUX_HEAT_SPEED)
        if self._iz2:
            self.iz2_desired_speed = snapshot.get(REG_IZ2_DESIRED_SPEED)

    def __repr__(self) -> str:
        return (
            f"<ECMBlower type={self.type!r} running={self.running} "
            f"speed={self.speed}/{self.max_speed}>"
        )

    # ------------------------------------------------------------------
    # Speed settings
    # ------------------------------------------------------------------

    async def _write_speed(self, address: int, name: str, value: int) -> None:
        if not 1 <= value <= self.max_speed:
            raise ValidationError(f"{name} must be between 1 and {self.max_speed}, got {value}")
        await self._client.write_register(address, value)

    async def set_blower_only_speed(self, value: int) -> None:
        """Set the speed used when only the fan runs."""
        await self._write_speed(REG_BLOWER_ONLY_SPEED, "blower only speed", value)
        self.blower_only_speed = value

    async def set_low_compressor_speed(self, value: int) -> None:
        """Set the speed used with the compressor in stage 1."""
        await self._write_speed(REG_LO_COMPRESSOR_SPEED, "low compressor speed", value)
        self.low_compressor_speed = value

    async def set_high_compressor_speed(self, value: int) -> None:
        """Set the speed used with the compressor in stage 2."""
        await self._write_speed(REG_HI_COMPRESSOR_SPEED, "high compressor speed", value)
        self.high_compressor_speed = value

    async def set_aux_heat_speed(self, value: int) -> None:
        """Set the speed used with auxiliary heat."""
        await self._write_speed(REG_AUX_HEAT_SPEED, "aux heat speed", value)
        self.aux_heat_speed = value


Blower = PSCBlower | ECMBlower
