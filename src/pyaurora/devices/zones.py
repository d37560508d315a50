"""Thermostat zones.

A unit without an IntelliZone 2 (IZ2) board has one communicating
thermostat. With an IZ2 board installed, each of up to six zones is read
from three packed configuration registers and written through its own block
of nine registers.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pyaurora.exceptions import ValidationError
from pyaurora.registers.definitions import (
    FAN_MODES,
    HEATING_MODES,
    ZONE_CALLS,
    ZONE_SIZES,
    iz2_config3_address,
    iz2_status_base,
    iz2_write_base,
)

if TYPE_CHECKING:
    from pyaurora.planner import Span

    from .abc_client import AuroraABC

HEATING_MODE_CODES = {name: code for code, name in HEATING_MODES.items()}
FAN_MODE_CODES = {name: code for code, name in FAN_MODES.items()}

HEATING_SETPOINT_RANGE = (40, 90)
COOLING_SETPOINT_RANGE = (54, 99)
FAN_ON_TIMES = range(0, 26, 5)
FAN_OFF_TIMES = range(0, 41, 5)

# Thermostat registers
REG_AMBIENT = 502
REG_HEATING_SETPOINT = 745
REG_COOLING_SETPOINT = 746
THERMOSTAT_WRITES = (12606, 12619, 12620, 12621, 12622, 12623)


class _Zone:
    """Setpoint and fan controls shared by every zone type.

    ``writes`` holds the registers for target mode, heating setpoint,
    cooling setpoint, fan mode, intermittent fan on time and intermittent
    fan off time, in that order.
    """

    def __init__(self, client: AuroraABC, writes: tuple[int, ...]) -> None:
        self._client = client
        self._writes = writes
        self.ambient_temperature: float | None = None
        self.target_mode: str | None = None
        self.target_fan_mode: str | None = None
        self.heating_target_temperature: float | None = None
        self.cooling_target_temperature: float | None = None
        self.fan_intermittent_on: int | None = None
        self.fan_intermittent_off: int | None = None

    async def set_target_mode(self, mode: str) -> None:
        """Set the heating mode (off, auto, cool, heat, eheat)."""
        if mode not in HEATING_MODE_CODES:
            raise ValidationError(f"mode must be one of {sorted(HEATING_MODE_CODES)}, got {mode!r}")
        await self._client.write_register(self._writes[0], HEATING_MODE_CODES[mode])
        self.target_mode = mode

    async def set_heating_target_temperature(self, value: float) -> None:
        """Set the heating setpoint in °F (40-90)."""
        low, high = HEATING_SETPOINT_RANGE
        if not low <= value <= high:
            raise ValidationError(f"heating setpoint must be between {low} and {high}, got {value}")
        await self._client.write_register(self._writes[1], round(value * 10))
        self.heating_target_temperature = value

    async def set_cooling_target_temperature(self, value: float) -> None:
        """Set the cooling setpoint in °F (54-99)."""
        low, high = COOLING_SETPOINT_RANGE
        if not low <= value <= high:
            raise ValidationError(f"cooling setpoint must be between {low} and {high}, got {value}")
        await self._client.write_register(self._writes[2], round(value * 10))
        self.cooling_target_temperature = value

    async def set_target_fan_mode(self, mode: str) -> None:
        """Set the fan mode (auto, continuous, intermittent)."""
        if mode not in FAN_MODE_CODES:
            raise ValidationError(f"fan mode must be one of {sorted(FAN_MODE_CODES)}, got {mode!r}")
        await self._client.write_register(self._writes[3], FAN_MODE_CODES[mode])
        self.target_fan_mode = mode

    async def set_fan_intermittent_on(self, minutes: int) -> None:
        """Set the intermittent fan on time (0-25 minutes, steps of 5)."""
        if minutes not in FAN_ON_TIMES:
            raise ValidationError(f"fan on time must be 0-25 in steps of 5, got {minutes}")
        await self._client.write_register(self._writes[4], minutes)
        self.fan_intermittent_on = minutes

    async def set_fan_intermittent_off(self, minutes: int) -> None:
        """Set the intermittent fan off time (0-40 minutes, steps of 5)."""
        if minutes not in FAN_OFF_TIMES:
            raise ValidationError(f"fan off time must be 0-40 in steps of 5, got {minutes}")
        await self._client.write_register(self._writes[5], minutes)
        self.fan_intermittent_off = minutes


class Thermostat(_Zone):
    """Single communicating thermostat."""

    def __init__(self, client: AuroraABC) -> None:
        super().__init__(client, THERMOSTAT_WRITES)

    def registers_to_read(self) -> list[Span]:
        return [REG_AMBIENT, (REG_HEATING_SETPOINT, REG_COOLING_SETPOINT)]

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.ambient_temperature = snapshot.get(REG_AMBIENT)
        self.heating_target_temperature = snapshot.get(REG_HEATING_SETPOINT)
        self.cooling_target_temperature = snapshot.get(REG_COOLING_SETPOINT)

    def __repr__(self) -> str:
        return f"<Thermostat ambient={self.ambient_temperature}>"


class IZ2Zone(_Zone):
    """One IntelliZone 2 zone.

    Configuration 1 packs the fan settings and cooling setpoint,
    configuration 2 the current call, mode, damper and heating setpoint,
    configuration 3 the zone priority and size.
    """

    def __init__(self, client: AuroraABC, zone_number: int) -> None:
        base = iz2_write_base(zone_number)
        super().__init__(client, tuple(range(base, base + 6)))
        self.zone_number = zone_number
        self._status = iz2_status_base(zone_number)
        self._config3 = iz2_config3_address(zone_number)
        self.current_mode: str | None = None
        self.damper_open: bool | None = None
        self.priority: str | None = None
        self.size: int | None = None
        self.normalized_size: int | None = None

    def registers_to_read(self) -> list[Span]:
        return [
            (self._writes[1], self._writes[2]),
            (self._status, self._status + 2),
            self._config3,
        ]

    def refresh(self, snapshot: Mapping[int, Any]) -> None:
        """Update from a decoded snapshot."""
        self.ambient_temperature = snapshot.get(self._status)
        config1 = snapshot.get(self._status + 1)
        config2 = snapshot.get(self._status + 2)
        config3 = snapshot.get(self._config3)

        if config1 is not None:
            if config1 & 0x80:
                self.target_fan_mode = "continuous"
            elif config1 & 0x100:
                self.target_fan_mode = "intermittent"
            else:
                self.target_fan_mode = "auto"
            self.fan_intermittent_on = ((config1 >> 9) & 0x7) * 5
            self.fan_intermittent_off = (((config1 >> 12) & 0x7) + 1) * 5
            self.cooling_target_temperature = ((config1 & 0x7E) >> 1) + 36

        if config2 is not None:
            self.current_mode = ZONE_CALLS[(config2 >> 1) & 0x7]
            self.target_mode = HEATING_MODES.get((config2 >> 8) & 0x3)
            self.damper_open = bool(config2 & 0x10)
            # Heating setpoint's high bit lives in configuration 1
            carry = 32 if config1 is not None and config1 & 0x1 else 0
            self.heating_target_temperature = carry + ((config2 & 0xF800) >> 11) + 36

        if config3 is not None:
            self.priority = "economy" if config3 & 0x20 else "comfort"
            self.size = ZONE_SIZES[(config3 >> 3) & 0x3]
            self.normalized_size = config3 >> 8

    def __repr__(self) -> str:
        return f"<IZ2Zone {self.zone_number} ambient={self.ambient_temperature}>"
