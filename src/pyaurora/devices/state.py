"""Derived heat pump state.

Everything here is a pure function of a decoded register snapshot: the
operating mode, compressor stage or speed, lockout and fault code, and the
derated / safe mode flags.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# =============================================================================
# REGISTERS
# =============================================================================

REG_WAITING = 6  # compressor anti-short-cycle delay remaining
REG_FAULT = 25
REG_OUTPUTS = 30
REG_DEHUMIDIFY = 362
REG_VS_SPEED = 3001

# Read on every refresh regardless of installed equipment
REFRESH_REGISTERS: tuple[int | tuple[int, int], ...] = (
    6,
    (19, 20),
    25,
    30,
    344,
    (740, 741),
    900,
    (1110, 1111),
    1114,
    (1147, 1153),
    1165,
    31003,
)

# Fault history, exposed raw
FAULT_HISTORY = (601, 699)

# =============================================================================
# FAULT CODES
# =============================================================================

LOCKOUT_BIT = 0x8000
FAULT_CODE_MASK = 0x7FFF
DERATED_FAULTS = range(41, 47)
SAFE_MODE_FAULTS = frozenset({47, 48, 49, 72, 74})


class OperatingMode(StrEnum):
    """What the heat pump is currently doing."""

    LOCKOUT = "lockout"
    DEHUMIDIFY = "dehumidify"
    COOLING = "cooling"
    HEATING = "heating"
    EH2 = "eh2"
    EMERGENCY = "emergency"
    EH1 = "eh1"
    BLOWER = "blower"
    WAITING = "waiting"
    STANDBY = "standby"


def _outputs(snapshot: Mapping[int, Any]) -> frozenset[str]:
    return snapshot.get(REG_OUTPUTS) or frozenset()


def resolve_operating_mode(snapshot: Mapping[int, Any]) -> OperatingMode:
    """Resolve the operating mode from a decoded snapshot.

    The checks are ordered; the first that matches wins. A lockout outranks
    a running compressor, a running compressor outranks aux heat, and so on
    down to standby.
    """
    outputs = _outputs(snapshot)
    cooling = "rv" in outputs

    if "lockout" in outputs:
        return OperatingMode.LOCKOUT
    if snapshot.get(REG_DEHUMIDIFY):
        return OperatingMode.DEHUMIDIFY
    if "cc" in outputs or "cc2" in outputs:
        return OperatingMode.COOLING if cooling else OperatingMode.HEATING
    if "eh2" in outputs:
        return OperatingMode.EH2 if cooling else OperatingMode.EMERGENCY
    if "eh1" in outputs:
        return OperatingMode.EH1 if cooling else OperatingMode.EMERGENCY
    if "blower" in outputs:
        return OperatingMode.BLOWER
    if snapshot.get(REG_WAITING):
        return OperatingMode.WAITING
    return OperatingMode.STANDBY


def resolve_compressor_speed(snapshot: Mapping[int, Any], variable_speed: bool) -> int:
    """Compressor speed (variable speed drives) or stage 0/1/2 (fixed speed)."""
    if variable_speed:
        return int(snapshot.get(REG_VS_SPEED, 0))
    outputs = _outputs(snapshot)
    if "cc2" in outputs:
        return 2
    if "cc" in outputs:
        return 1
    return 0


def split_fault_register(raw: int) -> tuple[bool, int]:
    """Split the last fault register into ``(locked_out, fault_code)``."""
    return bool(raw & LOCKOUT_BIT), raw & FAULT_CODE_MASK


def is_derated(fault_code: int) -> bool:
    """Return True if the fault code means the compressor is derated."""
    return fault_code in DERATED_FAULTS


def is_safe_mode(fault_code: int) -> bool:
    """Return True if the fault code means the unit is in safe mode."""
    return fault_code in SAFE_MODE_FAULTS


def output_active(snapshot: Mapping[int, Any], address: int, output: str) -> bool:
    """Return True if ``output`` is set in the outputs register at ``address``."""
    return output in (snapshot.get(address) or ())


def metered_watts(
    snapshot: Mapping[int, Any], address: int, energy_monitoring: bool
) -> int | None:
    """Power reading at ``address``, or None when the unit has no energy monitoring."""
    return snapshot.get(address) if energy_monitoring else None


@dataclass(frozen=True)
class AuroraState:
    """State derived from one refresh."""

    mode: OperatingMode
    compressor_speed: int
    locked_out: bool
    fault_code: int
    derated: bool
    safe_mode: bool
    faults: tuple[int, ...] = ()


def resolve_state(
    snapshot: Mapping[int, Any],
    variable_speed: bool,
    faults: Sequence[int] = (),
) -> AuroraState:
    """Derive the full state from a decoded snapshot.

    Args:
        snapshot: Decoded registers from the latest refresh
        variable_speed: Whether the unit has a variable speed drive
        faults: Raw fault history registers

    Returns:
        Frozen AuroraState
    """
    locked_out, fault_code = split_fault_register(int(snapshot.get(REG_FAULT, 0)))
    return AuroraState(
        mode=resolve_operating_mode(snapshot),
        compressor_speed=resolve_compressor_speed(snapshot, variable_speed),
        locked_out=locked_out,
        fault_code=fault_code,
        derated=is_derated(fault_code),
        safe_mode=is_safe_mode(fault_code),
        faults=tuple(faults),
    )
