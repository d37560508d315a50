"""Device layer for pyaurora.

- abc_client: the AuroraABC session
- state: operating mode and fault derivation
- components: variant selection and optional component presence
- blower, pump, zones: component variants
"""

from __future__ import annotations

from .abc_client import AuroraABC
from .blower import Blower, ECMBlower, PSCBlower
from .components import (
    BLOWER_VARIANTS,
    OPTIONAL_COMPONENTS,
    PUMP_VARIANTS,
    Component,
    ComponentPresence,
    classify_blower,
    classify_pump,
    is_present,
    select_zones,
)
from .pump import GenericPump, Pump, VSPump
from .state import (
    FAULT_HISTORY,
    REFRESH_REGISTERS,
    AuroraState,
    OperatingMode,
    is_derated,
    is_safe_mode,
    resolve_compressor_speed,
    resolve_operating_mode,
    resolve_state,
    split_fault_register,
)
from .zones import IZ2Zone, Thermostat

__all__ = [
    # Session
    "AuroraABC",
    # State
    "AuroraState",
    "OperatingMode",
    "FAULT_HISTORY",
    "REFRESH_REGISTERS",
    "is_derated",
    "is_safe_mode",
    "resolve_compressor_speed",
    "resolve_operating_mode",
    "resolve_state",
    "split_fault_register",
    # Components
    "BLOWER_VARIANTS",
    "OPTIONAL_COMPONENTS",
    "PUMP_VARIANTS",
    "Component",
    "ComponentPresence",
    "classify_blower",
    "classify_pump",
    "is_present",
    "select_zones",
    # Variants
    "PSCBlower",
    "ECMBlower",
    "Blower",
    "GenericPump",
    "VSPump",
    "Pump",
    "Thermostat",
    "IZ2Zone",
]
