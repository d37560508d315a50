"""Canonical Aurora Base Controller (ABC) holding register map.

Single source of truth for every holding register this library knows how to
interpret. The ABC exposes all of its data (sensors, configuration, output
flags, fault history) as holding registers (function code 0x03); each register
has its own encoding, described by a :class:`~pyaurora.registers.rules.DecodeRule`.

Temperatures are in °F and stored as tenths (signed where they can go below
zero). Versions are stored as hundredths. Watts are plain unsigned values.

Registers not listed here are still readable; they decode as raw integers.
"""

from __future__ import annotations

from dataclasses import dataclass

from .rules import (
    HUNDREDTHS,
    RAW,
    SIGNED,
    SIGNED_TENTHS,
    TENTHS,
    DecodeRule,
    boolean,
    enum,
    flags,
    string,
)

# =============================================================================
# FLAG TABLES (bit mask → flag name)
# =============================================================================

SYSTEM_OUTPUTS: dict[int, str] = {
    0x01: "cc",  # compressor contactor, stage 1
    0x02: "cc2",  # compressor contactor, stage 2
    0x04: "rv",  # reversing valve (cool instead of heat)
    0x08: "blower",
    0x10: "eh1",  # aux heat stage 1
    0x20: "eh2",  # aux heat stage 2
    0x200: "accessory",
    0x400: "lockout",
    0x800: "alarm",
}

SYSTEM_INPUTS: dict[int, str] = {
    0x01: "y1",
    0x02: "y2",
    0x04: "w",
    0x08: "o",
    0x10: "g",
    0x20: "dehumidifier",
    0x40: "emergency_shutdown",
    0x200: "load_shed",
}

STATUS_FLAGS: dict[int, str] = {
    0x80: "lps",  # low pressure switch open
    0x100: "hps",  # high pressure switch open
}

AXB_OUTPUTS: dict[int, str] = {
    0x01: "dhw",
    0x02: "loop_pump",
    0x04: "diverting_valve",
    0x08: "dehumidifier_reheat",
    0x10: "accessory2",
}

# =============================================================================
# ENUMERATION TABLES (code → name)
# =============================================================================

BLOWER_TYPES: dict[int, str] = {
    0: "psc",
    1: "ecm_208_230",
    2: "ecm_265_277",
    3: "five_speed_ecm_460",
}

PUMP_TYPES: dict[int, str] = {
    0: "open_loop",
    1: "fc1",
    2: "fc2",
    3: "vs_pump",
    4: "vs_pump_26_99",
    5: "vs_pump_ups26_99",
    6: "fc1_glnp",
    7: "fc2_glnp",
}

ENERGY_MONITOR_TYPES: dict[int, str] = {
    0: "none",
    1: "compressor_monitor",
    2: "energy_monitor",
}

COMPONENT_STATUS: dict[int, str] = {
    1: "active",
    2: "added",
    3: "removed",
    0xFFFF: "missing",
}

HEATING_MODES: dict[int, str] = {
    0: "off",
    1: "auto",
    2: "cool",
    3: "heat",
    4: "eheat",
}

FAN_MODES: dict[int, str] = {
    0: "auto",
    1: "continuous",
    2: "intermittent",
}

ZONE_CALLS: dict[int, str] = {
    0: "standby",
    1: "unknown1",
    2: "h1",
    3: "h2",
    4: "h3",
    5: "c1",
    6: "c2",
    7: "unknown7",
}

ZONE_SIZES: dict[int, int] = {0: 0, 1: 25, 2: 45, 3: 70}


@dataclass(frozen=True)
class RegisterDefinition:
    """Single holding register definition.

    Attributes:
        address: Holding register address. For string rules, the first
            register of the span.
        name: Human-readable register name. Unique.
        rule: How the raw value is decoded.
    """

    address: int
    name: str
    rule: DecodeRule = RAW

    @property
    def span(self) -> range:
        """All addresses covered by this definition."""
        return range(self.address, self.address + self.rule.length)


# =============================================================================
# IZ2 ZONE REGISTER LAYOUT
# =============================================================================
# Zone N (1-based) writes start at 21202 + 9 * (N - 1); readback registers
# are strided by 3 starting at 31007 (ambient) and 31200 (configuration 3).

IZ2_MAX_ZONES = 6
IZ2_WRITE_BASE = 21202
IZ2_WRITE_STRIDE = 9
IZ2_STATUS_BASE = 31007
IZ2_CONFIG3_BASE = 31200
IZ2_READ_STRIDE = 3


def iz2_write_base(zone_number: int) -> int:
    """First write register of an IZ2 zone (its target mode)."""
    return IZ2_WRITE_BASE + (zone_number - 1) * IZ2_WRITE_STRIDE


def iz2_status_base(zone_number: int) -> int:
    """Ambient temperature register of an IZ2 zone."""
    return IZ2_STATUS_BASE + (zone_number - 1) * IZ2_READ_STRIDE


def iz2_config3_address(zone_number: int) -> int:
    """Configuration 3 (priority/size) register of an IZ2 zone."""
    return IZ2_CONFIG3_BASE + (zone_number - 1) * IZ2_READ_STRIDE


def _iz2_zone_registers(zone_number: int) -> tuple[RegisterDefinition, ...]:
    write = iz2_write_base(zone_number)
    status = iz2_status_base(zone_number)
    prefix = f"Zone {zone_number}"
    return (
        RegisterDefinition(write, f"{prefix} Heating Mode (write)", enum(HEATING_MODES)),
        RegisterDefinition(write + 1, f"{prefix} Heating Setpoint (write)", TENTHS),
        RegisterDefinition(write + 2, f"{prefix} Cooling Setpoint (write)", TENTHS),
        RegisterDefinition(write + 3, f"{prefix} Fan Mode (write)", enum(FAN_MODES)),
        RegisterDefinition(write + 4, f"{prefix} Fan Intermittent On (write)"),
        RegisterDefinition(write + 5, f"{prefix} Fan Intermittent Off (write)"),
        RegisterDefinition(status, f"{prefix} Ambient Temperature", SIGNED_TENTHS),
        RegisterDefinition(status + 1, f"{prefix} Configuration 1"),
        RegisterDefinition(status + 2, f"{prefix} Configuration 2"),
        RegisterDefinition(iz2_config3_address(zone_number), f"{prefix} Configuration 3"),
    )


# =============================================================================
# ABC HOLDING REGISTERS
# =============================================================================

ABC_REGISTERS: tuple[RegisterDefinition, ...] = (
    # =========================================================================
    # SYSTEM CONFIGURATION (regs 1-17)
    # =========================================================================
    RegisterDefinition(1, "Random Start Delay"),
    RegisterDefinition(2, "ABC Program Version", HUNDREDTHS),
    RegisterDefinition(6, "Compressor Anti-Short Cycle Delay"),
    RegisterDefinition(9, "Compressor Minimum Run Time"),
    RegisterDefinition(15, "Blower Off Delay"),
    RegisterDefinition(16, "Line Voltage"),
    RegisterDefinition(17, "Aux/E Heat Staging Delay"),
    # =========================================================================
    # SENSORS AND STATUS (regs 19-31)
    # =========================================================================
    RegisterDefinition(19, "FP1", SIGNED_TENTHS),
    RegisterDefinition(20, "FP2", SIGNED_TENTHS),
    RegisterDefinition(21, "Condensate"),
    # Bit 15 = locked out, low 15 bits = fault code
    RegisterDefinition(25, "Last Fault Number"),
    RegisterDefinition(26, "Last Lockout"),
    RegisterDefinition(27, "System Outputs (At Last Lockout)", flags(SYSTEM_OUTPUTS)),
    RegisterDefinition(28, "System Inputs (At Last Lockout)", flags(SYSTEM_INPUTS)),
    RegisterDefinition(30, "System Outputs", flags(SYSTEM_OUTPUTS)),
    RegisterDefinition(31, "Status", flags(STATUS_FLAGS)),
    RegisterDefinition(47, "Clear Fault History"),
    # =========================================================================
    # IDENTIFICATION (packed ASCII strings)
    # =========================================================================
    RegisterDefinition(88, "ABC Program", string(4)),
    RegisterDefinition(92, "Model Number", string(12)),
    RegisterDefinition(105, "Serial Number", string(5)),
    RegisterDefinition(112, "Setup Line Voltage"),
    # =========================================================================
    # VARIABLE SPEED PUMP (regs 321-325)
    # =========================================================================
    RegisterDefinition(321, "VS Pump Min"),
    RegisterDefinition(322, "VS Pump Max"),
    # 0x7fff = automatic, otherwise manual speed percentage
    RegisterDefinition(323, "VS Pump Manual"),
    RegisterDefinition(325, "VS Pump Speed"),
    # =========================================================================
    # ECM BLOWER (regs 340-347)
    # =========================================================================
    RegisterDefinition(340, "Blower Only Speed"),
    RegisterDefinition(341, "Lo Compressor ECM Speed"),
    RegisterDefinition(342, "Hi Compressor ECM Speed"),
    RegisterDefinition(344, "ECM Speed"),
    RegisterDefinition(346, "Cooling Airflow Adjustment", SIGNED),
    RegisterDefinition(347, "Aux Heat ECM Speed"),
    RegisterDefinition(362, "Active Dehumidify", boolean()),
    # =========================================================================
    # DOMESTIC HOT WATER AND EQUIPMENT TYPES (regs 400-419)
    # =========================================================================
    RegisterDefinition(400, "DHW Enable", boolean()),
    RegisterDefinition(401, "DHW Setpoint", TENTHS),
    RegisterDefinition(404, "Blower Type", enum(BLOWER_TYPES)),
    RegisterDefinition(412, "Energy Monitor", enum(ENERGY_MONITOR_TYPES)),
    RegisterDefinition(413, "Pump Type", enum(PUMP_TYPES)),
    RegisterDefinition(419, "Loop Pressure Trip", TENTHS),
    RegisterDefinition(483, "Number of IZ2 Zones"),
    RegisterDefinition(502, "Ambient Temperature", SIGNED_TENTHS),
    RegisterDefinition(565, "IZ2 Blower % Desired"),
    # =========================================================================
    # THERMOSTAT (regs 740-746)
    # =========================================================================
    RegisterDefinition(740, "Entering Air", SIGNED_TENTHS),
    RegisterDefinition(741, "Relative Humidity"),
    RegisterDefinition(745, "Heating Set Point", TENTHS),
    RegisterDefinition(746, "Cooling Set Point", TENTHS),
    # =========================================================================
    # OPTIONAL COMPONENTS (regs 800-825): status + firmware version
    # =========================================================================
    RegisterDefinition(800, "Thermostat Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(806, "AXB Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(807, "AXB Version", HUNDREDTHS),
    RegisterDefinition(812, "IZ2 Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(813, "IZ2 Version", HUNDREDTHS),
    RegisterDefinition(815, "AOC Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(816, "AOC Version", HUNDREDTHS),
    RegisterDefinition(818, "MOC Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(819, "MOC Version", HUNDREDTHS),
    RegisterDefinition(824, "EEV2 Installed", enum(COMPONENT_STATUS)),
    RegisterDefinition(825, "EEV2 Version", HUNDREDTHS),
    # =========================================================================
    # AXB SENSORS AND ENERGY (regs 900-1165)
    # =========================================================================
    RegisterDefinition(900, "Leaving Air", SIGNED_TENTHS),
    RegisterDefinition(1104, "AXB Outputs", flags(AXB_OUTPUTS)),
    RegisterDefinition(1110, "Leaving Water", SIGNED_TENTHS),
    RegisterDefinition(1111, "Entering Water", SIGNED_TENTHS),
    RegisterDefinition(1114, "DHW Temp", SIGNED_TENTHS),
    RegisterDefinition(1147, "Compressor Watts"),
    RegisterDefinition(1149, "Blower Watts"),
    RegisterDefinition(1151, "Aux Watts"),
    RegisterDefinition(1153, "Total Watts"),
    RegisterDefinition(1165, "VS Pump Watts"),
    # =========================================================================
    # VARIABLE SPEED DRIVE (regs 3001-3002)
    # =========================================================================
    RegisterDefinition(3001, "VS Drive Compressor Speed"),
    RegisterDefinition(3002, "Manual Operation"),
    # =========================================================================
    # THERMOSTAT WRITES (regs 12606-12623)
    # =========================================================================
    RegisterDefinition(12606, "Heating Mode (write)", enum(HEATING_MODES)),
    RegisterDefinition(12619, "Heating Setpoint (write)", TENTHS),
    RegisterDefinition(12620, "Cooling Setpoint (write)", TENTHS),
    RegisterDefinition(12621, "Fan Mode (write)", enum(FAN_MODES)),
    RegisterDefinition(12622, "Fan Intermittent On (write)"),
    RegisterDefinition(12623, "Fan Intermittent Off (write)"),
    # =========================================================================
    # OUTDOOR
    # =========================================================================
    RegisterDefinition(31003, "Outdoor Temp", SIGNED_TENTHS),
    # =========================================================================
    # IZ2 ZONES
    # =========================================================================
    *(
        definition
        for zone in range(1, IZ2_MAX_ZONES + 1)
        for definition in _iz2_zone_registers(zone)
    ),
)


# =============================================================================
# SUPPORTED ADDRESS RANGES (inclusive)
# =============================================================================
# Ranges the controller documents as readable. Individual firmware revisions
# may still reject some addresses inside them.

REGISTER_RANGES: tuple[tuple[int, int], ...] = (
    (0, 155),
    (170, 253),
    (260, 260),
    (280, 288),
    (300, 301),
    (320, 326),
    (340, 348),
    (360, 368),
    (400, 419),
    (440, 516),
    (550, 573),
    (600, 749),
    (800, 913),
    (1090, 1165),
    (1200, 1263),
    (2000, 2026),
    (2100, 2129),
    (2800, 2849),
    (2900, 2915),
    (2950, 2959),
    (3000, 3003),
    (3100, 3105),
    (3108, 3115),
    (3118, 3119),
    (3200, 3253),
    (3300, 3332),
    (3400, 3424),
    (3500, 3524),
    (3600, 3609),
    (3700, 3729),
    (3800, 3849),
    (3900, 3917),
    (12000, 12099),
    (12100, 12199),
    (12200, 12299),
    (12300, 12399),
    (12400, 12499),
    (12500, 12599),
    (12600, 12699),
    (12700, 12799),
    (12800, 12899),
    (12900, 12999),
    (13000, 13099),
    (21100, 21136),
    (21200, 21265),
    (21300, 21354),
    (21400, 21414),
    (31000, 31034),
    (31100, 31129),
    (31200, 31237),
    (31300, 31405),
)


# =============================================================================
# LOOKUP INDEXES (built once at import time)
# =============================================================================

# address → RegisterDefinition
BY_ADDRESS: dict[int, RegisterDefinition] = {r.address: r for r in ABC_REGISTERS}

# name → RegisterDefinition
BY_NAME: dict[str, RegisterDefinition] = {r.name: r for r in ABC_REGISTERS}


def known_addresses() -> tuple[int, ...]:
    """Every address covered by a register definition, ascending."""
    return tuple(sorted({a for r in ABC_REGISTERS for a in r.span}))


def is_valid_address(address: int) -> bool:
    """Return True if ``address`` lies in a documented supported range."""
    return any(start <= address <= end for start, end in REGISTER_RANGES)
