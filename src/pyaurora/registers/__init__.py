"""Canonical ABC register map and decoding.

- rules: DecodeRule model and rule factories
- definitions: register definitions, flag/enumeration tables, supported ranges
- codec: pure decoding of raw register values
"""

from pyaurora.registers.codec import (
    decode_registers,
    decode_string,
    decode_value,
    rule_for,
    to_signed,
    to_unsigned,
)
from pyaurora.registers.definitions import (
    ABC_REGISTERS,
    AXB_OUTPUTS,
    BLOWER_TYPES,
    BY_ADDRESS,
    BY_NAME,
    COMPONENT_STATUS,
    ENERGY_MONITOR_TYPES,
    FAN_MODES,
    HEATING_MODES,
    PUMP_TYPES,
    REGISTER_RANGES,
    STATUS_FLAGS,
    SYSTEM_INPUTS,
    SYSTEM_OUTPUTS,
    RegisterDefinition,
    is_valid_address,
    known_addresses,
)
from pyaurora.registers.rules import RAW, DecodeRule, RuleKind

__all__ = [
    # Rules
    "RAW",
    "DecodeRule",
    "RuleKind",
    # Definitions
    "ABC_REGISTERS",
    "BY_ADDRESS",
    "BY_NAME",
    "REGISTER_RANGES",
    "RegisterDefinition",
    "is_valid_address",
    "known_addresses",
    # Tables
    "AXB_OUTPUTS",
    "BLOWER_TYPES",
    "COMPONENT_STATUS",
    "ENERGY_MONITOR_TYPES",
    "FAN_MODES",
    "HEATING_MODES",
    "PUMP_TYPES",
    "STATUS_FLAGS",
    "SYSTEM_INPUTS",
    "SYSTEM_OUTPUTS",
    # Codec
    "decode_registers",
    "decode_string",
    "decode_value",
    "rule_for",
    "to_signed",
    "to_unsigned",
]
