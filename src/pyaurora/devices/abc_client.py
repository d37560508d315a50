"""Aurora Base Controller session.

:class:`AuroraABC` owns one transport and all session state: the equipment
classification made at connect time, the component variants selected from
it, and the decoded snapshot of the latest refresh. Nothing is global; two
sessions on two transports are fully independent.

All operations on one session must be serialized by the caller. A refresh is
several sequential round trips and must not interleave with a write.

Example:
    transport = create_transport_from_uri("tcp://192.168.1.100:502")
    async with transport:
        abc = await AuroraABC.connect(transport)
        await abc.refresh()
        print(abc.mode, abc.entering_air_temperature)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any, Literal

from pyaurora.exceptions import ValidationError
from pyaurora.planner import Query, Span, parse_query, to_range
from pyaurora.reader import read_query
from pyaurora.registers.codec import UINT16_MAX, decode_registers, to_unsigned
from pyaurora.transports.protocol import HoldingRegisterTransport

from .blower import Blower
from .components import ComponentPresence, classify_blower, classify_pump, select_zones
from .pump import Pump
from .state import FAULT_HISTORY, REFRESH_REGISTERS, AuroraState, OperatingMode, resolve_state
from .zones import IZ2Zone, Thermostat

_LOGGER = logging.getLogger(__name__)

# =============================================================================
# REGISTERS
# =============================================================================

REG_PROGRAM = 88
REG_SERIAL_NUMBER = 105
REG_BLOWER_TYPE = 404
REG_ENERGY_MONITOR = 412
REG_PUMP_TYPE = 413
REG_DHW_TEMPERATURE = 1114

# Read once at connect: program, serial number, equipment types, DHW sensor
CONNECT_REGISTERS: tuple[Span, ...] = (
    (88, 91),
    (105, 109),
    REG_BLOWER_TYPE,
    REG_ENERGY_MONITOR,
    REG_PUMP_TYPE,
    REG_DHW_TEMPERATURE,
)

DHW_REGISTERS = (400, 401)
VS_DRIVE_REGISTERS = (362, 3001)

REG_CLEAR_FAULTS = 47
REG_LINE_VOLTAGE = 112
REG_VS_PUMP_MIN = 321
REG_VS_PUMP_MAX = 322
REG_VS_PUMP_MANUAL = 323
REG_BLOWER_ONLY_SPEED = 340
REG_COOLING_AIRFLOW_ADJUSTMENT = 346
REG_AUX_HEAT_SPEED = 347
REG_DHW_ENABLED = 400
REG_DHW_SETPOINT = 401
REG_LOOP_PRESSURE_TRIP = 419
REG_MANUAL_OPERATION = 3002

CLEAR_FAULTS_VALUE = 0x5555
ENERGY_MONITOR_FULL = 2
VS_DRIVE_PROGRAM = "ABCVSP"

# Manual operation register layout
MANUAL_OFF = 0x7FFF
MANUAL_COOLING = 0x100
MANUAL_AUX_HEAT = 0x200
MANUAL_BLOWER_WITH_COMPRESSOR = 0xF0
PUMP_WITH_COMPRESSOR = 0x7FFF

WITH_COMPRESSOR = "with_compressor"


class AuroraABC:
    """Session with one Aurora Base Controller.

    Create with :meth:`connect`, which classifies the equipment. Call
    :meth:`refresh` to read current values; the attributes below reflect the
    latest refresh.
    """

    def __init__(
        self,
        transport: HoldingRegisterTransport,
        *,
        max_registers: int | None = None,
    ) -> None:
        """Initialize the session without touching the controller.

        Prefer :meth:`connect`.

        Args:
            transport: Connected transport
            max_registers: Per-request limit (default: the transport's own)
        """
        self._transport = transport
        self._max_registers = max_registers
        self.presence = ComponentPresence(transport)

        self.program: str | None = None
        self.serial_number: str | None = None
        self._energy_monitor: int | None = None
        self._initial_dhw_temperature: float | None = None

        self.blower: Blower | None = None
        self.pump: Pump | None = None
        self.zones: list[Thermostat] | list[IZ2Zone] = []

        self._snapshot: dict[int, Any] = {}
        self._state: AuroraState | None = None

    @classmethod
    async def connect(
        cls,
        transport: HoldingRegisterTransport,
        *,
        max_registers: int | None = None,
    ) -> AuroraABC:
        """Start a session: identify the unit and select component variants.

        Args:
            transport: Connected transport
            max_registers: Per-request limit (default: the transport's own)

        Returns:
            Classified session, not yet refreshed

        Raises:
            InvalidAddressError: If the controller rejects an identification register
            TransportTimeoutError: If the controller does not answer
        """
        client = cls(transport, max_registers=max_registers)
        await client._classify()
        return client

    async def _classify(self) -> None:
        raw = await self.read_raw(CONNECT_REGISTERS)
        registers = decode_registers(raw)

        self.program = registers[REG_PROGRAM]
        self.serial_number = registers[REG_SERIAL_NUMBER]
        self._energy_monitor = raw[REG_ENERGY_MONITOR]
        self._initial_dhw_temperature = registers[REG_DHW_TEMPERATURE]

        iz2 = await self.presence.is_installed("iz2")
        self.blower = classify_blower(
            self, raw[REG_BLOWER_TYPE], registers[REG_BLOWER_TYPE], iz2=iz2
        )
        self.pump = classify_pump(self, raw[REG_PUMP_TYPE], registers[REG_PUMP_TYPE])
        self.zones = await select_zones(self)

        _LOGGER.info(
            "Connected to ABC %s (program %s): %s, %s, %d zone(s)",
            self.serial_number,
            self.program,
            type(self.blower).__name__,
            type(self.pump).__name__,
            len(self.zones),
        )

    # ------------------------------------------------------------------
    # Register access
    # ------------------------------------------------------------------

    async def read_raw(self, spans: Iterable[Span]) -> dict[int, int]:
        """Read addresses and ranges as an explicit query.

        Returns:
            Address → raw value for every requested address

        Raises:
            InvalidAddressError: If the controller rejects any address
        """
        query = Query(spans=tuple(to_range(s) for s in spans))
        return await read_query(self._transport, query, self._max_registers)

    async def query_registers(self, text: str) -> dict[int, Any]:
        """Read and decode a register query such as ``"6,19..20,25"`` or ``"known"``.

        Symbolic queries (``known``, ``valid``) skip registers the
        controller does not implement; explicit addresses must all exist.

        Returns:
            Address → decoded value

        Raises:
            ValidationError: If the query is malformed
            InvalidAddressError: If an explicit address is rejected
            DecodeError: If a register cannot be decoded
        """
        query = parse_query(text)
        raw = await read_query(self._transport, query, self._max_registers)
        return decode_registers(raw)

    async def write_register(self, address: int, value: int) -> None:
        """Write one raw holding register value.

        Raises:
            ValidationError: If the value does not fit a register
        """
        if not 0 <= value <= UINT16_MAX:
            raise ValidationError(f"Register value must be 0-{UINT16_MAX}, got {value}")
        _LOGGER.debug("Writing register %d = %d", address, value)
        await self._transport.write_holding_register(address, value)

    # ------------------------------------------------------------------
    # Refresh
    # ------------------------------------------------------------------

    def registers_to_read(self) -> list[Span]:
        """Every register a refresh reads (fault history excluded)."""
        registers: list[Span] = list(REFRESH_REGISTERS)
        if self.has_dhw:
            registers.append(DHW_REGISTERS)
        if self.vs_drive:
            registers.extend(VS_DRIVE_REGISTERS)
        for component in self.components:
            registers.extend(component.registers_to_read())
        return registers

    async def refresh(self) -> None:
        """Read current values and replace the snapshot.

        Raises:
            InvalidAddressError: If the controller rejects a register
            TransportTimeoutError: If the controller does not answer
            DecodeError: If a register cannot be decoded
        """
        fault_start, fault_end = FAULT_HISTORY
        faults_raw = await self.read_raw([FAULT_HISTORY])
        faults = [faults_raw[a] for a in range(fault_start, fault_end + 1)]

        raw = await self.read_raw(self.registers_to_read())
        snapshot = decode_registers(raw)

        self._snapshot = snapshot
        self._state = resolve_state(snapshot, self.vs_drive, faults)
        for component in self.components:
            component.refresh(snapshot)

        _LOGGER.debug("Refreshed %d registers, mode %s", len(snapshot), self._state.mode)

    @property
    def components(self) -> list[Any]:
        """Selected blower, pump and zones."""
        return [c for c in (self.blower, self.pump) if c is not None] + list(self.zones)

    @property
    def snapshot(self) -> dict[int, Any]:
        """Decoded registers of the latest refresh."""
        return dict(self._snapshot)

    @property
    def state(self) -> AuroraState | None:
        """Derived state of the latest refresh, or None before the first one."""
        return self._state

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @property
    def energy_monitoring(self) -> bool:
        """Whether the unit reports per-load watts."""
        return self._energy_monitor == ENERGY_MONITOR_FULL

    @property
    def vs_drive(self) -> bool:
        """Whether the unit has a variable speed compressor drive."""
        return self.program == VS_DRIVE_PROGRAM

    @property
    def has_dhw(self) -> bool:
        """Whether a domestic hot water sensor is fitted."""
        temperature = self.dhw_water_temperature
        return temperature is not None and -999 <= temperature <= 999

    # ------------------------------------------------------------------
    # Current values
    # ------------------------------------------------------------------

    @property
    def mode(self) -> OperatingMode | None:
        return self._state.mode if self._state else None

    @property
    def compressor_speed(self) -> int | None:
        return self._state.compressor_speed if self._state else None

    @property
    def locked_out(self) -> bool | None:
        return self._state.locked_out if self._state else None

    @property
    def fault_code(self) -> int | None:
        return self._state.fault_code if self._state else None

    @property
    def derated(self) -> bool | None:
        return self._state.derated if self._state else None

    @property
    def safe_mode(self) -> bool | None:
        return self._state.safe_mode if self._state else None

    @property
    def faults(self) -> tuple[int, ...]:
        """Raw fault history registers (601-699)."""
        return self._state.faults if self._state else ()

    @property
    def fp1(self) -> float | None:
        return self._snapshot.get(19)

    @property
    def fp2(self) -> float | None:
        return self._snapshot.get(20)

    @property
    def entering_air_temperature(self) -> float | None:
        return self._snapshot.get(740)

    @property
    def relative_humidity(self) -> int | None:
        return self._snapshot.get(741)

    @property
    def leaving_air_temperature(self) -> float | None:
        return self._snapshot.get(900)

    @property
    def leaving_water_temperature(self) -> float | None:
        return self._snapshot.get(1110)

    @property
    def entering_water_temperature(self) -> float | None:
        return self._snapshot.get(1111)

    @property
    def dhw_water_temperature(self) -> float | None:
        return self._snapshot.get(REG_DHW_TEMPERATURE, self._initial_dhw_temperature)

    @property
    def dhw_enabled(self) -> bool | None:
        return self._snapshot.get(REG_DHW_ENABLED)

    @property
    def dhw_setpoint(self) -> float | None:
        return self._snapshot.get(REG_DHW_SETPOINT)

    @property
    def outdoor_temperature(self) -> float | None:
        return self._snapshot.get(31003)

    @property
    def compressor_watts(self) -> int | None:
        return self._snapshot.get(1147)

    @property
    def aux_heat_watts(self) -> int | None:
        return self._snapshot.get(1151)

    @property
    def total_watts(self) -> int | None:
        return self._snapshot.get(1153)

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    async def set_blower_only_ecm_speed(self, value: int) -> None:
        """Set the ECM blower speed used when only the fan runs (1-12)."""
        if not 1 <= value <= 12:
            raise ValidationError(f"Blower only ECM speed must be between 1 and 12, got {value}")
        await self.write_register(REG_BLOWER_ONLY_SPEED, value)

    async def set_aux_heat_ecm_speed(self, value: int) -> None:
        """Set the ECM blower speed used with auxiliary heat (1-12)."""
        if not 1 <= value <= 12:
            raise ValidationError(f"Aux heat ECM speed must be between 1 and 12, got {value}")
        await self.write_register(REG_AUX_HEAT_SPEED, value)

    async def set_cooling_airflow_adjustment(self, value: int) -> None:
        """Set the cooling airflow adjustment (signed 16-bit)."""
        if not -0x8000 <= value <= 0x7FFF:
            raise ValidationError(
                f"Cooling airflow adjustment must be between -32768 and 32767, got {value}"
            )
        await self.write_register(REG_COOLING_AIRFLOW_ADJUSTMENT, to_unsigned(value))

    async def set_dhw_enabled(self, enabled: bool) -> None:
        """Enable or disable domestic hot water generation."""
        await self.write_register(REG_DHW_ENABLED, 1 if enabled else 0)

    async def set_dhw_setpoint(self, value: float) -> None:
        """Set the domestic hot water setpoint in °F (100-140)."""
        if not 100 <= value <= 140:
            raise ValidationError(f"DHW setpoint must be between 100 and 140, got {value}")
        await self.write_register(REG_DHW_SETPOINT, round(value * 10))

    async def set_loop_pressure_trip(self, value: float) -> None:
        """Set the loop pressure trip point in psi (0-6553.5)."""
        if not 0 <= value <= UINT16_MAX / 10:
            raise ValidationError(f"Loop pressure trip must be between 0 and 6553.5, got {value}")
        await self.write_register(REG_LOOP_PRESSURE_TRIP, round(value * 10))

    async def set_vs_pump_min(self, value: int) -> None:
        """Set the variable speed pump minimum speed (1-100%)."""
        if not 1 <= value <= 100:
            raise ValidationError(f"VS pump min must be between 1 and 100, got {value}")
        await self.write_register(REG_VS_PUMP_MIN, value)

    async def set_vs_pump_max(self, value: int) -> None:
        """Set the variable speed pump maximum speed (1-100%)."""
        if not 1 <= value <= 100:
            raise ValidationError(f"VS pump max must be between 1 and 100, got {value}")
        await self.write_register(REG_VS_PUMP_MAX, value)

    async def set_line_voltage(self, value: int) -> None:
        """Set the configured line voltage (90-635 V)."""
        if not 90 <= value <= 635:
            raise ValidationError(f"Line voltage must be between 90 and 635, got {value}")
        await self.write_register(REG_LINE_VOLTAGE, value)

    async def clear_fault_history(self) -> None:
        """Clear the controller's fault history."""
        await self.write_register(REG_CLEAR_FAULTS, CLEAR_FAULTS_VALUE)

    async def manual_operation(
        self,
        mode: Literal["off", "heating", "cooling"] = "off",
        compressor_speed: int = 0,
        blower_speed: int | Literal["with_compressor"] = WITH_COMPRESSOR,
        pump_speed: int | Literal["with_compressor"] = WITH_COMPRESSOR,
        aux_heat: bool = False,
    ) -> None:
        """Override the controller and run the equipment directly.

        ``mode="off"`` returns control to the thermostat.

        Args:
            mode: "off", "heating" or "cooling"
            compressor_speed: 0-12
            blower_speed: "with_compressor" or 0-12
            pump_speed: "with_compressor" or 0-100 (%)
            aux_heat: Run auxiliary heat

        Raises:
            ValidationError: If any argument is out of range; nothing is written
        """
        if mode not in ("off", "heating", "cooling"):
            raise ValidationError(f"mode must be off, heating or cooling, got {mode!r}")
        if not 0 <= compressor_speed <= 12:
            raise ValidationError(
                f"compressor speed must be between 0 and 12, got {compressor_speed}"
            )
        if blower_speed != WITH_COMPRESSOR and not (
            isinstance(blower_speed, int) and 0 <= blower_speed <= 12
        ):
            raise ValidationError(
                f"blower speed must be {WITH_COMPRESSOR!r} or between 0 and 12, "
                f"got {blower_speed!r}"
            )
        if pump_speed != WITH_COMPRESSOR and not (
            isinstance(pump_speed, int) and 0 <= pump_speed <= 100
        ):
            raise ValidationError(
                f"pump speed must be {WITH_COMPRESSOR!r} or between 0 and 100, got {pump_speed!r}"
            )

        value = MANUAL_OFF if mode == "off" else compressor_speed
        if mode == "cooling":
            value |= MANUAL_COOLING
        if blower_speed == WITH_COMPRESSOR:
            value |= MANUAL_BLOWER_WITH_COMPRESSOR
        else:
            value |= int(blower_speed) << 4
        if aux_heat:
            value |= MANUAL_AUX_HEAT

        await self.write_register(REG_MANUAL_OPERATION, value)
        await self.write_register(
            REG_VS_PUMP_MANUAL,
            PUMP_WITH_COMPRESSOR if pump_speed == WITH_COMPRESSOR else int(pump_speed),
        )

    # ------------------------------------------------------------------
    # Optional components
    # ------------------------------------------------------------------

    async def is_installed(self, component: str) -> bool:
        """Whether an optional component (thermostat, axb, iz2, aoc, moc, eev2) is fitted."""
        return await self.presence.is_installed(component)

    async def add_component(self, component: str) -> None:
        """Register an optional component with the controller."""
        await self.presence.add(component)

    async def remove_component(self, component: str) -> None:
        """Unregister an optional component from the controller."""
        await self.presence.remove(component)

    def __repr__(self) -> str:
        return f"<AuroraABC serial={self.serial_number!r} program={self.program!r}>"
