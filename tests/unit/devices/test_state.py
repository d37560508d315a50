"""Tests for derived heat pump state."""

from __future__ import annotations

from typing import Any

import pytest

from pyaurora.devices.state import (
    AuroraState,
    OperatingMode,
    is_derated,
    is_safe_mode,
    metered_watts,
    output_active,
    resolve_compressor_speed,
    resolve_operating_mode,
    resolve_state,
    split_fault_register,
)


def _snapshot(*outputs: str, dehumidify: bool = False, waiting: int = 0) -> dict[int, Any]:
    return {30: frozenset(outputs), 362: dehumidify, 6: waiting}


class TestOperatingMode:
    """Tests for resolve_operating_mode."""

    @pytest.mark.parametrize(
        "snapshot,expected",
        [
            (_snapshot("lockout", "cc", "rv"), OperatingMode.LOCKOUT),
            (_snapshot("lockout", "cc"), OperatingMode.LOCKOUT),
            (_snapshot("cc", dehumidify=True), OperatingMode.DEHUMIDIFY),
            (_snapshot("cc", "rv"), OperatingMode.COOLING),
            (_snapshot("cc2", "rv"), OperatingMode.COOLING),
            (_snapshot("cc"), OperatingMode.HEATING),
            (_snapshot("cc", "cc2", "eh1"), OperatingMode.HEATING),
            (_snapshot("eh2", "rv"), OperatingMode.EH2),
            (_snapshot("eh2", "eh1"), OperatingMode.EMERGENCY),
            (_snapshot("eh1", "rv"), OperatingMode.EH1),
            (_snapshot("eh1"), OperatingMode.EMERGENCY),
            (_snapshot("blower"), OperatingMode.BLOWER),
            (_snapshot("blower", waiting=60), OperatingMode.BLOWER),
            (_snapshot(waiting=60), OperatingMode.WAITING),
            (_snapshot(), OperatingMode.STANDBY),
            (_snapshot("rv", "alarm"), OperatingMode.STANDBY),
        ],
    )
    def test_decision_order(self, snapshot: dict[int, Any], expected: OperatingMode) -> None:
        assert resolve_operating_mode(snapshot) == expected

    def test_lockout_outranks_compressor(self) -> None:
        """Test lockout wins even with both compressor contactors energized."""
        mode = resolve_operating_mode(_snapshot("lockout", "cc", "cc2"))
        assert mode == OperatingMode.LOCKOUT
        assert mode not in (OperatingMode.COOLING, OperatingMode.HEATING)

    def test_empty_snapshot(self) -> None:
        assert resolve_operating_mode({}) == OperatingMode.STANDBY

    def test_string_values(self) -> None:
        assert OperatingMode.EH2 == "eh2"


class TestCompressorSpeed:
    """Tests for resolve_compressor_speed."""

    def test_variable_speed_reads_drive(self) -> None:
        snapshot = {**_snapshot("cc"), 3001: 9}
        assert resolve_compressor_speed(snapshot, variable_speed=True) == 9

    @pytest.mark.parametrize(
        "outputs,expected",
        [(("cc", "cc2"), 2), (("cc2",), 2), (("cc",), 1), ((), 0)],
    )
    def test_fixed_speed_stage(self, outputs: tuple[str, ...], expected: int) -> None:
        snapshot = {**_snapshot(*outputs), 3001: 9}
        assert resolve_compressor_speed(snapshot, variable_speed=False) == expected


class TestFaults:
    """Tests for fault register helpers."""

    def test_split_locked_out(self) -> None:
        assert split_fault_register(0x8000 | 47) == (True, 47)

    def test_split_not_locked_out(self) -> None:
        assert split_fault_register(5) == (False, 5)

    @pytest.mark.parametrize("code,expected", [(40, False), (41, True), (46, True), (47, False)])
    def test_derated(self, code: int, expected: bool) -> None:
        assert is_derated(code) is expected

    @pytest.mark.parametrize("code", [47, 48, 49, 72, 74])
    def test_safe_mode(self, code: int) -> None:
        assert is_safe_mode(code) is True

    @pytest.mark.parametrize("code", [0, 46, 50, 73])
    def test_not_safe_mode(self, code: int) -> None:
        assert is_safe_mode(code) is False


class TestResolveState:
    """Tests for resolve_state."""

    def test_full_state(self) -> None:
        snapshot = {**_snapshot("cc", "rv"), 25: 0x8000 | 42, 3001: 4}
        state = resolve_state(snapshot, variable_speed=True, faults=[5, 41])

        assert state == AuroraState(
            mode=OperatingMode.COOLING,
            compressor_speed=4,
            locked_out=True,
            fault_code=42,
            derated=True,
            safe_mode=False,
            faults=(5, 41),
        )

    def test_pure_function_of_snapshot(self) -> None:
        """Test equal snapshots always resolve to equal states."""
        snapshot = {**_snapshot("eh1"), 25: 72}
        assert resolve_state(snapshot, False) == resolve_state(dict(snapshot), False)
        assert resolve_state(snapshot, False).safe_mode is True


class TestComponentHelpers:
    """Tests for the helpers shared by the component variants."""

    def test_output_active(self) -> None:
        snapshot = _snapshot("blower")
        assert output_active(snapshot, 30, "blower") is True
        assert output_active(snapshot, 30, "cc") is False
        assert output_active({}, 1104, "loop_pump") is False

    def test_metered_watts(self) -> None:
        snapshot = {1149: 210}
        assert metered_watts(snapshot, 1149, energy_monitoring=True) == 210
        assert metered_watts(snapshot, 1149, energy_monitoring=False) is None
        assert metered_watts({}, 1149, energy_monitoring=True) is None
