"""Pytest configuration and fixtures for pyaurora tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from pyaurora.transports.mock import MockTransport

# Captured register dumps
SAMPLES_DIR = Path(__file__).parent / "samples"


def load_sample(filename: str) -> dict[int, int]:
    """Load a sample register dump (address → raw value)."""
    file_path = SAMPLES_DIR / filename
    with open(file_path) as f:
        data: dict[str, int] = json.load(f)
    return {int(address): value for address, value in data.items()}


@pytest.fixture
def abc_registers() -> dict[int, int]:
    """Register dump of a variable speed unit with ECM blower and VS pump."""
    return load_sample("abc_registers.json")


@pytest.fixture
def mock_transport(abc_registers: dict[int, int]) -> MockTransport:
    """Mock transport serving the sample register dump."""
    return MockTransport(abc_registers)
