"""Shared fixtures for integration tests against a live controller."""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
from dotenv import load_dotenv

from pyaurora import AuroraABC, create_transport_from_uri
from pyaurora.transports import BaseTransport

# Load .env file before running tests
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

# Connection URI from environment, e.g. tcp://192.168.1.100:502 or /dev/ttyUSB0
AURORA_URI = os.getenv("AURORA_URI")
AURORA_TIMEOUT = float(os.getenv("AURORA_TIMEOUT", "15"))


@pytest.fixture(scope="function")
async def transport() -> AsyncGenerator[BaseTransport, None]:
    """Connected transport to the controller named by AURORA_URI."""
    if not AURORA_URI:
        pytest.skip("AURORA_URI not set")
    transport = create_transport_from_uri(AURORA_URI, timeout=AURORA_TIMEOUT)
    async with transport:
        yield transport


@pytest.fixture(scope="function")
async def abc(transport: BaseTransport) -> AuroraABC:
    """Classified session on the live controller."""
    return await AuroraABC.connect(transport)
