from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from linkup.realtime.registry import ConnectionRegistry
from linkup.realtime.relay import ChatRelay


@pytest.fixture
def registry() -> ConnectionRegistry:
    return ConnectionRegistry()


@pytest.fixture
def emit() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def relay(registry: ConnectionRegistry, emit: AsyncMock) -> ChatRelay:
    return ChatRelay(registry, emit)
