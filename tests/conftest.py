"""Shared fixtures for ConductIP tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator
import copy
from unittest.mock import AsyncMock, MagicMock

import pytest

from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.conductip.const import DOMAIN
from custom_components.conductip.hub import ConductIPHub
from custom_components.conductip.models import ConductIPConfig

from .const import ACTIVE_SALVOS, HOST, PASSWORD, ROOMS_INFO, USERNAME


@pytest.fixture(autouse=True)
def auto_enable_custom_integrations(enable_custom_integrations):
    """Enable custom integrations for all tests."""
    yield


@pytest.fixture
def config() -> ConductIPConfig:
    """Return a complete device configuration."""
    return ConductIPConfig(host=HOST, username=USERNAME, password=PASSWORD)


@pytest.fixture
def rooms_info() -> list[dict]:
    return copy.deepcopy(ROOMS_INFO)


@pytest.fixture
def listener() -> MagicMock:
    """Return a fake host collaborator."""
    return MagicMock()


@pytest.fixture
def mock_client(config) -> MagicMock:
    """Return a client stand-in whose endpoints are AsyncMocks."""
    client = MagicMock()
    client.config = config
    client.async_get_rooms = AsyncMock(return_value=copy.deepcopy(ROOMS_INFO))
    client.async_get_active_salvos = AsyncMock(
        return_value=copy.deepcopy(ACTIVE_SALVOS)
    )
    return client


@pytest.fixture
def config_entry() -> MockConfigEntry:
    return MockConfigEntry(domain=DOMAIN, entry_id="entry_1", title=HOST)


@pytest.fixture
async def hub(hass, config, config_entry) -> AsyncGenerator[ConductIPHub]:
    """Return a hub whose snapshot holds ROOMS_INFO and ACTIVE_SALVOS."""
    hub = ConductIPHub(hass, config_entry, config, session=MagicMock())
    hub.client.async_get_rooms = AsyncMock(return_value=copy.deepcopy(ROOMS_INFO))
    hub.client.async_get_active_salvos = AsyncMock(
        return_value=copy.deepcopy(ACTIVE_SALVOS)
    )
    hub.client.async_run_salvo = AsyncMock(return_value=True)
    await hub.coordinator.async_refresh()
    yield hub
    await hub.async_shutdown()
