"""Tests for the ConductIP integration __init__ (setup / unload / service)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.exceptions import ServiceValidationError
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.conductip import (
    async_setup,
    async_setup_entry,
    async_unload_entry,
)
from custom_components.conductip.const import (
    CONF_ALLOW_UNAUTHORIZED,
    DOMAIN,
    SERVICE_RUN_SALVO,
)

from .const import HOST, PASSWORD, USERNAME

HUB_PATCH = "custom_components.conductip.ConductIPHub"


def _mock_config_entry(hass: HomeAssistant, **options) -> MockConfigEntry:
    """Return a MockConfigEntry for one device."""
    entry = MockConfigEntry(
        domain=DOMAIN,
        title=f"ConductIP ({HOST})",
        data={
            CONF_HOST: HOST,
            CONF_USERNAME: USERNAME,
            CONF_PASSWORD: PASSWORD,
            CONF_ALLOW_UNAUTHORIZED: False,
        },
        options=options,
        unique_id=HOST,
    )
    entry.add_to_hass(hass)
    return entry


def _mock_hub(salvo=None) -> MagicMock:
    hub = MagicMock()
    hub.async_setup = AsyncMock()
    hub.async_shutdown = AsyncMock()
    hub.async_run_salvo = AsyncMock(return_value=True)
    hub.poller.get_salvo = MagicMock(return_value=salvo)
    return hub


async def test_async_setup_registers_service(hass: HomeAssistant) -> None:
    """Test that async_setup returns True and registers run_salvo."""
    assert await async_setup(hass, {}) is True
    assert hass.services.has_service(DOMAIN, SERVICE_RUN_SALVO)


async def test_setup_entry_success(hass: HomeAssistant) -> None:
    """Test successful setup of a device config entry."""
    entry = _mock_config_entry(hass)

    with (
        patch(HUB_PATCH) as mock_hub_cls,
        patch(
            "homeassistant.config_entries.ConfigEntries.async_forward_entry_setups",
        ) as mock_forward,
    ):
        mock_hub = _mock_hub()
        mock_hub_cls.return_value = mock_hub

        result = await async_setup_entry(hass, entry)

    assert result is True
    assert hass.data[DOMAIN][entry.entry_id] is mock_hub
    mock_hub.async_setup.assert_awaited_once()
    mock_forward.assert_awaited_once()
    assert mock_hub_cls.call_args.args[1] is entry
    config = mock_hub_cls.call_args.args[2]
    assert config.host == HOST
    assert config.allow_unauthorized is False


async def test_setup_entry_options_override(hass: HomeAssistant) -> None:
    """Test that the options flow value wins over the initial data."""
    entry = _mock_config_entry(hass, **{CONF_ALLOW_UNAUTHORIZED: True})

    with (
        patch(HUB_PATCH) as mock_hub_cls,
        patch(
            "homeassistant.config_entries.ConfigEntries.async_forward_entry_setups",
        ),
    ):
        mock_hub_cls.return_value = _mock_hub()
        await async_setup_entry(hass, entry)

    assert mock_hub_cls.call_args.args[2].allow_unauthorized is True


async def test_unload_entry(hass: HomeAssistant) -> None:
    """Test that unload shuts the hub down."""
    entry = _mock_config_entry(hass)
    mock_hub = _mock_hub()

    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = mock_hub

    with patch.object(
        hass.config_entries,
        "async_unload_platforms",
        return_value=True,
    ):
        result = await async_unload_entry(hass, entry)

    assert result is True
    mock_hub.async_shutdown.assert_awaited_once()
    assert entry.entry_id not in hass.data[DOMAIN]


async def test_run_salvo_service(hass: HomeAssistant) -> None:
    """Test that the service forwards to the hub owning the salvo."""
    await async_setup(hass, {})
    other, owner = _mock_hub(), _mock_hub(salvo=MagicMock())
    hass.data[DOMAIN] = {"entry_a": other, "entry_b": owner}

    await hass.services.async_call(
        DOMAIN,
        SERVICE_RUN_SALVO,
        {"salvo_id": "salvo-1", "panel_id": "panel-1"},
        blocking=True,
    )

    owner.async_run_salvo.assert_awaited_once_with("salvo-1", "panel-1")
    other.async_run_salvo.assert_not_awaited()


async def test_run_salvo_service_explicit_entry(hass: HomeAssistant) -> None:
    """Test that config_entry_id picks the hub."""
    await async_setup(hass, {})
    first, second = _mock_hub(), _mock_hub()
    hass.data[DOMAIN] = {"entry_a": first, "entry_b": second}

    await hass.services.async_call(
        DOMAIN,
        SERVICE_RUN_SALVO,
        {"salvo_id": "salvo-9", "config_entry_id": "entry_b"},
        blocking=True,
    )

    second.async_run_salvo.assert_awaited_once_with("salvo-9", None)


async def test_run_salvo_service_without_device(hass: HomeAssistant) -> None:
    """Test that the service rejects calls when nothing is configured."""
    await async_setup(hass, {})

    with pytest.raises(ServiceValidationError):
        await hass.services.async_call(
            DOMAIN, SERVICE_RUN_SALVO, {"salvo_id": "salvo-1"}, blocking=True
        )
