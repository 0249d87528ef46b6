"""Support for Matrox ConductIP salvo routing."""

from __future__ import annotations

import logging

import voluptuous as vol

from homeassistant import config_entries, core
from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME, Platform
from homeassistant.exceptions import ServiceValidationError
from homeassistant.helpers import config_validation as cv
from homeassistant.helpers.aiohttp_client import async_get_clientsession
from homeassistant.helpers.config_validation import config_entry_only_config_schema

from .const import (
    ATTR_PANEL_ID,
    ATTR_SALVO_ID,
    CONF_ALLOW_UNAUTHORIZED,
    DOMAIN,
    SERVICE_RUN_SALVO,
)
from .hub import ConductIPHub
from .models import ConductIPConfig

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = config_entry_only_config_schema(DOMAIN)

PLATFORMS = [Platform.BINARY_SENSOR, Platform.BUTTON, Platform.SENSOR]

ATTR_CONFIG_ENTRY_ID = "config_entry_id"

RUN_SALVO_SCHEMA = vol.Schema(
    {
        vol.Required(ATTR_SALVO_ID): cv.string,
        vol.Optional(ATTR_PANEL_ID): cv.string,
        vol.Optional(ATTR_CONFIG_ENTRY_ID): cv.string,
    }
)


def _config_from_entry(entry: config_entries.ConfigEntry) -> ConductIPConfig:
    return ConductIPConfig(
        host=entry.data.get(CONF_HOST),
        username=entry.data.get(CONF_USERNAME),
        password=entry.data.get(CONF_PASSWORD),
        allow_unauthorized=entry.options.get(
            CONF_ALLOW_UNAUTHORIZED,
            entry.data.get(CONF_ALLOW_UNAUTHORIZED, False),
        ),
    )


def _resolve_hub(
    hass: core.HomeAssistant, salvo_id: str, entry_id: str | None
) -> ConductIPHub:
    hubs: dict[str, ConductIPHub] = hass.data.get(DOMAIN, {})
    if entry_id is not None:
        if entry_id not in hubs:
            raise ServiceValidationError(
                f"No ConductIP device for config entry {entry_id}"
            )
        return hubs[entry_id]
    if not hubs:
        raise ServiceValidationError("No ConductIP device is configured")
    return next(
        (hub for hub in hubs.values() if hub.poller.get_salvo(salvo_id)),
        next(iter(hubs.values())),
    )


async def async_setup(hass: core.HomeAssistant, config: dict) -> bool:
    """Set up the ConductIP component and its run_salvo service."""

    async def async_run_salvo(call: core.ServiceCall) -> None:
        salvo_id: str = call.data[ATTR_SALVO_ID]
        hub = _resolve_hub(hass, salvo_id, call.data.get(ATTR_CONFIG_ENTRY_ID))
        await hub.async_run_salvo(salvo_id, call.data.get(ATTR_PANEL_ID))

    hass.services.async_register(
        DOMAIN, SERVICE_RUN_SALVO, async_run_salvo, schema=RUN_SALVO_SCHEMA
    )
    return True


async def async_setup_entry(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> bool:
    """Set up a ConductIP device from a config entry."""
    hass.data.setdefault(DOMAIN, {})

    hub = ConductIPHub(
        hass,
        entry,
        _config_from_entry(entry),
        session=async_get_clientsession(hass),
    )
    await hub.async_setup()

    hass.data[DOMAIN][entry.entry_id] = hub

    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)

    entry.async_on_unload(entry.add_update_listener(update_listener))

    return True


async def async_unload_entry(
    hass: core.HomeAssistant,
    config_entry: config_entries.ConfigEntry,
) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(
        config_entry, PLATFORMS
    )

    if unload_ok:
        hub: ConductIPHub | None = hass.data[DOMAIN].pop(
            config_entry.entry_id, None
        )
        if hub is not None:
            await hub.async_shutdown()

    return unload_ok


async def update_listener(
    hass: core.HomeAssistant, entry: config_entries.ConfigEntry
) -> None:
    """Reload so the new certificate policy gets a fresh client and timer."""
    await hass.config_entries.async_reload(entry.entry_id)
