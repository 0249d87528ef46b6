"""Support for ConductIP salvo-active binary sensors."""

from __future__ import annotations

from homeassistant.components.binary_sensor import BinarySensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, FEEDBACK_SALVO_ACTIVE
from .entity import ConductIPSalvoEntity
from .hub import ConductIPHub


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one active-state sensor per salvo from a config entry."""
    hub: ConductIPHub = hass.data[DOMAIN][config_entry.entry_id]

    tracked: set[str] = set()

    @callback
    def _async_add_new() -> None:
        new_ids = {salvo.id for _panel, salvo in hub.poller.salvos()} - tracked
        if new_ids:
            tracked.update(new_ids)
            async_add_entities(
                ConductIPSalvoActiveSensor(hub, salvo_id) for salvo_id in new_ids
            )

    _async_add_new()
    config_entry.async_on_unload(
        hub.coordinator.async_add_listener(_async_add_new)
    )


class ConductIPSalvoActiveSensor(ConductIPSalvoEntity, BinarySensorEntity):
    """On while the device reports the salvo as active."""

    def __init__(self, hub: ConductIPHub, salvo_id: str) -> None:
        super().__init__(hub, f"{FEEDBACK_SALVO_ACTIVE}_{salvo_id}", salvo_id)

    @property
    def name(self) -> str:
        salvo = self._hub.poller.get_salvo(self._salvo_id)
        label = salvo.display_label if salvo is not None else self._salvo_id
        return f"{label} active"

    @property
    def is_on(self) -> bool:
        return self._hub.poller.is_salvo_active(self._salvo_id)
