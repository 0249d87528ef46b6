"""Support for ConductIP salvo buttons."""

from __future__ import annotations

from homeassistant.components.button import ButtonEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN
from .entity import ConductIPSalvoEntity
from .hub import ConductIPHub


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up one run button per salvo from a config entry."""
    hub: ConductIPHub = hass.data[DOMAIN][config_entry.entry_id]

    tracked: set[str] = set()

    @callback
    def _async_add_new() -> None:
        new_ids = {salvo.id for _panel, salvo in hub.poller.salvos()} - tracked
        if new_ids:
            tracked.update(new_ids)
            async_add_entities(
                ConductIPSalvoButton(hub, salvo_id) for salvo_id in new_ids
            )

    _async_add_new()
    config_entry.async_on_unload(
        hub.coordinator.async_add_listener(_async_add_new)
    )


class ConductIPSalvoButton(ConductIPSalvoEntity, ButtonEntity):
    """Runs a salvo when pressed."""

    def __init__(self, hub: ConductIPHub, salvo_id: str) -> None:
        super().__init__(hub, f"run_salvo_{salvo_id}", salvo_id)

    @property
    def name(self) -> str:
        salvo = self._hub.poller.get_salvo(self._salvo_id)
        panel = self._hub.poller.panel_for_salvo(self._salvo_id)
        if salvo is None or panel is None:
            return f"Run salvo {self._salvo_id}"
        return f"Run {salvo.display_label} on {panel.display_label}"

    async def async_press(self) -> None:
        panel = self._hub.poller.panel_for_salvo(self._salvo_id)
        await self._hub.async_run_salvo(
            self._salvo_id, panel.id if panel is not None else None
        )
