"""Support for ConductIP label and connection-status sensors."""

from __future__ import annotations

from homeassistant.components.sensor import SensorDeviceClass, SensorEntity
from homeassistant.config_entries import ConfigEntry
from homeassistant.const import EntityCategory
from homeassistant.core import HomeAssistant, callback
from homeassistant.helpers.entity_platform import AddEntitiesCallback

from .const import DOMAIN, ConnectionStatus
from .entity import ConductIPEntity, ConductIPSalvoEntity
from .hub import ConductIPHub


async def async_setup_entry(
    hass: HomeAssistant,
    config_entry: ConfigEntry,
    async_add_entities: AddEntitiesCallback,
) -> None:
    """Set up ConductIP sensors from a config entry."""
    hub: ConductIPHub = hass.data[DOMAIN][config_entry.entry_id]

    async_add_entities([ConductIPConnectionSensor(hub)])

    tracked_panels: set[str] = set()
    tracked_salvos: set[str] = set()

    @callback
    def _async_add_new() -> None:
        new_panels = {panel.id for _room, panel in hub.poller.panels()}
        new_panels -= tracked_panels
        new_salvos = {salvo.id for _panel, salvo in hub.poller.salvos()}
        new_salvos -= tracked_salvos

        entities: list[SensorEntity] = []
        if new_panels:
            tracked_panels.update(new_panels)
            entities.extend(
                ConductIPPanelLabelSensor(hub, panel_id) for panel_id in new_panels
            )
        if new_salvos:
            tracked_salvos.update(new_salvos)
            entities.extend(
                ConductIPSalvoLabelSensor(hub, salvo_id) for salvo_id in new_salvos
            )
        if entities:
            async_add_entities(entities)

    _async_add_new()
    config_entry.async_on_unload(
        hub.coordinator.async_add_listener(_async_add_new)
    )


class ConductIPConnectionSensor(ConductIPEntity, SensorEntity):
    """Operational status of the device link."""

    _attr_device_class = SensorDeviceClass.ENUM
    _attr_entity_category = EntityCategory.DIAGNOSTIC
    _attr_options = [status.value for status in ConnectionStatus]
    _attr_translation_key = "connection_status"

    def __init__(self, hub: ConductIPHub) -> None:
        super().__init__(hub, "connection_status")

    @property
    def native_value(self) -> str:
        return self._hub.status.value

    @property
    def extra_state_attributes(self) -> dict[str, str | None]:
        return {"message": self._hub.status_message}

    @property
    def available(self) -> bool:
        return True


class ConductIPPanelLabelSensor(ConductIPEntity, SensorEntity):
    """Current label of a panel."""

    def __init__(self, hub: ConductIPHub, panel_id: str) -> None:
        super().__init__(hub, f"panel_{panel_id}")
        self._panel_id = panel_id

    @property
    def name(self) -> str:
        panel = self._hub.poller.get_panel(self._panel_id)
        if panel is None:
            return f"Panel {self._panel_id} label"
        return f"{panel.display_label} panel label"

    @property
    def available(self) -> bool:
        if not super().available:
            return False
        return self._hub.poller.get_panel(self._panel_id) is not None

    @property
    def native_value(self) -> str | None:
        panel = self._hub.poller.get_panel(self._panel_id)
        return panel.display_label if panel is not None else None


class ConductIPSalvoLabelSensor(ConductIPSalvoEntity, SensorEntity):
    """Current label of a salvo."""

    def __init__(self, hub: ConductIPHub, salvo_id: str) -> None:
        super().__init__(hub, f"salvo_{salvo_id}", salvo_id)

    @property
    def name(self) -> str:
        salvo = self._hub.poller.get_salvo(self._salvo_id)
        if salvo is None:
            return f"Salvo {self._salvo_id} label"
        return f"{salvo.display_label} salvo label"

    @property
    def native_value(self) -> str | None:
        salvo = self._hub.poller.get_salvo(self._salvo_id)
        return salvo.display_label if salvo is not None else None
