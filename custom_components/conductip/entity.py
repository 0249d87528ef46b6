"""Base entity for the ConductIP integration."""

from __future__ import annotations

from homeassistant.helpers.device_registry import DeviceInfo
from homeassistant.helpers.update_coordinator import CoordinatorEntity

from .const import DOMAIN, MANUFACTURER
from .coordinator import ConductIPCoordinator
from .hub import ConductIPHub


class ConductIPEntity(CoordinatorEntity[ConductIPCoordinator]):
    """Base class for all ConductIP entities.

    Provides shared plumbing: unique_id, device_info, and coordinator
    listener registration. State is read from the hub's poller snapshot.
    """

    _attr_has_entity_name = True

    def __init__(self, hub: ConductIPHub, key: str) -> None:
        """Initialise the entity."""
        super().__init__(hub.coordinator)
        self._hub = hub
        self._attr_unique_id = f"{hub.entry_id}_{key}"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, hub.entry_id)},
            manufacturer=MANUFACTURER,
            model="ConductIP",
            name=f"ConductIP {hub.host}",
            configuration_url=f"https://{hub.host}",
        )


class ConductIPSalvoEntity(ConductIPEntity):
    """Entity bound to one salvo; unavailable once the salvo disappears."""

    def __init__(self, hub: ConductIPHub, key: str, salvo_id: str) -> None:
        super().__init__(hub, key)
        self._salvo_id = salvo_id

    @property
    def available(self) -> bool:
        if not super().available:
            return False
        return self._hub.poller.get_salvo(self._salvo_id) is not None
