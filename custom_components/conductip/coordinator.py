"""Poll scheduling for ConductIP on Home Assistant's update coordinator."""

from __future__ import annotations

from datetime import timedelta
import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.update_coordinator import DataUpdateCoordinator

from .const import DOMAIN, ERROR_POLLING_INTERVAL, POLLING_INTERVAL
from .poller import ConductIPPoller

_LOGGER = logging.getLogger(__name__)

HEALTHY_INTERVAL = timedelta(seconds=POLLING_INTERVAL)
DEGRADED_INTERVAL = timedelta(seconds=ERROR_POLLING_INTERVAL)


class ConductIPCoordinator(DataUpdateCoordinator[bool]):
    """Runs one poller cycle per update; data is the health of that cycle.

    A degraded cycle switches to the slower interval until a healthy one
    switches back. The next refresh is scheduled only once the current one
    has finished, so cycles never overlap.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry | None,
        poller: ConductIPPoller,
    ) -> None:
        """Initialize the ConductIP coordinator."""
        super().__init__(
            hass,
            _LOGGER,
            config_entry=config_entry,
            name=DOMAIN,
            update_interval=HEALTHY_INTERVAL,
        )
        self.poller = poller

    def pause(self) -> None:
        """Stop scheduling cycles, e.g. while the configuration is incomplete."""
        self.update_interval = None

    async def _async_update_data(self) -> bool:
        healthy = await self.poller.async_refresh()

        if self.update_interval is None:
            return healthy

        interval = HEALTHY_INTERVAL if healthy else DEGRADED_INTERVAL
        if interval != self.update_interval:
            _LOGGER.info(
                "Polling %s, next cycle in %ss",
                "healthy" if healthy else "degraded",
                interval.total_seconds(),
            )
            self.update_interval = interval
        return healthy
