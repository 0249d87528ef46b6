"""Home Assistant side of the ConductIP poller."""

from __future__ import annotations

import logging

import aiohttp

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant, callback

from .client import ConductIPClient
from .const import ConnectionStatus
from .coordinator import ConductIPCoordinator
from .models import ConductIPConfig
from .poller import ConductIPPoller

_LOGGER = logging.getLogger(__name__)


class ConductIPHub:
    """Owns client, poller and coordinator for one config entry.

    Implements the listener interface the poller reports to. Entities
    subscribe to the coordinator, which notifies them after every cycle.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        config_entry: ConfigEntry | None,
        config: ConductIPConfig,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self.hass = hass
        self.entry_id = config_entry.entry_id if config_entry else ""
        self.client = ConductIPClient(config, self, session)
        self.poller = ConductIPPoller(self.client, self)
        self.coordinator = ConductIPCoordinator(hass, config_entry, self.poller)

        self.status = ConnectionStatus.CONNECTING
        self.status_message: str | None = "Initializing..."
        self.panel_choices: list[dict[str, str]] = self.poller.panel_choices()
        self.salvo_choices: list[dict[str, str]] = self.poller.salvo_choices()

    @property
    def host(self) -> str | None:
        return self.client.config.host

    # ------------------------------------------------------------------
    #  Lifecycle
    # ------------------------------------------------------------------

    async def async_setup(self) -> None:
        """Fetch the initial snapshot; polling starts once entities subscribe."""
        if not self.client.config.is_complete:
            self.coordinator.pause()
            self.poller.reset()
            self.update_status(
                ConnectionStatus.BAD_CONFIG,
                "Missing configuration: IP/Host, Username, or Password",
            )
            _LOGGER.debug("Polling not started due to missing config")
            return

        _LOGGER.debug("Fetching initial data from %s", self.host)
        await self.coordinator.async_refresh()

    async def async_shutdown(self) -> None:
        await self.coordinator.async_shutdown()
        self.poller.close()
        await self.client.close()

    # ------------------------------------------------------------------
    #  Listener interface
    # ------------------------------------------------------------------

    @callback
    def update_status(
        self, status: ConnectionStatus, message: str | None = None
    ) -> None:
        _LOGGER.debug("Status of %s: %s (%s)", self.host, status, message)
        self.status = status
        self.status_message = message

    @callback
    def update_actions(self) -> None:
        self.panel_choices = self.poller.panel_choices()
        self.salvo_choices = self.poller.salvo_choices()

    @callback
    def update_presets(self) -> None:
        _LOGGER.debug("Salvo list of %s changed", self.host)

    @callback
    def update_variables(self) -> None:
        _LOGGER.debug("Panel and salvo labels of %s changed", self.host)

    @callback
    def check_feedbacks(self, feedback_id: str) -> None:
        _LOGGER.debug("Feedback %s of %s changed", feedback_id, self.host)

    # ------------------------------------------------------------------
    #  Commands
    # ------------------------------------------------------------------

    async def async_run_salvo(
        self, salvo_id: str, panel_id: str | None = None
    ) -> bool:
        """Trigger a salvo; failures are logged, never raised."""
        if not salvo_id:
            _LOGGER.warning("Run salvo: salvo id not selected or not available")
            return False

        _LOGGER.debug("Run salvo %s (panel context: %s)", salvo_id, panel_id)
        if self.poller.get_salvo(salvo_id) is None:
            _LOGGER.debug("Salvo %s is not in the current snapshot", salvo_id)

        status = (self.status, self.status_message)
        ran = await self.client.async_run_salvo(salvo_id)
        if (self.status, self.status_message) != status:
            self.coordinator.async_update_listeners()

        if ran:
            _LOGGER.info("Successfully ran salvo: %s", salvo_id)
            return True

        _LOGGER.warning(
            "Failed to run salvo: %s. Check logs for API errors.", salvo_id
        )
        return False
