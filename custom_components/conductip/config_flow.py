"""Config flow to configure the ConductIP component."""

from __future__ import annotations

import logging
from typing import Any

import voluptuous as vol

from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import callback

from .client import ConductIPClient
from .const import CONF_ALLOW_UNAUTHORIZED, DOMAIN
from .exceptions import (
    ConductIPApiError,
    ConductIPAuthenticationError,
    ConductIPConnectionError,
    ConductIPError,
    ConductIPResponseError,
    ConductIPTimeoutError,
)
from .models import ConductIPConfig

_LOGGER = logging.getLogger(__name__)

DEVICE_SETTINGS = {
    vol.Required(CONF_HOST): str,
    vol.Required(CONF_USERNAME): str,
    vol.Required(CONF_PASSWORD): str,
    vol.Optional(CONF_ALLOW_UNAUTHORIZED, default=False): bool,
}


def _error_key(err: ConductIPError | None) -> str:
    if isinstance(err, ConductIPAuthenticationError):
        return "invalid_auth"
    if isinstance(
        err, (ConductIPConnectionError, ConductIPTimeoutError, ConductIPApiError)
    ):
        return "cannot_connect"
    if isinstance(err, ConductIPResponseError):
        return "invalid_response"
    return "unknown"


class ConductIPFlowHandler(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a ConductIP config flow."""

    VERSION = 1
    CONNECTION_CLASS = config_entries.CONN_CLASS_LOCAL_POLL

    async def async_step_user(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        """Handle a flow initialized by the user to configure a device."""
        errors: dict[str, str] = {}

        if user_input is not None:
            host = user_input[CONF_HOST].strip()
            await self.async_set_unique_id(host.lower())
            self._abort_if_unique_id_configured()

            client = ConductIPClient(
                ConductIPConfig(
                    host=host,
                    username=user_input[CONF_USERNAME],
                    password=user_input[CONF_PASSWORD],
                    allow_unauthorized=user_input.get(
                        CONF_ALLOW_UNAUTHORIZED, False
                    ),
                )
            )
            try:
                rooms = await client.async_get_rooms()
            finally:
                await client.close()

            if isinstance(rooms, list):
                return self.async_create_entry(
                    title=f"ConductIP ({host})",
                    data={**user_input, CONF_HOST: host},
                )
            if rooms is not None:
                _LOGGER.warning("Unexpected rooms payload from %s: %r", host, rooms)
                errors["base"] = "invalid_response"
            else:
                errors["base"] = _error_key(client.last_error)

        return self.async_show_form(
            step_id="user",
            data_schema=vol.Schema(DEVICE_SETTINGS),
            errors=errors,
        )

    @staticmethod
    @callback
    def async_get_options_flow(
        config_entry: config_entries.ConfigEntry,
    ) -> ConductIPOptionsFlow:
        """Wire options flow for this entry."""
        return ConductIPOptionsFlow()


class ConductIPOptionsFlow(config_entries.OptionsFlow):
    """Toggle certificate verification for an existing device."""

    async def async_step_init(
        self, user_input: dict[str, Any] | None = None
    ) -> config_entries.ConfigFlowResult:
        if user_input is not None:
            return self.async_create_entry(data=user_input)

        current = self.config_entry.options.get(
            CONF_ALLOW_UNAUTHORIZED,
            self.config_entry.data.get(CONF_ALLOW_UNAUTHORIZED, False),
        )
        return self.async_show_form(
            step_id="init",
            data_schema=vol.Schema(
                {vol.Optional(CONF_ALLOW_UNAUTHORIZED, default=current): bool}
            ),
        )
