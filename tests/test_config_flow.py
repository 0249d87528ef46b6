"""Tests for the ConductIP config flow."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest

from homeassistant import config_entries
from homeassistant.const import CONF_HOST, CONF_PASSWORD, CONF_USERNAME
from homeassistant.core import HomeAssistant
from homeassistant.data_entry_flow import FlowResultType
from pytest_homeassistant_custom_component.common import MockConfigEntry

from custom_components.conductip.const import CONF_ALLOW_UNAUTHORIZED, DOMAIN
from custom_components.conductip.exceptions import (
    ConductIPApiError,
    ConductIPAuthenticationError,
    ConductIPConfigurationError,
    ConductIPConnectionError,
    ConductIPResponseError,
    ConductIPTimeoutError,
)

from .const import HOST, PASSWORD, ROOMS_INFO, USERNAME

CLIENT_PATCH = "custom_components.conductip.config_flow.ConductIPClient"
SETUP_PATCH = "custom_components.conductip.async_setup_entry"

USER_INPUT = {
    CONF_HOST: HOST,
    CONF_USERNAME: USERNAME,
    CONF_PASSWORD: PASSWORD,
    CONF_ALLOW_UNAUTHORIZED: False,
}


def _mock_client(rooms=None, last_error=None) -> AsyncMock:
    client = AsyncMock()
    client.async_get_rooms = AsyncMock(return_value=rooms)
    client.close = AsyncMock()
    client.last_error = last_error
    return client


async def _start(hass: HomeAssistant) -> dict:
    return await hass.config_entries.flow.async_init(
        DOMAIN, context={"source": config_entries.SOURCE_USER}
    )


async def test_show_form(hass: HomeAssistant) -> None:
    """Test that the user step shows the form initially."""
    result = await _start(hass)
    assert result["type"] is FlowResultType.FORM
    assert result["step_id"] == "user"
    assert result["errors"] == {}


async def test_user_flow_success(hass: HomeAssistant) -> None:
    """Test successful device configuration."""
    result = await _start(hass)

    with (
        patch(CLIENT_PATCH) as mock_client_cls,
        patch(SETUP_PATCH, return_value=True),
    ):
        mock_client = _mock_client(rooms=ROOMS_INFO)
        mock_client_cls.return_value = mock_client

        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {**USER_INPUT, CONF_HOST: f" {HOST} "}
        )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert result["title"] == f"ConductIP ({HOST})"
    assert result["data"][CONF_HOST] == HOST
    assert result["data"][CONF_USERNAME] == USERNAME
    assert result["result"].unique_id == HOST
    mock_client.close.assert_awaited_once()


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (ConductIPAuthenticationError("Authentication Failed (401)", 401), "invalid_auth"),
        (ConductIPConnectionError("Connection refused"), "cannot_connect"),
        (ConductIPTimeoutError("Request Timeout"), "cannot_connect"),
        (ConductIPApiError("API Error 500", 500), "cannot_connect"),
        (ConductIPResponseError("Failed to parse API response"), "invalid_response"),
        (ConductIPConfigurationError("Configuration is incomplete."), "unknown"),
    ],
)
async def test_user_flow_errors(hass: HomeAssistant, error, expected) -> None:
    """Test that client failures map to form errors."""
    result = await _start(hass)

    with patch(CLIENT_PATCH) as mock_client_cls:
        mock_client = _mock_client(rooms=None, last_error=error)
        mock_client_cls.return_value = mock_client

        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )

    assert result["type"] is FlowResultType.FORM
    assert result["errors"] == {"base": expected}
    mock_client.close.assert_awaited_once()


async def test_user_flow_unexpected_payload(hass: HomeAssistant) -> None:
    """Test that a non-list rooms document is rejected."""
    result = await _start(hass)

    with patch(CLIENT_PATCH) as mock_client_cls:
        mock_client_cls.return_value = _mock_client(rooms={"rooms": []})

        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], USER_INPUT
        )

    assert result["type"] is FlowResultType.FORM
    assert result["errors"] == {"base": "invalid_response"}


async def test_user_flow_already_configured(hass: HomeAssistant) -> None:
    """Test that duplicate devices are rejected."""
    MockConfigEntry(domain=DOMAIN, data=USER_INPUT, unique_id=HOST).add_to_hass(hass)
    result = await _start(hass)

    with patch(CLIENT_PATCH) as mock_client_cls:
        result = await hass.config_entries.flow.async_configure(
            result["flow_id"], {**USER_INPUT, CONF_HOST: HOST.upper()}
        )

    assert result["type"] is FlowResultType.ABORT
    assert result["reason"] == "already_configured"
    mock_client_cls.assert_not_called()


async def test_options_flow(hass: HomeAssistant) -> None:
    """Test toggling certificate verification."""
    entry = MockConfigEntry(domain=DOMAIN, data=USER_INPUT, unique_id=HOST)
    entry.add_to_hass(hass)

    with patch(SETUP_PATCH, return_value=True):
        result = await hass.config_entries.options.async_init(entry.entry_id)
        assert result["type"] is FlowResultType.FORM
        assert result["step_id"] == "init"

        result = await hass.config_entries.options.async_configure(
            result["flow_id"], {CONF_ALLOW_UNAUTHORIZED: True}
        )

    assert result["type"] is FlowResultType.CREATE_ENTRY
    assert entry.options == {CONF_ALLOW_UNAUTHORIZED: True}
