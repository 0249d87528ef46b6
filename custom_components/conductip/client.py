"""ConductIP device API: authenticated HTTPS JSON requests."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

import aiohttp
from aiohttp import client_exceptions

from .const import (
    API_PREFIX,
    API_TIMEOUT,
    ENDPOINT_ACTIVE_SALVOS,
    ENDPOINT_PANEL_INFO,
    ENDPOINT_ROOMS_INFO,
    ENDPOINT_SALVO,
    USER_AGENT,
    ConnectionStatus,
)
from .exceptions import (
    ConductIPApiError,
    ConductIPAuthenticationError,
    ConductIPConfigurationError,
    ConductIPConnectionError,
    ConductIPError,
    ConductIPNotFoundError,
    ConductIPResponseError,
    ConductIPTimeoutError,
)
from .models import ConductIPConfig

if TYPE_CHECKING:
    from .poller import ConductIPListener

_LOGGER = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "DELETE"})


class ConductIPClient:
    """Async client for the ConductIP REST API.

    Every call resolves to a value or ``None``; failures never propagate.
    The failure is kept on :attr:`last_error` and reported to the listener
    as a :class:`ConnectionStatus` plus an operator-facing message.
    """

    def __init__(
        self,
        config: ConductIPConfig,
        listener: ConductIPListener | None = None,
        session: aiohttp.ClientSession | None = None,
        request_timeout: float = API_TIMEOUT,
    ) -> None:
        self._config = config
        self._listener = listener
        self._request_timeout = request_timeout

        self._session = session
        self._close_session = False

        self.last_error: ConductIPError | None = None
        self._status: ConnectionStatus | None = None
        self._status_message: str | None = None
        self._logged_problems: set[str] = set()

    @property
    def config(self) -> ConductIPConfig:
        return self._config

    @property
    def status(self) -> ConnectionStatus | None:
        return self._status

    @property
    def status_message(self) -> str | None:
        return self._status_message

    # ------------------------------------------------------------------
    #  Status reporting
    # ------------------------------------------------------------------

    def report_status(
        self, status: ConnectionStatus, message: str | None = None
    ) -> None:
        """Forward a status to the listener when it differs from the last one."""
        if status is self._status and message == self._status_message:
            return
        self._status = status
        self._status_message = message
        if self._listener is not None:
            self._listener.update_status(status, message)

    def log_problem(self, message: str) -> None:
        """Log ``message`` at WARNING once until the next healthy cycle."""
        if message in self._logged_problems:
            _LOGGER.debug("Still failing: %s", message)
            return
        self._logged_problems.add(message)
        _LOGGER.warning("%s", message)

    def _report_failure(self, err: ConductIPError) -> None:
        self.last_error = err
        message = str(err)
        self.log_problem(f"ConductIP request failed: {message}")
        self.report_status(err.status, message)

    def report_healthy(self) -> None:
        """Report ``ok`` and re-arm problem logging after a fully healthy cycle."""
        self._logged_problems.clear()
        self.report_status(ConnectionStatus.OK)

    # ------------------------------------------------------------------
    #  Requests
    # ------------------------------------------------------------------

    async def request(
        self, method: str, path: str, body: Any = None
    ) -> Any:
        """Perform one request under ``/api`` and classify the outcome.

        Returns ``True`` for a triggered salvo or a 204, ``None`` for an
        empty body or any failure, otherwise the decoded JSON value.
        """
        try:
            result = await self._request(method.upper(), path, body)
        except ConductIPError as err:
            self._report_failure(err)
            return None

        self.last_error = None
        return result

    async def _request(self, method: str, path: str, body: Any) -> Any:
        if not self._config.is_complete:
            raise ConductIPConfigurationError("Configuration is incomplete.")

        if self._session is None:
            self._session = aiohttp.ClientSession()
            self._close_session = True

        headers = {"User-Agent": USER_AGENT}
        data: str | None = None
        if method in _BODY_METHODS and body is not None:
            try:
                data = json.dumps(body)
            except (TypeError, ValueError) as exc:
                _LOGGER.error("Failed to serialise request body: %s", exc)
                raise ConductIPError("Invalid request body") from exc
            headers["Content-Type"] = "application/json"

        url = f"https://{self._config.host}{API_PREFIX}{path}"

        try:
            async with asyncio.timeout(self._request_timeout):
                async with self._session.request(
                    method,
                    url,
                    data=data,
                    headers=headers,
                    auth=aiohttp.BasicAuth(
                        self._config.username, self._config.password
                    ),
                    ssl=not self._config.allow_unauthorized,
                ) as resp:
                    status = resp.status
                    reason = resp.reason
                    text = await resp.text()
        except TimeoutError as exc:
            _LOGGER.debug(
                "Request to %s timed out after %ss", url, self._request_timeout
            )
            raise ConductIPTimeoutError("Request Timeout") from exc
        except client_exceptions.ClientSSLError as exc:
            if not self._config.allow_unauthorized:
                raise ConductIPConnectionError(
                    'Certificate validation error. Try "Allow Unverified '
                    'Certificates".'
                ) from exc
            raise ConductIPConnectionError(
                f"SSL Certificate error (even with bypass): {exc}"
            ) from exc
        except client_exceptions.ClientConnectorDNSError as exc:
            raise ConductIPConnectionError(
                "Host not found or DNS lookup failure"
            ) from exc
        except client_exceptions.ClientConnectorError as exc:
            if isinstance(exc.os_error, ConnectionRefusedError):
                raise ConductIPConnectionError("Connection refused") from exc
            raise ConductIPConnectionError(f"Request failed: {exc}") from exc
        except client_exceptions.ClientError as exc:
            raise ConductIPConnectionError(f"Request failed: {exc}") from exc

        return self._classify(method, path, status, reason, text)

    @staticmethod
    def _classify(
        method: str, path: str, status: int, reason: str | None, text: str
    ) -> Any:
        if not 200 <= status < 300:
            _LOGGER.debug(
                "API Error %s %s for %s %s. Body: %s",
                status,
                reason,
                method,
                path,
                text,
            )
            if status in (401, 403):
                raise ConductIPAuthenticationError(
                    f"Authentication Failed ({status})", status
                )
            if status == 404:
                raise ConductIPNotFoundError(
                    f"API Endpoint Not Found ({status})", status
                )
            raise ConductIPApiError(f"API Error {status}", status)

        if method == "POST" and path.startswith("/salvos/") and status == 200:
            return True
        if status == 204:
            return True
        if not text.strip():
            return None

        try:
            return json.loads(text)
        except ValueError as exc:
            _LOGGER.debug("Failed to parse JSON from %s: %r", path, text)
            raise ConductIPResponseError("Failed to parse API response") from exc

    # ------------------------------------------------------------------
    #  Endpoints
    # ------------------------------------------------------------------

    async def async_get_rooms(self) -> Any:
        """Rooms with panels and their salvos embedded."""
        return await self.request("GET", ENDPOINT_ROOMS_INFO)

    async def async_get_active_salvos(self) -> Any:
        return await self.request("GET", ENDPOINT_ACTIVE_SALVOS)

    async def async_get_panel(self, panel_id: str) -> Any:
        """Single panel document (legacy per-panel endpoint)."""
        if not panel_id:
            _LOGGER.error("async_get_panel called without a panel id")
            return None
        return await self.request(
            "GET", ENDPOINT_PANEL_INFO.format(panel_id=panel_id)
        )

    async def async_run_salvo(self, salvo_id: str) -> bool:
        result = await self.request(
            "POST", ENDPOINT_SALVO.format(salvo_id=salvo_id)
        )
        return result is True

    # ------------------------------------------------------------------
    #  Session lifecycle
    # ------------------------------------------------------------------

    async def close(self) -> None:
        """Close the HTTP session if we own it."""
        if self._session and self._close_session:
            await self._session.close()

    async def __aenter__(self) -> ConductIPClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
