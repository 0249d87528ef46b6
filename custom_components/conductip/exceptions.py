"""Exceptions for ConductIP device communication."""

from __future__ import annotations

from .const import ConnectionStatus


class ConductIPError(Exception):
    """Base ConductIP exception."""

    status = ConnectionStatus.UNKNOWN_ERROR


class ConductIPConfigurationError(ConductIPError):
    """ConductIP configuration exception (host, username or password missing)."""

    status = ConnectionStatus.BAD_CONFIG


class ConductIPApiError(ConductIPError):
    """ConductIP API exception (non-2xx response)."""

    status = ConnectionStatus.CONNECTION_FAILURE

    def __init__(self, message: str, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class ConductIPAuthenticationError(ConductIPApiError):
    """ConductIP authentication exception (401/403)."""

    status = ConnectionStatus.BAD_CONFIG


class ConductIPNotFoundError(ConductIPApiError):
    """ConductIP endpoint exception (404)."""


class ConductIPTimeoutError(ConductIPError):
    """ConductIP timeout exception."""

    status = ConnectionStatus.CONNECTION_FAILURE


class ConductIPConnectionError(ConductIPError):
    """ConductIP connection exception (refused, DNS or TLS failure)."""

    status = ConnectionStatus.CONNECTION_FAILURE


class ConductIPResponseError(ConductIPError):
    """ConductIP response exception (body is not valid JSON)."""
