"""Constants for the ConductIP integration and device client."""

from __future__ import annotations

from enum import StrEnum

# ── Home Assistant integration ──────────────────────────────────────
DOMAIN = "conductip"
MANUFACTURER = "Matrox"

CONF_ALLOW_UNAUTHORIZED = "allow_unauthorized"

SERVICE_RUN_SALVO = "run_salvo"
ATTR_SALVO_ID = "salvo_id"
ATTR_PANEL_ID = "panel_id"

FEEDBACK_SALVO_ACTIVE = "salvo_active"

# ── Device API ─────────────────────────────────────────────────────
API_PREFIX = "/api"
API_TIMEOUT = 5  # seconds
USER_AGENT = "HomeAssistant-ConductIP"

ENDPOINT_ROOMS_INFO = "/rooms/info"
ENDPOINT_PANEL_INFO = "/panels/info/{panel_id}"
ENDPOINT_ACTIVE_SALVOS = "/salvos/active"
ENDPOINT_SALVO = "/salvos/{salvo_id}"

# ── Polling ────────────────────────────────────────────────────────
POLLING_INTERVAL = 1  # seconds, while healthy
ERROR_POLLING_INTERVAL = 5  # seconds, while the last cycle failed

# ── Display fallbacks ──────────────────────────────────────────────
UNNAMED_ROOM = "Unnamed Room"
UNNAMED_PANEL = "Unnamed Panel"
UNNAMED_SALVO = "Unnamed Salvo"
NO_PANELS_CHOICE = "No panels found (or not loaded)"
NO_SALVOS_CHOICE = "No salvos found (or not loaded)"


class ConnectionStatus(StrEnum):
    """Operational status reported to the host."""

    CONNECTING = "connecting"
    OK = "ok"
    BAD_CONFIG = "bad_config"
    CONNECTION_FAILURE = "connection_failure"
    UNKNOWN_ERROR = "unknown_error"
    UNKNOWN_WARNING = "unknown_warning"
