"""ConductIP topology polling: snapshot cache and change detection."""

from __future__ import annotations

from collections.abc import Iterator
import logging
from typing import Any, Protocol

from .client import ConductIPClient
from .const import (
    FEEDBACK_SALVO_ACTIVE,
    NO_PANELS_CHOICE,
    NO_SALVOS_CHOICE,
    ConnectionStatus,
)
from .models import Panel, Room, Salvo

_LOGGER = logging.getLogger(__name__)


class ConductIPListener(Protocol):
    """What the poller and client report to."""

    def update_status(
        self, status: ConnectionStatus, message: str | None = None
    ) -> None: ...

    def update_actions(self) -> None: ...

    def update_presets(self) -> None: ...

    def update_variables(self) -> None: ...

    def check_feedbacks(self, feedback_id: str) -> None: ...


def _active_ids(payload: list[Any]) -> frozenset[str]:
    ids: set[str] = set()
    for item in payload:
        if isinstance(item, dict):
            if item.get("id") is not None:
                ids.add(str(item["id"]))
        elif isinstance(item, (str, int)):
            ids.add(str(item))
    return frozenset(ids)


class ConductIPPoller:
    """Owns the last known rooms/panels/salvos and active-salvo snapshot.

    The snapshot is swapped as a whole at the end of a cycle, so readers
    never see a panel index that disagrees with the rooms it came from.
    """

    def __init__(
        self, client: ConductIPClient, listener: ConductIPListener
    ) -> None:
        self._client = client
        self._listener = listener
        self._closed = False

        self._rooms: tuple[Room, ...] = ()
        self._panel_salvos: dict[str, tuple[Salvo, ...]] = {}
        self._active_salvos: frozenset[str] = frozenset()

    # ------------------------------------------------------------------
    #  Refresh cycle
    # ------------------------------------------------------------------

    async def async_refresh(self) -> bool:
        """Run one poll cycle; return True when both fetches succeeded."""
        if not self._client.config.is_complete:
            return False

        healthy = True
        rooms = self._rooms
        panel_salvos = self._panel_salvos

        payload = await self._client.async_get_rooms()
        if self._closed:
            return False
        if payload is None:
            _LOGGER.debug("Failed to fetch rooms, keeping last known topology")
            healthy = False
        elif not isinstance(payload, list):
            _LOGGER.debug("Invalid rooms payload, expected a list: %r", payload)
            self._client.log_problem(
                "Invalid rooms data format from ConductIP, expected a list"
            )
            self._client.report_status(
                ConnectionStatus.UNKNOWN_WARNING,
                "Invalid data format from API (rooms)",
            )
            healthy = False
        else:
            rooms = tuple(
                Room.from_api(room) for room in payload if isinstance(room, dict)
            )
            panel_salvos = self._index_salvos(rooms)

        payload = await self._client.async_get_active_salvos()
        if self._closed:
            return False
        if isinstance(payload, list):
            active = _active_ids(payload)
        else:
            if payload is not None:
                _LOGGER.debug(
                    "Invalid active salvos payload, expected a list: %r", payload
                )
                self._client.log_problem(
                    "Invalid active salvos format from ConductIP, expected a list"
                )
            healthy = False
            active = frozenset()

        topology_changed = rooms != self._rooms or self._index_changed(
            self._panel_salvos, panel_salvos
        )
        active_changed = active != self._active_salvos

        self._rooms = rooms
        self._panel_salvos = panel_salvos
        self._active_salvos = active

        if healthy:
            self._client.report_healthy()

        if topology_changed:
            _LOGGER.debug(
                "Topology changed: %s rooms, %s panels",
                len(rooms),
                len(panel_salvos),
            )
            self._notify_topology()
        if active_changed:
            self._listener.check_feedbacks(FEEDBACK_SALVO_ACTIVE)

        return healthy

    @staticmethod
    def _index_salvos(rooms: tuple[Room, ...]) -> dict[str, tuple[Salvo, ...]]:
        return {
            panel.id: panel.salvos for room in rooms for panel in room.panels
        }

    @staticmethod
    def _index_changed(
        old: dict[str, tuple[Salvo, ...]], new: dict[str, tuple[Salvo, ...]]
    ) -> bool:
        if old.keys() != new.keys():
            return True
        return any(old[panel_id] != new[panel_id] for panel_id in new)

    def _notify_topology(self) -> None:
        self._listener.update_actions()
        self._listener.update_presets()
        self._listener.update_variables()

    def reset(self) -> None:
        """Drop the whole snapshot, e.g. after the configuration turned invalid."""
        had_topology = bool(self._rooms or self._panel_salvos)
        had_active = bool(self._active_salvos)

        self._rooms = ()
        self._panel_salvos = {}
        self._active_salvos = frozenset()

        if had_topology:
            self._notify_topology()
        if had_active:
            self._listener.check_feedbacks(FEEDBACK_SALVO_ACTIVE)

    def close(self) -> None:
        """Ignore the outcome of any cycle still in flight."""
        self._closed = True

    # ------------------------------------------------------------------
    #  Snapshot accessors
    # ------------------------------------------------------------------

    @property
    def rooms(self) -> tuple[Room, ...]:
        return self._rooms

    @property
    def panel_salvos(self) -> dict[str, tuple[Salvo, ...]]:
        return self._panel_salvos

    @property
    def active_salvos(self) -> frozenset[str]:
        return self._active_salvos

    def panels(self) -> Iterator[tuple[Room, Panel]]:
        for room in self._rooms:
            for panel in room.panels:
                yield room, panel

    def salvos(self) -> Iterator[tuple[Panel, Salvo]]:
        for _room, panel in self.panels():
            for salvo in self._panel_salvos.get(panel.id, ()):
                yield panel, salvo

    def get_panel(self, panel_id: str) -> Panel | None:
        return next(
            (panel for _room, panel in self.panels() if panel.id == panel_id),
            None,
        )

    def get_salvo(self, salvo_id: str) -> Salvo | None:
        return next(
            (salvo for _panel, salvo in self.salvos() if salvo.id == salvo_id),
            None,
        )

    def panel_for_salvo(self, salvo_id: str) -> Panel | None:
        return next(
            (panel for panel, salvo in self.salvos() if salvo.id == salvo_id),
            None,
        )

    def is_salvo_active(self, salvo_id: str) -> bool:
        return salvo_id in self._active_salvos

    # ------------------------------------------------------------------
    #  Choice lists
    # ------------------------------------------------------------------

    def panel_choices(self) -> list[dict[str, str]]:
        """Panels as ``{"id", "label"}`` pairs labelled "Room - Panel"."""
        choices = [
            {
                "id": panel.id,
                "label": f"{room.display_label} - {panel.display_label}",
            }
            for room, panel in self.panels()
        ]
        return choices or [{"id": "", "label": NO_PANELS_CHOICE}]

    def salvo_choices(self) -> list[dict[str, str]]:
        """Salvos as ``{"id", "label"}`` pairs labelled "Panel - Salvo"."""
        choices = [
            {
                "id": salvo.id,
                "label": f"{panel.display_label} - {salvo.display_label}",
            }
            for panel, salvo in self.salvos()
        ]
        return choices or [{"id": "", "label": NO_SALVOS_CHOICE}]
