"""Data models for ConductIP rooms, panels and salvos."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .const import UNNAMED_PANEL, UNNAMED_ROOM, UNNAMED_SALVO


def _opaque_id(value: Any) -> str:
    # Ids are matching keys only; numbers are stringified, never parsed.
    return "" if value is None else str(value)


def _label(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass(frozen=True, slots=True)
class ConductIPConfig:
    """Connection settings for one device."""

    host: str | None
    username: str | None
    password: str | None
    allow_unauthorized: bool = False

    @property
    def is_complete(self) -> bool:
        return bool(self.host and self.username and self.password)


@dataclass(frozen=True, slots=True)
class Salvo:
    """Triggerable preset route on a panel."""

    id: str
    label: str = ""

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Salvo:
        return cls(id=_opaque_id(data.get("id")), label=_label(data.get("label")))

    @property
    def display_label(self) -> str:
        return self.label or UNNAMED_SALVO


@dataclass(frozen=True, slots=True)
class Panel:
    """Routing panel holding salvos."""

    id: str
    label: str = ""
    salvos: tuple[Salvo, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Panel:
        salvos = data.get("salvos")
        return cls(
            id=_opaque_id(data.get("id")),
            label=_label(data.get("label")),
            salvos=tuple(
                Salvo.from_api(s) for s in salvos if isinstance(s, dict)
            )
            if isinstance(salvos, list)
            else (),
        )

    @property
    def display_label(self) -> str:
        return self.label or UNNAMED_PANEL


@dataclass(frozen=True, slots=True)
class Room:
    """Top-level grouping of panels."""

    id: str
    label: str = ""
    panels: tuple[Panel, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Room:
        panels = data.get("panels")
        return cls(
            id=_opaque_id(data.get("id")),
            label=_label(data.get("label")),
            panels=tuple(
                Panel.from_api(p) for p in panels if isinstance(p, dict)
            )
            if isinstance(panels, list)
            else (),
        )

    @property
    def display_label(self) -> str:
        return self.label or UNNAMED_ROOM
