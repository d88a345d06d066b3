"""Session state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from netquest.domain.types import MissionId, PCSettings, Phase
from netquest.sim.dialogue import DialogueSequencer
from netquest.systems.port_scan import PortResult
from netquest.systems.purchasing import CartQuote
from netquest.systems.topology import Link


@dataclass()
class MissionProgress:
    mission_id: MissionId
    completed: bool = False
    entities: dict[str, PCSettings] = field(default_factory=dict)
    equipment: str | None = None


@dataclass()
class Scratch:
    """Per-mission working values; thrown away when a mission starts."""

    cart: CartQuote | None = None
    links: list[Link] = field(default_factory=list)
    router_configured: bool = False
    firewall_applied: bool = False
    icmp_blocked: bool = False
    scan_results: list[PortResult] = field(default_factory=list)
    safety_choice: str | None = None


@dataclass()
class SessionState:
    phase: Phase
    mission_id: MissionId
    budget: int
    dialogue: DialogueSequencer = field(default_factory=DialogueSequencer)
    flags: dict[str, Any] = field(default_factory=dict)
    progress: dict[MissionId, MissionProgress] = field(default_factory=dict)
    scratch: Scratch = field(default_factory=Scratch)

    def progress_for(self, mission_id: MissionId) -> MissionProgress | None:
        return self.progress.get(mission_id)

    def is_complete(self, mission_id: MissionId) -> bool:
        record = self.progress.get(mission_id)
        return record is not None and record.completed
