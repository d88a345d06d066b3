"""Observable owner of the session state.

Every mutating method performs one write and then notifies subscribers
with the name of the field that changed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, TypeAlias, Union

from netquest.domain.errors import ContractViolation
from netquest.domain.types import DialogueLine, MissionId, PCSettings, Phase
from netquest.rules.catalog import RuleCatalog
from netquest.rules.content import Content
from netquest.sim.dialogue import OnComplete
from netquest.sim.state import MissionProgress, Scratch, SessionState
from netquest.systems.port_scan import PortResult, PortScan

logger = logging.getLogger(__name__)

Listener = Callable[[str, SessionState], None]


@dataclass(frozen=True)
class Spent:
    amount: int
    remaining: int

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class InsufficientFunds:
    needed: int
    available: int

    @property
    def ok(self) -> bool:
        return False


SpendResult: TypeAlias = Union[Spent, InsufficientFunds]


class SessionStore:
    def __init__(self, catalog: RuleCatalog, content: Content) -> None:
        self.catalog = catalog
        self.content = content
        self.state = self._initial_state()
        self.active_scan: PortScan | None = None
        self._listeners: list[Listener] = []

    def _initial_state(self) -> SessionState:
        return SessionState(
            phase=Phase.TITLE,
            mission_id=self.catalog.initial_mission,
            budget=self.catalog.initial_budget,
        )

    # -- observers -------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self, field_name: str) -> None:
        for listener in list(self._listeners):
            listener(field_name, self.state)

    # -- phase / mission -------------------------------------------------

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def mission_id(self) -> MissionId:
        return self.state.mission_id

    @property
    def budget(self) -> int:
        return self.state.budget

    def set_phase(self, phase: Phase) -> None:
        self.cancel_scan()
        logger.debug("Phase %s -> %s", self.state.phase.value, phase.value)
        self.state.phase = phase
        self._publish("phase")

    def set_mission(self, mission_id: MissionId | str) -> None:
        self.state.mission_id = MissionId.parse(mission_id)
        self._publish("mission_id")

    # -- budget ----------------------------------------------------------

    def set_budget(self, amount: int) -> None:
        if amount < 0:
            raise ContractViolation(f"Budget cannot be negative: {amount}")
        self.state.budget = amount
        self._publish("budget")

    def add_budget(self, amount: int) -> None:
        if self.state.budget + amount < 0:
            raise ContractViolation(f"Adjustment {amount} would drive budget negative")
        self.state.budget += amount
        self._publish("budget")

    def try_spend(self, amount: int) -> SpendResult:
        if amount < 0:
            raise ContractViolation(f"Cannot spend a negative amount: {amount}")
        if amount > self.state.budget:
            logger.warning("Rejected spend of %s with only %s available", amount, self.state.budget)
            return InsufficientFunds(needed=amount, available=self.state.budget)
        self.state.budget -= amount
        self._publish("budget")
        return Spent(amount=amount, remaining=self.state.budget)

    # -- dialogue --------------------------------------------------------

    def enqueue_dialogue(self, lines: Iterable[DialogueLine], on_complete: OnComplete | None = None) -> None:
        self.state.dialogue.enqueue(lines, on_complete)
        self._publish("dialogue")

    def current_line(self) -> DialogueLine | None:
        return self.state.dialogue.current()

    def completion_pending(self) -> bool:
        return self.state.dialogue.awaiting_completion

    def advance_dialogue(self) -> DialogueLine | None:
        line = self.state.dialogue.advance()
        if line is not None:
            self._publish("dialogue")
        return line

    # -- flags -----------------------------------------------------------

    def set_flag(self, key: str, value: Any) -> None:
        self.state.flags[key] = value
        self._publish("flags")

    def get_flag(self, key: str, default: Any = None) -> Any:
        return self.state.flags.get(key, default)

    # -- mission progress ------------------------------------------------

    def start_mission_progress(self, mission_id: MissionId) -> MissionProgress:
        existing = self.state.progress.get(mission_id)
        if existing is not None and existing.completed:
            raise ContractViolation(f"Mission {mission_id} is already complete")
        record = MissionProgress(mission_id=mission_id)
        self.state.progress[mission_id] = record
        self.state.scratch = Scratch()
        self._publish("progress")
        return record

    def _open_record(self, mission_id: MissionId) -> MissionProgress:
        record = self.state.progress.get(mission_id)
        if record is None:
            raise ContractViolation(f"Mission {mission_id} has not been started")
        if record.completed:
            raise ContractViolation(f"Mission {mission_id} is finalized")
        return record

    def commit_entity(self, mission_id: MissionId, name: str, settings: PCSettings) -> None:
        self._open_record(mission_id).entities[name] = settings
        self._publish("progress")

    def choose_equipment(self, mission_id: MissionId, option_id: str) -> None:
        self._open_record(mission_id).equipment = option_id
        self._publish("progress")

    def finalize_mission(self, mission_id: MissionId) -> None:
        self._open_record(mission_id).completed = True
        self._publish("progress")

    def update_scratch(self, **changes: Any) -> None:
        for key, value in changes.items():
            if not hasattr(self.state.scratch, key):
                raise ContractViolation(f"Unknown scratch field: {key}")
            setattr(self.state.scratch, key, value)
        self._publish("scratch")

    # -- port scan -------------------------------------------------------

    def begin_scan(self, delay: float | None = None) -> PortScan:
        self.cancel_scan()
        mission = self.catalog.mission(self.state.mission_id)
        self.state.scratch.scan_results = []
        scan = PortScan(
            mission.ports,
            protected=lambda: self.state.scratch.firewall_applied,
            delay=self.catalog.scan_delay_seconds if delay is None else delay,
            on_result=self._record_scan,
        )
        self.active_scan = scan
        return scan

    def _record_scan(self, result: PortResult) -> None:
        self.state.scratch.scan_results.append(result)
        self._publish("scratch")

    def cancel_scan(self) -> None:
        if self.active_scan is not None:
            self.active_scan.cancel()
            self.active_scan = None

    # -- reset -----------------------------------------------------------

    def reset_game(self) -> None:
        self.cancel_scan()
        self.state.dialogue.clear()
        self.state = self._initial_state()
        self._publish("reset")
