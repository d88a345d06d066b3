"""Mission entry, intro hand-offs and completion.

Each playable mission registers the handler that runs once its intro
dialogue drains; ``begin_mission`` looks it up by mission id.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable

from netquest.domain.errors import ContractViolation
from netquest.domain.types import DialogueLine, MissionId, Phase
from netquest.sim.store import SessionStore

logger = logging.getLogger(__name__)

IntroHandler = Callable[[SessionStore], None]

INTRO_HANDLERS: dict[MissionId, IntroHandler] = {}

SAFETY_FLAG = "safety_advice_correct"


def on_intro_complete(token: str) -> Callable[[IntroHandler], IntroHandler]:
    mission_id = MissionId.parse(token)

    def register(handler: IntroHandler) -> IntroHandler:
        if mission_id in INTRO_HANDLERS:
            raise ContractViolation(f"Intro handler for {mission_id} registered twice")
        INTRO_HANDLERS[mission_id] = handler
        return handler

    return register


@on_intro_complete("1.1")
def _hook_em_up(store: SessionStore) -> None:
    store.enqueue_dialogue(store.content.mission(store.mission_id).lines("store_intro"))
    store.set_phase(Phase.STORE)


@on_intro_complete("1.2")
def _lock_the_door(store: SessionStore) -> None:
    store.enqueue_dialogue(store.content.mission(store.mission_id).lines("threat", "config_intro"))
    store.set_phase(Phase.FIREWALL)


@on_intro_complete("1.3")
def _growing_pains(store: SessionStore) -> None:
    store.enqueue_dialogue(store.content.mission(store.mission_id).lines("equipment", "stipulation"))
    store.set_phase(Phase.GROWING_STORE)


def begin_mission(store: SessionStore, mission_id: MissionId) -> None:
    mission = store.catalog.mission(mission_id)
    if not mission.playable:
        raise ContractViolation(f"Mission {mission_id} is not playable yet")
    handler = INTRO_HANDLERS.get(mission.id)
    if handler is None:
        raise ContractViolation(f"No intro handler registered for mission {mission.id}")
    store.set_mission(mission.id)
    store.set_budget(mission.budget)
    store.start_mission_progress(mission.id)
    store.set_phase(Phase.INTRO)
    store.enqueue_dialogue(store.content.mission(mission.id).lines("intro"), lambda: handler(store))
    logger.info("Mission %s started with budget %s", mission.id, mission.budget)


def complete_mission(store: SessionStore) -> None:
    """Pay the reward, freeze progress and show the summary."""
    mission = store.catalog.mission(store.mission_id)
    if mission.reward:
        store.add_budget(mission.reward)
    store.finalize_mission(mission.id)
    store.set_phase(Phase.SUMMARY)


def finish_after(store: SessionStore, lines: Iterable[DialogueLine]) -> None:
    store.enqueue_dialogue(lines, lambda: complete_mission(store))


def advance_cursor(store: SessionStore) -> None:
    """Leave the summary: on to mission select, or the end screen."""
    next_id = store.catalog.next_mission(store.mission_id)
    if next_id is not None and store.catalog.mission(next_id).playable:
        store.set_mission(next_id)
        store.set_phase(Phase.MISSION_SELECT)
    else:
        store.set_phase(Phase.COMPLETE)


@dataclass(frozen=True)
class MissionStatus:
    id: MissionId
    title: str
    description: str
    status: str  # "complete" | "available" | "locked"


def mission_statuses(store: SessionStore) -> list[MissionStatus]:
    statuses = []
    for mission in store.catalog.ordered():
        if store.state.is_complete(mission.id):
            status = "complete"
        elif mission.playable and mission.id == store.mission_id:
            status = "available"
        else:
            status = "locked"
        statuses.append(MissionStatus(mission.id, mission.title, mission.description, status))
    return statuses


def is_available(store: SessionStore, mission_id: MissionId) -> bool:
    return any(s.id == mission_id and s.status == "available" for s in mission_statuses(store))
