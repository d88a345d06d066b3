from __future__ import annotations

from typing import Iterable

from netquest.domain.events import UiEvent
from netquest.domain.outcomes import Invalid, ValidationOutcome
from netquest.domain.types import PCSettings
from netquest.sim.missions import mission_statuses
from netquest.sim.store import SessionStore
from netquest.systems.port_scan import PortResult
from netquest.web.api import schemas


def build_state_response(store: SessionStore) -> schemas.SessionStateResponse:
    state = store.state
    line = state.dialogue.current()
    scratch = state.scratch
    return schemas.SessionStateResponse(
        phase=state.phase.value,
        mission_id=str(state.mission_id),
        budget=state.budget,
        current_line=(
            schemas.DialogueLine(id=line.id, speaker=line.speaker.value, text=line.text) if line is not None else None
        ),
        queued_lines=len(state.dialogue),
        flags=dict(state.flags),
        progress=[
            schemas.MissionProgress(
                mission_id=str(record.mission_id),
                completed=record.completed,
                entities={name: _pc_settings(settings) for name, settings in record.entities.items()},
                equipment=record.equipment,
            )
            for record in (state.progress[key] for key in sorted(state.progress))
        ],
        scratch=schemas.Scratch(
            cart_total=scratch.cart.total if scratch.cart is not None else None,
            links=len(scratch.links),
            router_configured=scratch.router_configured,
            firewall_applied=scratch.firewall_applied,
            icmp_blocked=scratch.icmp_blocked,
            scan_results=port_results(scratch.scan_results),
            safety_choice=scratch.safety_choice,
        ),
        missions=[
            schemas.MissionStatus(id=str(s.id), title=s.title, description=s.description, status=s.status)
            for s in mission_statuses(store)
        ],
    )


def _pc_settings(settings: PCSettings) -> schemas.PCSettings:
    return schemas.PCSettings(
        ip_address=settings.ip_address,
        subnet_mask=settings.subnet_mask,
        gateway=settings.gateway,
        dns=settings.dns,
    )


def build_outcome(outcome: ValidationOutcome | None) -> schemas.Outcome | None:
    if outcome is None:
        return None
    if isinstance(outcome, Invalid):
        return schemas.Outcome(
            ok=False,
            kind=outcome.kind.value,
            title=outcome.title,
            explanation=outcome.explanation,
            detail=outcome.detail,
            data={key: value for key, value in outcome.data.items()},
        )
    advisory = outcome.advisory.explanation if outcome.advisory is not None else None
    return schemas.Outcome(ok=True, advisory=advisory)


def build_events(events: Iterable[UiEvent]) -> list[schemas.UiEvent]:
    return [schemas.UiEvent(kind=e.kind, message=e.message, data=e.data) for e in events]


def port_results(results: Iterable[PortResult]) -> list[schemas.PortResult]:
    return [schemas.PortResult(port=r.port, name=r.name, danger=r.danger, status=r.status) for r in results]
