from __future__ import annotations

from dataclasses import dataclass

from netquest.domain.actions import (
    Action,
    AdvanceDialogue,
    ChooseSafetyResponse,
    FinishSummary,
    ResetGame,
    RunNetworkTest,
    SelectEquipment,
    SelectMission,
    StartGame,
    StartPortScan,
    SubmitCart,
    SubmitFirewall,
    SubmitIPConfig,
    SubmitLink,
    SubmitPCSettings,
    SubmitRouterConfig,
)
from netquest.domain.events import UiEvent
from netquest.domain.outcomes import Invalid, ValidationOutcome
from netquest.domain.types import MissionId, Phase
from netquest.sim.missions import (
    SAFETY_FLAG,
    advance_cursor,
    begin_mission,
    finish_after,
    is_available,
)
from netquest.sim.state import SessionState
from netquest.sim.store import SessionStore
from netquest.systems.addressing import IPCandidate, PCCandidate, validate_ip_config, validate_pc_settings, validate_router
from netquest.systems.firewall import validate_firewall
from netquest.systems.port_scan import PortScan
from netquest.systems.purchasing import validate_cart, validate_purchase
from netquest.systems.topology import topology_complete, validate_link


@dataclass()
class ActionResult:
    ok: bool
    message: str | None
    message_kind: str | None
    state: SessionState
    ui_events: list[UiEvent]
    outcome: ValidationOutcome | None = None
    scan: PortScan | None = None


# Actions not listed here are accepted in any phase.
PHASE_GATES: dict[type, tuple[Phase, ...]] = {
    StartGame: (Phase.TITLE,),
    SubmitCart: (Phase.STORE,),
    SubmitLink: (Phase.TOPOLOGY,),
    SubmitRouterConfig: (Phase.CONFIG,),
    SubmitPCSettings: (Phase.CONFIG,),
    RunNetworkTest: (Phase.TEST,),
    SubmitFirewall: (Phase.FIREWALL,),
    StartPortScan: (Phase.FIREWALL,),
    ChooseSafetyResponse: (Phase.SECURITY_CHOICE,),
    SelectEquipment: (Phase.GROWING_STORE,),
    SubmitIPConfig: (Phase.NEW_PC_CONFIG,),
    FinishSummary: (Phase.SUMMARY,),
    SelectMission: (Phase.MISSION_SELECT,),
}


def apply_action(store: SessionStore, action: Action) -> ActionResult:
    ui_events: list[UiEvent] = []

    def ok(
        message: str | None,
        kind: str = "info",
        outcome: ValidationOutcome | None = None,
        scan: PortScan | None = None,
    ) -> ActionResult:
        return ActionResult(
            ok=True,
            message=message,
            message_kind=kind,
            state=store.state,
            ui_events=list(ui_events),
            outcome=outcome,
            scan=scan,
        )

    def fail(message: str, outcome: ValidationOutcome | None = None) -> ActionResult:
        return ActionResult(
            ok=False,
            message=message,
            message_kind="error",
            state=store.state,
            ui_events=list(ui_events),
            outcome=outcome,
        )

    def rejected(outcome: Invalid) -> ActionResult:
        ui_events.append(
            UiEvent(
                kind="validation",
                message=outcome.title,
                data={"kind": outcome.kind.value, "explanation": outcome.explanation, "detail": outcome.detail},
            )
        )
        return fail(outcome.title, outcome)

    required = PHASE_GATES.get(type(action))
    if required is not None and store.phase not in required:
        names = ", ".join(p.value for p in required)
        return fail(f"Not available during {store.phase.value} (needs {names})")
    if required is not None and store.completion_pending():
        # The step is already won; its payoff dialogue decides what comes next.
        return fail("Finish the current dialogue first")

    mission_id = store.mission_id

    if isinstance(action, StartGame):
        begin_mission(store, store.catalog.initial_mission)
        return ok("Mission started", "accent")

    if isinstance(action, AdvanceDialogue):
        line = store.advance_dialogue()
        if line is None:
            return ok(None)
        return ok(line.text)

    if isinstance(action, SubmitCart):
        mission = store.catalog.mission(mission_id)
        outcome = validate_cart(action.lines, store.budget, mission)
        if isinstance(outcome, Invalid):
            return rejected(outcome)
        spend = store.try_spend(outcome.value.total)
        if not spend.ok:
            return fail(f"Need ${spend.needed}, have ${spend.available}")
        store.update_scratch(cart=outcome.value)
        store.enqueue_dialogue(store.content.mission(mission_id).lines("topology_intro"))
        store.set_phase(Phase.TOPOLOGY)
        return ok(f"Purchased equipment for ${outcome.value.total}", "accent", outcome)

    if isinstance(action, SubmitLink):
        mission = store.catalog.mission(mission_id)
        outcome = validate_link(action.link, mission)
        if isinstance(outcome, Invalid):
            return rejected(outcome)
        if outcome.advisory is not None:
            ui_events.append(UiEvent(kind="advisory", message=outcome.advisory.title, data={"explanation": outcome.advisory.explanation}))
        links = [*store.state.scratch.links, action.link]
        store.update_scratch(links=links)
        if topology_complete(links, [e.name for e in mission.entities]):
            store.enqueue_dialogue(store.content.mission(mission_id).lines("config_intro"))
            store.set_phase(Phase.CONFIG)
            return ok("Network cabled", "accent", outcome)
        return ok("Cable connected", "info", outcome)

    if isinstance(action, SubmitRouterConfig):
        outcome = validate_router(action.candidate, store.catalog.mission(mission_id))
        if isinstance(outcome, Invalid):
            return rejected(outcome)
        store.update_scratch(router_configured=True)
        return ok("Router configured", "accent", outcome)

    if isinstance(action, SubmitPCSettings):
        if not store.state.scratch.router_configured:
            return fail("Configure the router first")
        mission = store.catalog.mission(mission_id)
        record = store.state.progress[mission_id]
        outcome = validate_pc_settings(PCCandidate(action.entity, action.settings), record.entities, mission)
        if isinstance(outcome, Invalid):
            return rejected(outcome)
        store.commit_entity(mission_id, action.entity, outcome.value)
        if all(e.name in record.entities for e in mission.entities):
            store.set_phase(Phase.TEST)
            return ok("All PCs configured", "accent", outcome)
        return ok(f"{mission.entity(action.entity).label} configured", "info", outcome)

    if isinstance(action, RunNetworkTest):
        finish_after(store, store.content.mission(mission_id).lines("success"))
        return ok("Network test passed", "accent")

    if isinstance(action, SubmitFirewall):
        outcome = validate_firewall(dict(action.toggles), store.catalog.mission(mission_id))
        if isinstance(outcome, Invalid):
            store.update_scratch(firewall_applied=False, icmp_blocked=False)
            return rejected(outcome)
        store.update_scratch(firewall_applied=True, icmp_blocked=outcome.value.icmp_blocked)
        store.enqueue_dialogue(
            store.content.mission(mission_id).lines("success"),
            lambda: store.set_phase(Phase.SECURITY_CHOICE),
        )
        return ok("Firewall applied", "accent", outcome)

    if isinstance(action, StartPortScan):
        return ok("Scanning ports", "info", scan=store.begin_scan(action.delay))

    if isinstance(action, ChooseSafetyResponse):
        choice = store.content.mission(mission_id).choice
        if choice is None:
            return fail("This mission has no security question")
        option = choice.option(action.option_id)
        store.update_scratch(safety_choice=option.id)
        store.set_flag(SAFETY_FLAG, option.correct)
        finish_after(store, option.response)
        return ok(option.text, "accent" if option.correct else "info")

    if isinstance(action, SelectEquipment):
        mission = store.catalog.mission(mission_id)
        outcome = validate_purchase(action.option_id, store.budget, mission)
        if isinstance(outcome, Invalid):
            if outcome.lines:
                store.enqueue_dialogue(outcome.lines)
            return rejected(outcome)
        option = outcome.value
        spend = store.try_spend(option.cost)
        if not spend.ok:
            return fail(f"Need ${spend.needed}, have ${spend.available}")
        store.choose_equipment(mission_id, option.id)
        store.enqueue_dialogue(option.reaction, lambda: store.set_phase(Phase.NEW_PC_CONFIG))
        return ok(f"{option.name} for ${option.cost}", "accent", outcome)

    if isinstance(action, SubmitIPConfig):
        mission = store.catalog.mission(mission_id)
        record = store.state.progress[mission_id]
        outcome = validate_ip_config(IPCandidate(action.entity, action.ip), record.entities, mission)
        if isinstance(outcome, Invalid):
            return rejected(outcome)
        store.commit_entity(mission_id, action.entity, outcome.value)
        if all(e.name in record.entities for e in mission.entities):
            finish_after(
                store,
                store.content.mission(mission_id).lines("config_success", "test_success", "foreshadowing"),
            )
            return ok("New PCs online", "accent", outcome)
        return ok(f"{mission.entity(action.entity).label} configured", "info", outcome)

    if isinstance(action, FinishSummary):
        advance_cursor(store)
        return ok("Mission complete", "accent")

    if isinstance(action, SelectMission):
        target = MissionId.parse(action.mission_id)
        if not is_available(store, target):
            return fail(f"Mission {target} is locked")
        begin_mission(store, target)
        return ok(f"Mission {target} started", "accent")

    if isinstance(action, ResetGame):
        store.reset_game()
        return ok("Game reset", "info")

    return fail("Unknown action")
