from __future__ import annotations

from fastapi import APIRouter, Request, Response

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
from netquest.domain.types import PCSettings
from netquest.sim.reducer import apply_action
from netquest.systems.addressing import RouterCandidate
from netquest.systems.purchasing import CartLine
from netquest.systems.topology import DeviceKind, Endpoint, Link, PortKind
from netquest.view.catalog import build_catalog
from netquest.web.api import mappers, schemas
from netquest.web.session import WebSession, get_or_create_session

router = APIRouter(prefix="/api")


def _parse_endpoint(value: schemas.Endpoint) -> Endpoint:
    try:
        return Endpoint(device=value.device, kind=DeviceKind(value.kind), port=PortKind(value.port))
    except ValueError as exc:
        raise ValueError(f"Unknown endpoint: {value.kind}/{value.port}") from exc


def _build_response(session: WebSession, *, ok: bool, message: str | None = None, kind: str = "info") -> schemas.ApiResponse:
    return schemas.ApiResponse(
        ok=ok,
        message=message,
        message_kind=kind,
        state=mappers.build_state_response(session.store),
    )


def _from_result(session: WebSession, result) -> schemas.ApiResponse:
    return schemas.ApiResponse(
        ok=result.ok,
        message=result.message,
        message_kind=result.message_kind,
        state=mappers.build_state_response(session.store),
        outcome=mappers.build_outcome(result.outcome),
        events=mappers.build_events(result.ui_events),
    )


async def _dispatch(request: Request, response: Response, build_action) -> schemas.ApiResponse:
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        try:
            action: Action = build_action()
            result = apply_action(session.store, action)
            return _from_result(session, result)
        except ValueError as exc:
            return _build_response(session, ok=False, message=str(exc), kind="error")


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.get("/state", response_model=schemas.SessionStateResponse)
async def get_state(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    async with session.lock:
        data = mappers.build_state_response(session.store)
    response.set_cookie("session_id", session_id, httponly=True)
    return data


@router.get("/catalog", response_model=schemas.CatalogResponse)
async def get_catalog(request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    async with session.lock:
        data = build_catalog(session.store.catalog, session.store.content)
    response.set_cookie("session_id", session_id, httponly=True)
    return data


@router.post("/reset", response_model=schemas.ApiResponse)
async def reset(request: Request, response: Response):
    return await _dispatch(request, response, ResetGame)


@router.post("/actions/start", response_model=schemas.ApiResponse)
async def start_game(request: Request, response: Response):
    return await _dispatch(request, response, StartGame)


@router.post("/actions/advance", response_model=schemas.ApiResponse)
async def advance_dialogue(request: Request, response: Response):
    return await _dispatch(request, response, AdvanceDialogue)


@router.post("/actions/cart", response_model=schemas.ApiResponse)
async def submit_cart(payload: schemas.CartRequest, request: Request, response: Response):
    return await _dispatch(
        request,
        response,
        lambda: SubmitCart(lines=tuple(CartLine(item_id=i.item_id, quantity=i.quantity) for i in payload.items)),
    )


@router.post("/actions/link", response_model=schemas.ApiResponse)
async def submit_link(payload: schemas.LinkRequest, request: Request, response: Response):
    return await _dispatch(
        request,
        response,
        lambda: SubmitLink(link=Link(a=_parse_endpoint(payload.source), b=_parse_endpoint(payload.target))),
    )


@router.post("/actions/router", response_model=schemas.ApiResponse)
async def submit_router(payload: schemas.RouterConfigRequest, request: Request, response: Response):
    candidate = RouterCandidate(
        wan_ip=payload.wan_ip,
        wan_subnet_mask=payload.wan_subnet_mask,
        wan_gateway=payload.wan_gateway,
        wan_dns=payload.wan_dns,
        lan_ip=payload.lan_ip,
        lan_subnet_mask=payload.lan_subnet_mask,
        dhcp_enabled=payload.dhcp_enabled,
    )
    return await _dispatch(request, response, lambda: SubmitRouterConfig(candidate=candidate))


@router.post("/actions/pc", response_model=schemas.ApiResponse)
async def submit_pc(payload: schemas.PCSettingsRequest, request: Request, response: Response):
    settings = PCSettings(
        ip_address=payload.ip_address,
        subnet_mask=payload.subnet_mask,
        gateway=payload.gateway,
        dns=payload.dns,
    )
    return await _dispatch(request, response, lambda: SubmitPCSettings(entity=payload.entity, settings=settings))


@router.post("/actions/test", response_model=schemas.ApiResponse)
async def run_network_test(request: Request, response: Response):
    return await _dispatch(request, response, RunNetworkTest)


@router.post("/actions/firewall", response_model=schemas.ApiResponse)
async def submit_firewall(payload: schemas.FirewallRequest, request: Request, response: Response):
    return await _dispatch(request, response, lambda: SubmitFirewall(toggles=tuple(sorted(payload.rules.items()))))


@router.post("/actions/scan", response_model=schemas.ScanResponse)
async def run_port_scan(payload: schemas.ScanRequest, request: Request, response: Response):
    session_id, session = get_or_create_session(request.cookies.get("session_id"))
    response.set_cookie("session_id", session_id, httponly=True)
    async with session.lock:
        result = apply_action(session.store, StartPortScan(delay=payload.delay_ms / 1000.0))
        if not result.ok or result.scan is None:
            base = _from_result(session, result)
            return schemas.ScanResponse(**base.model_dump())
        scan = result.scan
    # Released while pacing so a phase change can cancel the scan.
    ports = await scan.run()
    async with session.lock:
        cancelled = scan.cancelled
        return schemas.ScanResponse(
            ok=not cancelled,
            message="Scan cancelled" if cancelled else "Scan complete",
            message_kind="info",
            state=mappers.build_state_response(session.store),
            ports=mappers.port_results(ports),
            cancelled=cancelled,
        )


@router.post("/actions/security-choice", response_model=schemas.ApiResponse)
async def choose_safety_response(payload: schemas.ChoiceRequest, request: Request, response: Response):
    return await _dispatch(request, response, lambda: ChooseSafetyResponse(option_id=payload.option_id))


@router.post("/actions/equipment", response_model=schemas.ApiResponse)
async def select_equipment(payload: schemas.EquipmentRequest, request: Request, response: Response):
    return await _dispatch(request, response, lambda: SelectEquipment(option_id=payload.option_id))


@router.post("/actions/ip", response_model=schemas.ApiResponse)
async def submit_ip(payload: schemas.IPConfigRequest, request: Request, response: Response):
    return await _dispatch(request, response, lambda: SubmitIPConfig(entity=payload.entity, ip=payload.ip))


@router.post("/actions/summary", response_model=schemas.ApiResponse)
async def finish_summary(request: Request, response: Response):
    return await _dispatch(request, response, FinishSummary)


@router.post("/actions/mission", response_model=schemas.ApiResponse)
async def select_mission(payload: schemas.MissionSelectRequest, request: Request, response: Response):
    return await _dispatch(request, response, lambda: SelectMission(mission_id=payload.mission_id))
