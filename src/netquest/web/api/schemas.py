from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_by_name=True)


class DialogueLine(CamelModel):
    id: str
    speaker: str
    text: str


class PCSettings(CamelModel):
    ip_address: str = Field(..., alias="ipAddress")
    subnet_mask: str = Field(..., alias="subnetMask")
    gateway: str
    dns: str


class MissionProgress(CamelModel):
    mission_id: str = Field(..., alias="missionId")
    completed: bool
    entities: Dict[str, PCSettings]
    equipment: Optional[str] = None


class MissionStatus(CamelModel):
    id: str
    title: str
    description: str
    status: str


class PortResult(CamelModel):
    port: int
    name: str
    danger: str
    status: str


class Scratch(CamelModel):
    cart_total: Optional[int] = Field(None, alias="cartTotal")
    links: int
    router_configured: bool = Field(..., alias="routerConfigured")
    firewall_applied: bool = Field(..., alias="firewallApplied")
    icmp_blocked: bool = Field(..., alias="icmpBlocked")
    scan_results: List[PortResult] = Field(default_factory=list, alias="scanResults")
    safety_choice: Optional[str] = Field(None, alias="safetyChoice")


class SessionStateResponse(CamelModel):
    phase: str
    mission_id: str = Field(..., alias="missionId")
    budget: int
    current_line: Optional[DialogueLine] = Field(None, alias="currentLine")
    queued_lines: int = Field(..., alias="queuedLines")
    flags: Dict[str, Any]
    progress: List[MissionProgress]
    scratch: Scratch
    missions: List[MissionStatus]


class Outcome(CamelModel):
    ok: bool
    kind: Optional[str] = None
    title: Optional[str] = None
    explanation: Optional[str] = None
    detail: Optional[str] = None
    advisory: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class UiEvent(CamelModel):
    kind: str
    message: str
    data: Optional[Dict[str, Any]] = None


class ApiResponse(CamelModel):
    ok: bool
    message: Optional[str] = None
    message_kind: Optional[str] = Field(None, alias="messageKind")
    state: Optional[SessionStateResponse] = None
    outcome: Optional[Outcome] = None
    events: List[UiEvent] = Field(default_factory=list)


class ScanResponse(ApiResponse):
    ports: List[PortResult] = Field(default_factory=list)
    cancelled: bool = False


class CatalogResponse(CamelModel):
    initial_mission: str = Field(..., alias="initialMission")
    initial_budget: int = Field(..., alias="initialBudget")
    missions: List[Dict[str, Any]]


class CartItem(CamelModel):
    item_id: str = Field(..., alias="itemId")
    quantity: int = Field(1, ge=0)


class CartRequest(CamelModel):
    items: List[CartItem]


class Endpoint(CamelModel):
    device: str
    kind: str
    port: str = "eth"


class LinkRequest(CamelModel):
    source: Endpoint
    target: Endpoint


class RouterConfigRequest(CamelModel):
    wan_ip: str = Field(..., alias="wanIp")
    wan_subnet_mask: str = Field(..., alias="wanSubnetMask")
    wan_gateway: str = Field(..., alias="wanGateway")
    wan_dns: str = Field(..., alias="wanDns")
    lan_ip: str = Field(..., alias="lanIp")
    lan_subnet_mask: str = Field(..., alias="lanSubnetMask")
    dhcp_enabled: bool = Field(False, alias="dhcpEnabled")


class PCSettingsRequest(CamelModel):
    entity: str
    ip_address: str = Field("", alias="ipAddress")
    subnet_mask: str = Field("", alias="subnetMask")
    gateway: str = ""
    dns: str = ""


class FirewallRequest(CamelModel):
    rules: Dict[str, bool]


class ScanRequest(CamelModel):
    delay_ms: int = Field(300, alias="delayMs", ge=0, le=5000)


class ChoiceRequest(CamelModel):
    option_id: str = Field(..., alias="optionId")


class EquipmentRequest(CamelModel):
    option_id: str = Field(..., alias="optionId")


class IPConfigRequest(CamelModel):
    entity: str
    ip: Optional[str] = None


class MissionSelectRequest(CamelModel):
    mission_id: str = Field(..., alias="missionId")
