"""Data-driven rule catalog."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from netquest.domain.errors import CatalogError, ContractViolation
from netquest.domain.outcomes import ErrorPayload
from netquest.domain.types import DialogueLine, MissionId, Speaker

DEFAULT_DATA_DIR = Path(__file__).resolve().parents[1] / "data"


@dataclass(frozen=True)
class LanSettings:
    """Canonical LAN values copied onto every accepted PC."""

    prefix: str
    subnet_mask: str
    gateway: str
    dns: str


@dataclass(frozen=True)
class Device:
    name: str
    label: str
    ip: str


@dataclass(frozen=True)
class EquipmentOption:
    id: str
    name: str
    cost: int
    description: str
    eligible: bool
    recommended: bool
    reaction: tuple[DialogueLine, ...]


@dataclass(frozen=True)
class StoreItem:
    id: str
    name: str
    category: str  # "router" | "hub" | "cable" | "other"
    price: int
    description: str
    red_herring: ErrorPayload | None = None


@dataclass(frozen=True)
class FirewallRuleDef:
    id: str
    name: str
    description: str
    critical: bool


@dataclass(frozen=True)
class PortInfo:
    port: int
    name: str
    danger: str  # "low" | "medium" | "high"


@dataclass(frozen=True)
class WanSettings:
    ip_address: str
    subnet_mask: str
    gateway: str
    dns1: str
    dns2: str


@dataclass(frozen=True)
class RouterLanSettings:
    ip_address: str
    subnet_mask: str
    dhcp_enabled: bool


@dataclass(frozen=True)
class RouterSettings:
    wan: WanSettings
    lan: RouterLanSettings


@dataclass(frozen=True)
class SummarySection:
    icon: str
    title: str
    content: str
    details: tuple[str, ...]


@dataclass(frozen=True)
class MissionCatalog:
    """Everything the validators need to know about one mission."""

    id: MissionId
    title: str
    description: str
    budget: int
    reward: int
    playable: bool
    lan: LanSettings | None
    existing_devices: tuple[Device, ...]
    entities: tuple[Device, ...]
    equipment: dict[str, EquipmentOption]
    store_items: dict[str, StoreItem]
    min_cables: int
    firewall_rules: dict[str, FirewallRuleDef]
    ports: tuple[PortInfo, ...]
    router: RouterSettings | None
    errors: dict[str, ErrorPayload]
    summary: tuple[SummarySection, ...]

    def error(self, kind: str) -> ErrorPayload:
        try:
            return self.errors[kind]
        except KeyError as exc:
            raise CatalogError(f"Mission {self.id}: no error payload for {kind!r}") from exc

    def entity(self, name: str) -> Device:
        for entity in self.entities:
            if entity.name == name:
                return entity
        raise ContractViolation(f"Mission {self.id}: unknown entity {name!r}")


@dataclass(frozen=True)
class RuleCatalog:
    """Loaded and validated catalog."""

    initial_mission: MissionId
    initial_budget: int
    scan_delay_seconds: float
    missions: dict[MissionId, MissionCatalog]

    @staticmethod
    def load(data_dir: Path | None = None) -> "RuleCatalog":
        """Load the catalog from ``catalog.json`` in the data directory."""
        path = (data_dir or DEFAULT_DATA_DIR) / "catalog.json"
        data = load_json(path)
        if "missions" not in data:
            raise CatalogError(f"{path}: missing 'missions' key")
        missions: dict[MissionId, MissionCatalog] = {}
        for item in data["missions"]:
            mission = _parse_mission(item, path)
            if mission.id in missions:
                raise CatalogError(f"{path}: duplicate mission {mission.id}")
            missions[mission.id] = mission
        initial = _parse_mission_id(data.get("initial_mission", "1.1"), path)
        if initial not in missions:
            raise CatalogError(f"{path}: initial mission {initial} is not defined")
        return RuleCatalog(
            initial_mission=initial,
            initial_budget=int(data.get("initial_budget", missions[initial].budget)),
            scan_delay_seconds=float(data.get("scan_delay_seconds", 0.3)),
            missions=missions,
        )

    def mission(self, mission_id: MissionId | str) -> MissionCatalog:
        key = MissionId.parse(mission_id)
        try:
            return self.missions[key]
        except KeyError as exc:
            raise ContractViolation(f"Unknown mission: {key}") from exc

    def next_mission(self, mission_id: MissionId) -> MissionId | None:
        candidate = mission_id.next()
        return candidate if candidate in self.missions else None

    def ordered(self) -> list[MissionCatalog]:
        return [self.missions[key] for key in sorted(self.missions)]


def load_json(path: Path) -> dict[str, Any]:
    """Load JSON file."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            return json.load(handle)
    except FileNotFoundError as exc:
        raise CatalogError(f"Catalog file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Invalid JSON in {path}: {exc}") from exc


def parse_lines(raw: Any, path: Path) -> tuple[DialogueLine, ...]:
    if not isinstance(raw, list):
        raise CatalogError(f"{path}: dialogue batch must be array")
    lines: list[DialogueLine] = []
    for item in raw:
        if not isinstance(item, dict):
            raise CatalogError(f"{path}: dialogue line must be object")
        line_id = item.get("id")
        if not isinstance(line_id, str):
            raise CatalogError(f"{path}: line.id must be string")
        try:
            speaker = Speaker(item.get("speaker", "narrator"))
        except ValueError as exc:
            raise CatalogError(f"{path}: unknown speaker in line {line_id}") from exc
        lines.append(DialogueLine(id=line_id, speaker=speaker, text=str(item.get("text", ""))))
    return tuple(lines)


def _parse_mission_id(value: Any, path: Path) -> MissionId:
    try:
        return MissionId.parse(str(value))
    except ContractViolation as exc:
        raise CatalogError(f"{path}: {exc}") from exc


def _parse_payload(item: Any, path: Path) -> ErrorPayload:
    if not isinstance(item, dict) or not isinstance(item.get("title"), str):
        raise CatalogError(f"{path}: error payload needs a title")
    return ErrorPayload(
        title=item["title"],
        explanation=str(item.get("explanation", "")),
        detail=str(item.get("detail", "")),
    )


def _parse_devices(raw: Any, path: Path) -> tuple[Device, ...]:
    if not isinstance(raw, list):
        raise CatalogError(f"{path}: device list must be array")
    devices = []
    for item in raw:
        if not isinstance(item, dict) or not isinstance(item.get("name"), str):
            raise CatalogError(f"{path}: device.name must be string")
        devices.append(Device(name=item["name"], label=str(item.get("label", item["name"])), ip=str(item.get("ip", ""))))
    return tuple(devices)


def _parse_mission(item: Any, path: Path) -> MissionCatalog:
    if not isinstance(item, dict):
        raise CatalogError(f"{path}: mission entry must be object")
    mission_id = _parse_mission_id(item.get("id"), path)

    lan_raw = item.get("lan")
    lan = None
    if isinstance(lan_raw, dict):
        lan = LanSettings(
            prefix=str(lan_raw["prefix"]),
            subnet_mask=str(lan_raw.get("subnet_mask", "255.255.255.0")),
            gateway=str(lan_raw["gateway"]),
            dns=str(lan_raw.get("dns", lan_raw["gateway"])),
        )

    equipment: dict[str, EquipmentOption] = {}
    for option in item.get("equipment", []):
        if not isinstance(option, dict) or not isinstance(option.get("id"), str):
            raise CatalogError(f"{path}: equipment.id must be string")
        equipment[option["id"]] = EquipmentOption(
            id=option["id"],
            name=str(option.get("name", option["id"])),
            cost=int(option.get("cost", 0)),
            description=str(option.get("description", "")),
            eligible=bool(option.get("eligible", True)),
            recommended=bool(option.get("recommended", False)),
            reaction=parse_lines(option.get("reaction", []), path),
        )

    store_items: dict[str, StoreItem] = {}
    for store_item in item.get("store_items", []):
        if not isinstance(store_item, dict) or not isinstance(store_item.get("id"), str):
            raise CatalogError(f"{path}: store_item.id must be string")
        red_herring = store_item.get("red_herring")
        store_items[store_item["id"]] = StoreItem(
            id=store_item["id"],
            name=str(store_item.get("name", store_item["id"])),
            category=str(store_item.get("category", "other")),
            price=int(store_item.get("price", 0)),
            description=str(store_item.get("description", "")),
            red_herring=_parse_payload(red_herring, path) if red_herring is not None else None,
        )

    firewall_rules: dict[str, FirewallRuleDef] = {}
    for rule in item.get("firewall_rules", []):
        if not isinstance(rule, dict) or not isinstance(rule.get("id"), str):
            raise CatalogError(f"{path}: firewall_rule.id must be string")
        firewall_rules[rule["id"]] = FirewallRuleDef(
            id=rule["id"],
            name=str(rule.get("name", rule["id"])),
            description=str(rule.get("description", "")),
            critical=bool(rule.get("critical", False)),
        )

    router = None
    router_raw = item.get("router")
    if isinstance(router_raw, dict):
        wan = router_raw.get("wan", {})
        lan_cfg = router_raw.get("lan", {})
        router = RouterSettings(
            wan=WanSettings(
                ip_address=str(wan["ip_address"]),
                subnet_mask=str(wan["subnet_mask"]),
                gateway=str(wan["gateway"]),
                dns1=str(wan["dns1"]),
                dns2=str(wan.get("dns2", "")),
            ),
            lan=RouterLanSettings(
                ip_address=str(lan_cfg["ip_address"]),
                subnet_mask=str(lan_cfg["subnet_mask"]),
                dhcp_enabled=bool(lan_cfg.get("dhcp_enabled", False)),
            ),
        )

    errors_raw = item.get("errors", {})
    if not isinstance(errors_raw, dict):
        raise CatalogError(f"{path}: mission.errors must be object")

    summary = tuple(
        SummarySection(
            icon=str(section.get("icon", "")),
            title=str(section.get("title", "")),
            content=str(section.get("content", "")),
            details=tuple(str(d) for d in section.get("details", [])),
        )
        for section in item.get("summary", [])
    )

    return MissionCatalog(
        id=mission_id,
        title=str(item.get("title", mission_id)),
        description=str(item.get("description", "")),
        budget=int(item.get("budget", 0)),
        reward=int(item.get("reward", 0)),
        playable=bool(item.get("playable", True)),
        lan=lan,
        existing_devices=_parse_devices(item.get("existing_devices", []), path),
        entities=_parse_devices(item.get("entities", []), path),
        equipment=equipment,
        store_items=store_items,
        min_cables=int(item.get("min_cables", 0)),
        firewall_rules=firewall_rules,
        ports=tuple(
            PortInfo(port=int(p["port"]), name=str(p.get("name", "")), danger=str(p.get("danger", "low")))
            for p in item.get("ports", [])
        ),
        router=router,
        errors={str(k): _parse_payload(v, path) for k, v in errors_raw.items()},
        summary=summary,
    )
