"""Address assignment checks: batch IP picks, full PC settings, router settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from netquest.domain.errors import ContractViolation
from netquest.domain.outcomes import (
    IPErrorKind,
    PCSettingsErrorKind,
    RouterErrorKind,
    Valid,
    ValidationOutcome,
)
from netquest.domain.types import PCSettings
from netquest.rules.catalog import Device, LanSettings, MissionCatalog, RouterSettings
from netquest.systems.rule_chain import Rule, evaluate


@dataclass(frozen=True)
class IPCandidate:
    entity: str
    ip: str | None


@dataclass(frozen=True)
class PCCandidate:
    entity: str
    settings: PCSettings


@dataclass(frozen=True)
class RouterCandidate:
    wan_ip: str
    wan_subnet_mask: str
    wan_gateway: str
    wan_dns: str
    lan_ip: str
    lan_subnet_mask: str
    dhcp_enabled: bool


def three_octet_prefix(ip: str) -> str:
    parts = ip.split(".")
    if len(parts) >= 3:
        return ".".join(parts[:3])
    return ip


def _require_lan(mission: MissionCatalog) -> LanSettings:
    if mission.lan is None:
        raise ContractViolation(f"Mission {mission.id} has no LAN to configure")
    return mission.lan


def _other_owner(ip: str, entity: str, committed: Mapping[str, PCSettings]) -> str | None:
    for name, settings in committed.items():
        if name != entity and settings.ip_address == ip:
            return name
    return None


def _existing_owner(ip: str, devices: tuple[Device, ...]) -> Device | None:
    for device in devices:
        if device.ip == ip:
            return device
    return None


def _host_octet(ip: str) -> int | None:
    parts = ip.split(".")
    if len(parts) != 4 or not parts[3].isdigit():
        return None
    return int(parts[3])


def _usable_host(ip: str) -> bool:
    # .0 is the network, .255 broadcast, .1 the router.
    host = _host_octet(ip)
    return host is not None and 2 <= host <= 254


def _label(mission: MissionCatalog, name: str) -> str:
    for device in mission.entities + mission.existing_devices:
        if device.name == name:
            return device.label
    return name


def validate_ip_config(
    candidate: IPCandidate,
    session_so_far: Mapping[str, PCSettings],
    mission: MissionCatalog,
) -> ValidationOutcome:
    """Check one IP pick for a new-PC batch.

    ``session_so_far`` holds the entities already committed this batch, so
    a later PC sees the addresses handed out before it.
    """
    lan = _require_lan(mission)
    mission.entity(candidate.entity)
    ip = (candidate.ip or "").strip()

    def error(kind: IPErrorKind):
        return lambda _: mission.error(kind.value)

    chain = [
        Rule(IPErrorKind.MISSING, lambda _: not ip, error(IPErrorKind.MISSING)),
        Rule(
            IPErrorKind.DUPLICATE_IP,
            lambda c: _other_owner(ip, c.entity, session_so_far) is not None,
            error(IPErrorKind.DUPLICATE_IP),
            data=lambda c: {"owner": _label(mission, _other_owner(ip, c.entity, session_so_far) or "")},
        ),
        Rule(
            IPErrorKind.WRONG_SUBNET,
            lambda _: not ip.startswith(lan.prefix),
            error(IPErrorKind.WRONG_SUBNET),
            data=lambda _: {"subnet": three_octet_prefix(ip)},
        ),
        Rule(
            IPErrorKind.DUPLICATE_EXISTING,
            lambda _: _existing_owner(ip, mission.existing_devices) is not None,
            error(IPErrorKind.DUPLICATE_EXISTING),
            data=lambda _: {"owner": _existing_owner(ip, mission.existing_devices).label},
        ),
        Rule(
            IPErrorKind.RESERVED_HOST,
            lambda _: not _usable_host(ip),
            error(IPErrorKind.RESERVED_HOST),
            data=lambda c: {"ip": ip, "expected": mission.entity(c.entity).ip},
        ),
    ]
    return evaluate(
        candidate,
        chain,
        lambda _: Valid(PCSettings(ip_address=ip, subnet_mask=lan.subnet_mask, gateway=lan.gateway, dns=lan.dns)),
    )


def validate_pc_settings(
    candidate: PCCandidate,
    committed: Mapping[str, PCSettings],
    mission: MissionCatalog,
) -> ValidationOutcome:
    """Check a hand-typed PC configuration (all four fields)."""
    lan = _require_lan(mission)
    suggested = mission.entity(candidate.entity).ip
    s = candidate.settings
    ip = s.ip_address.strip()
    peer_ips = {settings.ip_address for name, settings in committed.items() if name != candidate.entity}
    peer_ips |= {device.ip for device in mission.entities + mission.existing_devices}
    peer_ips.discard(lan.gateway)

    def error(key: str):
        return lambda _: mission.error(key)

    chain = [
        Rule(PCSettingsErrorKind.MISSING, lambda _: not ip, error("missing")),
        Rule(
            PCSettingsErrorKind.DUPLICATE_IP,
            lambda c: _other_owner(ip, c.entity, committed) is not None,
            error("duplicateIP"),
            data=lambda c: {"owner": _label(mission, _other_owner(ip, c.entity, committed) or "")},
        ),
        Rule(
            PCSettingsErrorKind.WRONG_SUBNET,
            lambda _: not ip.startswith(lan.prefix),
            error("wrongPCSubnet"),
            data=lambda _: {"subnet": three_octet_prefix(ip)},
        ),
        Rule(PCSettingsErrorKind.GATEWAY_TO_SELF, lambda _: s.gateway == ip, error("gatewayToSelf")),
        Rule(
            PCSettingsErrorKind.GATEWAY_TO_PC,
            lambda _: s.gateway != lan.gateway and s.gateway in peer_ips,
            error("gatewayToPC"),
        ),
        Rule(
            PCSettingsErrorKind.WRONG_GATEWAY,
            lambda _: s.gateway != lan.gateway,
            error("wrongGateway"),
            data=lambda _: {"expected": lan.gateway},
        ),
        Rule(PCSettingsErrorKind.WRONG_SUBNET_MASK, lambda _: s.subnet_mask != lan.subnet_mask, error("wrongSubnetMask")),
        Rule(
            PCSettingsErrorKind.WRONG_DNS,
            lambda _: s.dns != lan.dns,
            error("wrongDNS"),
            data=lambda _: {"expected": lan.dns},
        ),
        Rule(
            PCSettingsErrorKind.RESERVED_HOST,
            lambda _: ip != suggested and not _usable_host(ip),
            error("reservedHost"),
            data=lambda _: {"expected": suggested},
        ),
    ]
    return evaluate(
        candidate,
        chain,
        lambda c: Valid(PCSettings(ip_address=ip, subnet_mask=s.subnet_mask, gateway=s.gateway, dns=s.dns)),
    )


def validate_router(candidate: RouterCandidate, mission: MissionCatalog) -> ValidationOutcome:
    """WAN fields are compared to the ISP sheet first, then the LAN side."""
    if mission.router is None:
        raise ContractViolation(f"Mission {mission.id} has no router to configure")
    router: RouterSettings = mission.router
    wan = router.wan

    def error(kind: RouterErrorKind):
        return lambda _: mission.error(kind.value)

    chain = [
        Rule(RouterErrorKind.WRONG_IP, lambda c: c.wan_ip != wan.ip_address, error(RouterErrorKind.WRONG_IP)),
        Rule(
            RouterErrorKind.WRONG_SUBNET,
            lambda c: c.wan_subnet_mask != wan.subnet_mask,
            error(RouterErrorKind.WRONG_SUBNET),
        ),
        Rule(
            RouterErrorKind.WRONG_GATEWAY,
            lambda c: c.wan_gateway != wan.gateway,
            error(RouterErrorKind.WRONG_GATEWAY),
            data=lambda _: {"expected": wan.gateway},
        ),
        Rule(
            RouterErrorKind.WRONG_DNS,
            lambda c: c.wan_dns != wan.dns1,
            error(RouterErrorKind.WRONG_DNS),
            data=lambda _: {"expected": wan.dns1},
        ),
        Rule(
            RouterErrorKind.WRONG_LAN_IP,
            lambda c: c.lan_ip != router.lan.ip_address,
            error(RouterErrorKind.WRONG_LAN_IP),
        ),
        Rule(
            RouterErrorKind.WRONG_LAN_SUBNET,
            lambda c: c.lan_subnet_mask != router.lan.subnet_mask,
            error(RouterErrorKind.WRONG_LAN_SUBNET),
        ),
        Rule(
            RouterErrorKind.DHCP_ENABLED,
            lambda c: c.dhcp_enabled != router.lan.dhcp_enabled,
            error(RouterErrorKind.DHCP_ENABLED),
        ),
    ]
    return evaluate(candidate, chain)
