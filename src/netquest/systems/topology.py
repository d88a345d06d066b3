"""Cabling checks for the office build-out."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from netquest.domain.outcomes import LinkErrorKind, Valid, ValidationOutcome
from netquest.rules.catalog import MissionCatalog
from netquest.systems.rule_chain import Rule, evaluate


class DeviceKind(str, Enum):
    T1 = "t1-demarc"
    ROUTER = "router"
    HUB = "hub"
    PC = "pc"


class PortKind(str, Enum):
    WAN = "wan"
    LAN = "lan"
    ETH = "eth"


@dataclass(frozen=True)
class Endpoint:
    device: str
    kind: DeviceKind
    port: PortKind = PortKind.ETH


@dataclass(frozen=True)
class Link:
    a: Endpoint
    b: Endpoint

    def kinds(self) -> set[DeviceKind]:
        return {self.a.kind, self.b.kind}

    def touches(self, kind: DeviceKind, port: PortKind | None = None) -> bool:
        return any(end.kind == kind and (port is None or end.port == port) for end in (self.a, self.b))

    def other(self, kind: DeviceKind) -> Endpoint:
        return self.b if self.a.kind == kind else self.a


def _t1_not_on_router_wan(link: Link) -> bool:
    if not link.touches(DeviceKind.T1):
        return False
    far = link.other(DeviceKind.T1)
    return not (far.kind == DeviceKind.ROUTER and far.port == PortKind.WAN)


def validate_link(link: Link, mission: MissionCatalog) -> ValidationOutcome:
    def error(kind: LinkErrorKind):
        return lambda _: mission.error(kind.value)

    chain = [
        Rule(
            LinkErrorKind.PC_DIRECT_TO_T1,
            lambda l: l.kinds() == {DeviceKind.PC, DeviceKind.T1},
            error(LinkErrorKind.PC_DIRECT_TO_T1),
        ),
        Rule(
            LinkErrorKind.ROUTER_WAN_TO_HUB,
            lambda l: l.touches(DeviceKind.ROUTER, PortKind.WAN) and l.touches(DeviceKind.HUB),
            error(LinkErrorKind.ROUTER_WAN_TO_HUB),
        ),
        Rule(
            LinkErrorKind.HUB_TO_HUB,
            lambda l: l.a.kind == DeviceKind.HUB and l.b.kind == DeviceKind.HUB,
            error(LinkErrorKind.HUB_TO_HUB),
        ),
        Rule(LinkErrorKind.PC_DIRECT_TO_T1, _t1_not_on_router_wan, error(LinkErrorKind.PC_DIRECT_TO_T1)),
    ]

    def accept(l: Link) -> Valid:
        if l.touches(DeviceKind.PC) and l.touches(DeviceKind.ROUTER, PortKind.LAN):
            advisory = mission.errors.get("pcToRouterLan")
            return Valid(l, advisory=advisory)
        return Valid(l)

    return evaluate(link, chain, accept)


def topology_complete(links: Iterable[Link], pcs: Iterable[str]) -> bool:
    """T1 feeds the router WAN, the router feeds a hub, and every PC is plugged in."""
    links = list(links)
    has_uplink = any(
        l.touches(DeviceKind.T1) and l.touches(DeviceKind.ROUTER, PortKind.WAN) for l in links
    )
    has_backbone = any(
        l.touches(DeviceKind.ROUTER, PortKind.LAN) and l.touches(DeviceKind.HUB) for l in links
    )
    if not has_uplink or not has_backbone:
        return False
    plugged: set[str] = set()
    for l in links:
        for end, far in ((l.a, l.b), (l.b, l.a)):
            if end.kind == DeviceKind.PC and far.kind in (DeviceKind.HUB, DeviceKind.ROUTER):
                plugged.add(end.device)
    return all(pc in plugged for pc in pcs)
