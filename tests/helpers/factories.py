from __future__ import annotations

from typing import Callable

from netquest.domain.types import DialogueLine, MissionId, PCSettings
from netquest.rules.catalog import MissionCatalog, RuleCatalog
from netquest.rules.content import Content
from netquest.sim.missions import begin_mission
from netquest.sim.store import SessionStore
from netquest.systems.addressing import RouterCandidate
from netquest.systems.purchasing import CartLine
from netquest.systems.topology import DeviceKind, Endpoint, Link, PortKind

GOOD_CART = (
    CartLine("linksys-befsr41", 1),
    CartLine("netgear-ds108", 1),
    CartLine("cat5-cable", 6),
)
GOOD_CART_TOTAL = 89 + 45 + 6 * 8

GOOD_ROUTER = RouterCandidate(
    wan_ip="203.45.67.89",
    wan_subnet_mask="255.255.255.248",
    wan_gateway="203.45.67.81",
    wan_dns="203.45.67.1",
    lan_ip="192.168.1.1",
    lan_subnet_mask="255.255.255.0",
    dhcp_enabled=False,
)

T1 = Endpoint("t1", DeviceKind.T1)
ROUTER_WAN = Endpoint("router", DeviceKind.ROUTER, PortKind.WAN)
ROUTER_LAN = Endpoint("router", DeviceKind.ROUTER, PortKind.LAN)
HUB = Endpoint("hub", DeviceKind.HUB)


def load_catalog() -> RuleCatalog:
    return RuleCatalog.load()


def mission(token: str) -> MissionCatalog:
    return load_catalog().mission(token)


def make_store(*, apply: Callable[[SessionStore], None] | None = None) -> SessionStore:
    """Create a fresh store over the shipped content, with optional in-place overrides."""
    store = SessionStore(RuleCatalog.load(), Content.load())
    if apply is not None:
        apply(store)
    return store


def drain(store: SessionStore) -> list[DialogueLine]:
    """Advance until the queue is empty, including batches queued by callbacks."""
    seen: list[DialogueLine] = []
    while store.current_line() is not None:
        line = store.advance_dialogue()
        assert line is not None
        seen.append(line)
    return seen


def enter_mission(store: SessionStore, token: str) -> SessionStore:
    begin_mission(store, MissionId.parse(token))
    drain(store)
    return store


def pc(name: str) -> Endpoint:
    return Endpoint(name, DeviceKind.PC)


def office_links(pcs: list[str]) -> list[Link]:
    links = [Link(T1, ROUTER_WAN), Link(ROUTER_LAN, HUB)]
    links.extend(Link(pc(name), HUB) for name in pcs)
    return links


def lan_settings(ip: str) -> PCSettings:
    return PCSettings(ip_address=ip, subnet_mask="255.255.255.0", gateway="192.168.1.1", dns="192.168.1.1")
