from __future__ import annotations

import pytest

from netquest.domain.outcomes import Invalid, LinkErrorKind, Valid
from netquest.systems.topology import DeviceKind, Endpoint, Link, topology_complete, validate_link
from tests.helpers.factories import HUB, ROUTER_LAN, ROUTER_WAN, T1, mission, office_links, pc

HOOK = mission("1.1")
PCS = ["bubba", "earl", "darlene", "accountant"]


@pytest.mark.parametrize(
    ("link", "expected"),
    [
        (Link(pc("bubba"), T1), LinkErrorKind.PC_DIRECT_TO_T1),
        (Link(T1, pc("bubba")), LinkErrorKind.PC_DIRECT_TO_T1),
        (Link(ROUTER_WAN, HUB), LinkErrorKind.ROUTER_WAN_TO_HUB),
        (Link(HUB, ROUTER_WAN), LinkErrorKind.ROUTER_WAN_TO_HUB),
        (Link(HUB, Endpoint("hub-2", DeviceKind.HUB)), LinkErrorKind.HUB_TO_HUB),
        (Link(T1, ROUTER_LAN), LinkErrorKind.PC_DIRECT_TO_T1),
        (Link(T1, HUB), LinkErrorKind.PC_DIRECT_TO_T1),
    ],
)
def test_bad_links(link: Link, expected: LinkErrorKind) -> None:
    outcome = validate_link(link, HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == expected


def test_uplink_is_valid() -> None:
    assert validate_link(Link(ROUTER_WAN, T1), HOOK) == Valid(Link(ROUTER_WAN, T1))


def test_pc_on_router_lan_carries_advisory() -> None:
    outcome = validate_link(Link(pc("earl"), ROUTER_LAN), HOOK)
    assert isinstance(outcome, Valid)
    assert outcome.advisory is not None
    assert outcome.advisory.title == "Suboptimal Connection"


def test_pc_on_hub_has_no_advisory() -> None:
    outcome = validate_link(Link(pc("earl"), HUB), HOOK)
    assert isinstance(outcome, Valid)
    assert outcome.advisory is None


def test_topology_complete() -> None:
    assert topology_complete(office_links(PCS), PCS)


def test_topology_incomplete_without_every_pc() -> None:
    assert not topology_complete(office_links(PCS[:3]), PCS)


def test_topology_incomplete_without_uplink() -> None:
    links = office_links(PCS)[1:]
    assert not topology_complete(links, PCS)


def test_topology_incomplete_without_backbone() -> None:
    links = [office_links(PCS)[0], *office_links(PCS)[2:]]
    assert not topology_complete(links, PCS)
