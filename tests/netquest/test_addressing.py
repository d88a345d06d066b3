from __future__ import annotations

import pytest
from hypothesis import given

from netquest.domain.errors import ContractViolation
from netquest.domain.outcomes import IPErrorKind, Invalid, PCSettingsErrorKind, RouterErrorKind, Valid
from netquest.domain.types import PCSettings
from netquest.systems.addressing import (
    IPCandidate,
    PCCandidate,
    validate_ip_config,
    validate_pc_settings,
    validate_router,
)
from tests.helpers.factories import GOOD_ROUTER, lan_settings, mission
from tests.helpers.invariants import assert_explained
from tests.helpers.strategies import lan_ip

HOOK = mission("1.1")
GROWING = mission("1.3")


def _ip(entity: str, ip: str | None, committed: dict[str, PCSettings] | None = None):
    return validate_ip_config(IPCandidate(entity, ip), committed or {}, GROWING)


@pytest.mark.parametrize("ip", [None, "", "   "])
def test_missing_ip(ip: str | None) -> None:
    outcome = _ip("scooter", ip)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.MISSING


def test_wrong_subnet_names_the_prefix() -> None:
    outcome = _ip("scooter", "192.168.2.14")
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.WRONG_SUBNET
    assert "192.168.2.x" in outcome.explanation
    assert outcome.data == {"subnet": "192.168.2"}
    assert_explained(outcome)


def test_existing_device_conflict() -> None:
    outcome = _ip("scooter", "192.168.1.12")
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.DUPLICATE_EXISTING
    assert "Darlene's PC" in outcome.explanation


def test_valid_copies_canonical_lan_settings() -> None:
    outcome = _ip("scooter", " 192.168.1.14 ")
    assert outcome == Valid(lan_settings("192.168.1.14"))


def test_second_entity_sees_first_commit() -> None:
    first = _ip("scooter", "192.168.1.14")
    assert isinstance(first, Valid)
    second = _ip("wayne", "192.168.1.14", {"scooter": first.value})
    assert isinstance(second, Invalid)
    assert second.kind == IPErrorKind.DUPLICATE_IP
    assert "Scooter's PC" in second.explanation


def test_resubmitting_own_address_is_not_a_duplicate() -> None:
    outcome = _ip("scooter", "192.168.1.14", {"scooter": lan_settings("192.168.1.14")})
    assert outcome.ok


def test_priority_duplicate_beats_wrong_subnet_and_existing() -> None:
    committed = {"scooter": lan_settings("10.0.0.5")}
    outcome = _ip("wayne", "10.0.0.5", committed)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.DUPLICATE_IP

    committed = {"scooter": lan_settings("192.168.1.11")}
    outcome = _ip("wayne", "192.168.1.11", committed)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.DUPLICATE_IP


@given(lan_ip())
def test_any_free_lan_host_is_accepted(ip: str) -> None:
    outcome = _ip("wayne", ip)
    taken = {d.ip for d in GROWING.existing_devices}
    assert outcome.ok == (ip not in taken)


def test_router_address_belongs_to_the_router() -> None:
    outcome = _ip("scooter", "192.168.1.1")
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.DUPLICATE_EXISTING
    assert "the router" in outcome.explanation


@pytest.mark.parametrize("ip", ["192.168.1.", "192.168.1.0", "192.168.1.255", "192.168.1.999", "192.168.1.x"])
def test_unusable_host_is_reserved(ip: str) -> None:
    outcome = _ip("scooter", ip)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == IPErrorKind.RESERVED_HOST
    assert "192.168.1.14" in outcome.explanation
    assert_explained(outcome)


def test_unknown_entity_is_contract_violation() -> None:
    with pytest.raises(ContractViolation):
        _ip("clippy", "192.168.1.20")


def _pc(ip: str, *, gateway: str = "192.168.1.1", mask: str = "255.255.255.0", dns: str = "192.168.1.1", committed=None):
    settings = PCSettings(ip_address=ip, subnet_mask=mask, gateway=gateway, dns=dns)
    return validate_pc_settings(PCCandidate("bubba", settings), committed or {}, HOOK)


@pytest.mark.parametrize(
    ("kwargs", "expected"),
    [
        ({"ip": ""}, PCSettingsErrorKind.MISSING),
        ({"ip": "192.168.1.11", "committed": {"earl": lan_settings("192.168.1.11")}}, PCSettingsErrorKind.DUPLICATE_IP),
        ({"ip": "192.168.2.10"}, PCSettingsErrorKind.WRONG_SUBNET),
        ({"ip": "192.168.1.10", "gateway": "192.168.1.10"}, PCSettingsErrorKind.GATEWAY_TO_SELF),
        ({"ip": "192.168.1.10", "gateway": "192.168.1.11"}, PCSettingsErrorKind.GATEWAY_TO_PC),
        ({"ip": "192.168.1.10", "gateway": "10.0.0.1"}, PCSettingsErrorKind.WRONG_GATEWAY),
        ({"ip": "192.168.1.10", "mask": "255.255.0.0"}, PCSettingsErrorKind.WRONG_SUBNET_MASK),
        ({"ip": "192.168.1.10", "dns": "8.8.8.8"}, PCSettingsErrorKind.WRONG_DNS),
        ({"ip": "192.168.1.255"}, PCSettingsErrorKind.RESERVED_HOST),
    ],
)
def test_pc_settings_chain(kwargs: dict, expected: PCSettingsErrorKind) -> None:
    outcome = _pc(**kwargs)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == expected
    assert_explained(outcome)


def test_pc_settings_wrong_subnet_message() -> None:
    outcome = _pc("192.168.2.10")
    assert isinstance(outcome, Invalid)
    assert "192.168.2.x" in outcome.explanation


def test_pc_settings_valid() -> None:
    outcome = _pc("192.168.1.10")
    assert outcome == Valid(lan_settings("192.168.1.10"))


def test_pc_settings_accepts_non_suggested_host() -> None:
    assert _pc("192.168.1.50").ok


def test_router_valid() -> None:
    assert validate_router(GOOD_ROUTER, HOOK).ok


@pytest.mark.parametrize(
    ("field", "value", "expected"),
    [
        ("wan_ip", "192.168.1.1", RouterErrorKind.WRONG_IP),
        ("wan_subnet_mask", "255.255.255.0", RouterErrorKind.WRONG_SUBNET),
        ("wan_gateway", "203.45.67.1", RouterErrorKind.WRONG_GATEWAY),
        ("wan_dns", "8.8.8.8", RouterErrorKind.WRONG_DNS),
        ("lan_ip", "192.168.1.254", RouterErrorKind.WRONG_LAN_IP),
        ("lan_subnet_mask", "255.255.0.0", RouterErrorKind.WRONG_LAN_SUBNET),
        ("dhcp_enabled", True, RouterErrorKind.DHCP_ENABLED),
    ],
)
def test_router_chain(field: str, value, expected: RouterErrorKind) -> None:
    from dataclasses import replace

    outcome = validate_router(replace(GOOD_ROUTER, **{field: value}), HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == expected


def test_router_wan_checked_before_lan() -> None:
    from dataclasses import replace

    outcome = validate_router(replace(GOOD_ROUTER, wan_dns="1.1.1.1", dhcp_enabled=True), HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == RouterErrorKind.WRONG_DNS
    assert "203.45.67.1" in outcome.detail


def test_router_on_mission_without_router() -> None:
    with pytest.raises(ContractViolation):
        validate_router(GOOD_ROUTER, GROWING)
