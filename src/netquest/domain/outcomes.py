"""Validation outcomes and the closed error-kind enumerations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias, Union

from netquest.domain.types import DialogueLine


class FirewallErrorKind(str, Enum):
    ALL_OFF = "allOff"
    NO_INBOUND_NO_ESTABLISHED = "noInboundNoEstablished"
    PARTIAL_PROTECTION = "partialProtection"


class IPErrorKind(str, Enum):
    MISSING = "missing"
    DUPLICATE_IP = "duplicateIP"
    WRONG_SUBNET = "wrongSubnet"
    DUPLICATE_EXISTING = "duplicateExisting"
    RESERVED_HOST = "reservedHost"


class PCSettingsErrorKind(str, Enum):
    MISSING = "missing"
    DUPLICATE_IP = "duplicateIP"
    WRONG_SUBNET = "wrongSubnet"
    GATEWAY_TO_SELF = "gatewayToSelf"
    GATEWAY_TO_PC = "gatewayToPC"
    WRONG_GATEWAY = "wrongGateway"
    WRONG_SUBNET_MASK = "wrongSubnetMask"
    WRONG_DNS = "wrongDNS"
    RESERVED_HOST = "reservedHost"


class RouterErrorKind(str, Enum):
    WRONG_IP = "wrongIP"
    WRONG_SUBNET = "wrongSubnet"
    WRONG_GATEWAY = "wrongGateway"
    WRONG_DNS = "wrongDNS"
    WRONG_LAN_IP = "wrongLanIP"
    WRONG_LAN_SUBNET = "wrongLanSubnet"
    DHCP_ENABLED = "dhcpEnabled"


class PurchaseErrorKind(str, Enum):
    REJECTED = "rejected"
    INSUFFICIENT_FUNDS = "insufficientFunds"


class CartErrorKind(str, Enum):
    RED_HERRING = "redHerring"
    NO_ROUTER = "noRouter"
    NO_HUB = "noHub"
    NOT_ENOUGH_CABLES = "notEnoughCables"
    OVER_BUDGET = "overBudget"


class LinkErrorKind(str, Enum):
    PC_DIRECT_TO_T1 = "pcDirectToT1"
    ROUTER_WAN_TO_HUB = "routerWanToHub"
    HUB_TO_HUB = "hubToHub"


@dataclass(frozen=True)
class ErrorPayload:
    """Headline, conceptual explanation and supporting technical note."""

    title: str
    explanation: str
    detail: str = ""


@dataclass(frozen=True)
class Valid:
    value: Any = None
    advisory: ErrorPayload | None = None

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Invalid:
    kind: Enum
    title: str
    explanation: str
    detail: str
    lines: tuple[DialogueLine, ...] = ()
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return False

    @staticmethod
    def from_payload(
        kind: Enum,
        payload: ErrorPayload,
        lines: tuple[DialogueLine, ...] = (),
        **data: Any,
    ) -> "Invalid":
        """Build from a catalog payload, filling ``{name}`` placeholders from ``data``."""
        values = _Placeholders(data)
        return Invalid(
            kind=kind,
            title=payload.title.format_map(values),
            explanation=payload.explanation.format_map(values),
            detail=payload.detail.format_map(values),
            lines=lines,
            data=dict(data),
        )


ValidationOutcome: TypeAlias = Union[Valid, Invalid]


class _Placeholders(dict):
    # Unknown placeholders are left in the text untouched.
    def __missing__(self, key: str) -> str:
        return "{" + key + "}"
