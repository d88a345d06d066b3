"""Action definitions for reducer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias, Union

from netquest.domain.types import PCSettings
from netquest.systems.addressing import RouterCandidate
from netquest.systems.purchasing import CartLine
from netquest.systems.topology import Link


@dataclass(frozen=True)
class StartGame:
    pass


@dataclass(frozen=True)
class AdvanceDialogue:
    pass


@dataclass(frozen=True)
class SubmitCart:
    lines: tuple[CartLine, ...]


@dataclass(frozen=True)
class SubmitLink:
    link: Link


@dataclass(frozen=True)
class SubmitRouterConfig:
    candidate: RouterCandidate


@dataclass(frozen=True)
class SubmitPCSettings:
    entity: str
    settings: PCSettings


@dataclass(frozen=True)
class RunNetworkTest:
    pass


@dataclass(frozen=True)
class SubmitFirewall:
    toggles: tuple[tuple[str, bool], ...]


@dataclass(frozen=True)
class StartPortScan:
    delay: float | None = None


@dataclass(frozen=True)
class ChooseSafetyResponse:
    option_id: str


@dataclass(frozen=True)
class SelectEquipment:
    option_id: str


@dataclass(frozen=True)
class SubmitIPConfig:
    entity: str
    ip: str | None


@dataclass(frozen=True)
class FinishSummary:
    pass


@dataclass(frozen=True)
class SelectMission:
    mission_id: str


@dataclass(frozen=True)
class ResetGame:
    pass


Action: TypeAlias = Union[
    StartGame,
    AdvanceDialogue,
    SubmitCart,
    SubmitLink,
    SubmitRouterConfig,
    SubmitPCSettings,
    RunNetworkTest,
    SubmitFirewall,
    StartPortScan,
    ChooseSafetyResponse,
    SelectEquipment,
    SubmitIPConfig,
    FinishSummary,
    SelectMission,
    ResetGame,
]
