"""Common types and enums."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from netquest.domain.errors import ContractViolation


class Phase(str, Enum):
    """Screen identifiers; exactly one is active at a time."""

    TITLE = "title"
    INTRO = "intro"
    STORE = "store"
    TOPOLOGY = "topology"
    CONFIG = "config"
    TEST = "test"
    SUMMARY = "summary"
    COMPLETE = "complete"
    MISSION_SELECT = "mission-select"
    FIREWALL = "firewall"
    SECURITY_CHOICE = "security-choice"
    GROWING_STORE = "growing-store"
    NEW_PC_CONFIG = "new-pc-config"


class Speaker(str, Enum):
    NARRATOR = "narrator"
    BUBBA = "bubba"
    EARL = "earl"
    DARLENE = "darlene"
    ACCOUNTANT = "accountant"
    SCOOTER = "scooter"
    WAYNE = "wayne"
    PLAYER = "player"
    SYSTEM = "system"


@dataclass(frozen=True, order=True)
class MissionId:
    """Dotted ``major.minor`` mission token, compared as an integer pair."""

    major: int
    minor: int

    @staticmethod
    def parse(token: "str | MissionId") -> "MissionId":
        if isinstance(token, MissionId):
            return token
        parts = str(token).strip().split(".")
        if len(parts) != 2 or not all(part.isdigit() for part in parts):
            raise ContractViolation(f"Malformed mission id: {token!r}")
        return MissionId(major=int(parts[0]), minor=int(parts[1]))

    def next(self) -> "MissionId":
        return MissionId(major=self.major, minor=self.minor + 1)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


@dataclass(frozen=True)
class DialogueLine:
    id: str
    speaker: Speaker
    text: str


@dataclass(frozen=True)
class PCSettings:
    ip_address: str
    subnet_mask: str
    gateway: str
    dns: str
