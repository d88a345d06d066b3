"""UI events emitted alongside action results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class UiEvent:
    kind: str  # "phase" | "budget" | "dialogue" | "outcome" | ...
    message: str
    data: dict[str, Any] | None = None
