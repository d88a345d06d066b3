"""Ordered first-match rule evaluation shared by every validator family."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, Iterable, TypeVar

from netquest.domain.outcomes import ErrorPayload, Invalid, Valid, ValidationOutcome
from netquest.domain.types import DialogueLine

C = TypeVar("C")


@dataclass(frozen=True)
class Rule(Generic[C]):
    """One check in a chain.

    ``applies`` returns True when the candidate is *wrong*. ``payload`` is
    resolved lazily so a chain never touches catalog entries it does not
    report.
    """

    kind: Enum
    applies: Callable[[C], bool]
    payload: Callable[[C], ErrorPayload]
    data: Callable[[C], dict[str, Any]] | None = None
    lines: Callable[[C], tuple[DialogueLine, ...]] | None = None


def evaluate(
    candidate: C,
    rules: Iterable[Rule[C]],
    on_valid: Callable[[C], Valid] | None = None,
) -> ValidationOutcome:
    for rule in rules:
        if not rule.applies(candidate):
            continue
        data = rule.data(candidate) if rule.data is not None else {}
        lines = rule.lines(candidate) if rule.lines is not None else ()
        return Invalid.from_payload(rule.kind, rule.payload(candidate), lines, **data)
    if on_valid is None:
        return Valid(candidate)
    return on_valid(candidate)
