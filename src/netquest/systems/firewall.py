from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from netquest.domain.errors import ContractViolation
from netquest.domain.outcomes import FirewallErrorKind, Valid, ValidationOutcome
from netquest.rules.catalog import MissionCatalog
from netquest.systems.rule_chain import Rule, evaluate

BLOCK_INBOUND = "block-inbound"
ALLOW_ESTABLISHED = "allow-established"
BLOCK_ICMP = "block-icmp"


@dataclass(frozen=True)
class FirewallRules:
    enabled: frozenset[str]
    mentioned: frozenset[str] = frozenset()

    @staticmethod
    def of(toggles: Mapping[str, bool]) -> "FirewallRules":
        return FirewallRules(
            enabled=frozenset(rule_id for rule_id, on in toggles.items() if on),
            mentioned=frozenset(toggles),
        )

    def is_on(self, rule_id: str) -> bool:
        return rule_id in self.enabled


@dataclass(frozen=True)
class FirewallVerdict:
    icmp_blocked: bool


def validate_firewall(
    rules: FirewallRules | Mapping[str, bool],
    catalog: MissionCatalog,
) -> ValidationOutcome:
    """Judge a firewall rule set; only the two critical rules decide pass/fail."""
    candidate = rules if isinstance(rules, FirewallRules) else FirewallRules.of(rules)
    unknown = sorted((candidate.enabled | candidate.mentioned) - set(catalog.firewall_rules))
    if unknown:
        raise ContractViolation(f"Unknown firewall rule id(s): {', '.join(unknown)}")

    def error(kind: FirewallErrorKind):
        return lambda _: catalog.error(kind.value)

    chain = [
        Rule(
            FirewallErrorKind.ALL_OFF,
            lambda c: not c.is_on(BLOCK_INBOUND) and not c.is_on(ALLOW_ESTABLISHED),
            error(FirewallErrorKind.ALL_OFF),
        ),
        Rule(
            FirewallErrorKind.NO_INBOUND_NO_ESTABLISHED,
            lambda c: c.is_on(BLOCK_INBOUND) and not c.is_on(ALLOW_ESTABLISHED),
            error(FirewallErrorKind.NO_INBOUND_NO_ESTABLISHED),
        ),
        Rule(
            FirewallErrorKind.PARTIAL_PROTECTION,
            lambda c: not c.is_on(BLOCK_INBOUND),
            error(FirewallErrorKind.PARTIAL_PROTECTION),
        ),
    ]
    return evaluate(candidate, chain, lambda c: Valid(FirewallVerdict(icmp_blocked=c.is_on(BLOCK_ICMP))))
