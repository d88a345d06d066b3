from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from netquest.domain.errors import ContractViolation
from netquest.domain.outcomes import (
    CartErrorKind,
    Invalid,
    PurchaseErrorKind,
    Valid,
    ValidationOutcome,
)
from netquest.rules.catalog import MissionCatalog, StoreItem
from netquest.systems.rule_chain import Rule, evaluate


@dataclass(frozen=True)
class CartLine:
    item_id: str
    quantity: int = 1


@dataclass(frozen=True)
class CartQuote:
    lines: tuple[CartLine, ...]
    total: int


def validate_purchase(option_id: str, budget: int, mission: MissionCatalog) -> ValidationOutcome:
    """Eligibility is checked before cost: a boss veto wins over an empty wallet."""
    option = mission.equipment.get(option_id)
    if option is None:
        raise ContractViolation(f"Unknown equipment option: {option_id!r}")

    chain = [
        Rule(
            PurchaseErrorKind.REJECTED,
            lambda o: not o.eligible,
            lambda _: mission.error(PurchaseErrorKind.REJECTED.value),
            data=lambda o: {"option": o.name},
            lines=lambda o: o.reaction,
        ),
        Rule(
            PurchaseErrorKind.INSUFFICIENT_FUNDS,
            lambda o: o.cost > budget,
            lambda _: mission.error(PurchaseErrorKind.INSUFFICIENT_FUNDS.value),
            data=lambda o: {"option": o.name, "cost": o.cost, "budget": budget},
        ),
    ]
    return evaluate(option, chain)


def _normalise(cart: Mapping[str, int] | tuple[CartLine, ...] | list[CartLine]) -> tuple[CartLine, ...]:
    if isinstance(cart, Mapping):
        lines = tuple(CartLine(item_id=item_id, quantity=qty) for item_id, qty in cart.items())
    else:
        lines = tuple(cart)
    for line in lines:
        if line.quantity < 0:
            raise ContractViolation(f"Negative quantity for {line.item_id!r}")
    return tuple(line for line in lines if line.quantity > 0)


def validate_cart(
    cart: Mapping[str, int] | tuple[CartLine, ...] | list[CartLine],
    budget: int,
    mission: MissionCatalog,
) -> ValidationOutcome:
    lines = _normalise(cart)
    items: dict[str, StoreItem] = {}
    for line in lines:
        item = mission.store_items.get(line.item_id)
        if item is None:
            raise ContractViolation(f"Unknown store item: {line.item_id!r}")
        items[line.item_id] = item

    def count(category: str) -> int:
        return sum(line.quantity for line in lines if items[line.item_id].category == category)

    total = sum(items[line.item_id].price * line.quantity for line in lines)
    herring = next((items[line.item_id] for line in lines if items[line.item_id].red_herring), None)
    if herring is not None and herring.red_herring is not None:
        return Invalid.from_payload(CartErrorKind.RED_HERRING, herring.red_herring, item=herring.id)

    def error(kind: CartErrorKind):
        return lambda _: mission.error(kind.value)

    chain = [
        Rule(CartErrorKind.NO_ROUTER, lambda _: count("router") == 0, error(CartErrorKind.NO_ROUTER)),
        Rule(CartErrorKind.NO_HUB, lambda _: count("hub") == 0, error(CartErrorKind.NO_HUB)),
        Rule(
            CartErrorKind.NOT_ENOUGH_CABLES,
            lambda _: count("cable") < mission.min_cables,
            error(CartErrorKind.NOT_ENOUGH_CABLES),
            data=lambda _: {"count": count("cable"), "required": mission.min_cables},
        ),
        Rule(
            CartErrorKind.OVER_BUDGET,
            lambda _: total > budget,
            error(CartErrorKind.OVER_BUDGET),
            data=lambda _: {"total": total, "budget": budget},
        ),
    ]
    return evaluate(lines, chain, lambda _: Valid(CartQuote(lines=lines, total=total)))
