from __future__ import annotations

import pytest
from hypothesis import given

from netquest.domain.errors import ContractViolation
from netquest.domain.outcomes import CartErrorKind, Invalid, PurchaseErrorKind, Valid
from netquest.systems.purchasing import CartLine, CartQuote, validate_cart, validate_purchase
from tests.helpers.factories import GOOD_CART, GOOD_CART_TOTAL, mission
from tests.helpers.invariants import assert_explained
from tests.helpers.strategies import carts

HOOK = mission("1.1")
GROWING = mission("1.3")


def test_ineligible_option_is_rejected_before_cost() -> None:
    outcome = validate_purchase("buy-switch", 50, GROWING)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == PurchaseErrorKind.REJECTED
    assert [line.id for line in outcome.lines] == ["m13-switch-1", "m13-switch-2"]
    assert_explained(outcome)


def test_ineligible_option_is_rejected_even_when_affordable() -> None:
    outcome = validate_purchase("buy-switch", 1000, GROWING)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == PurchaseErrorKind.REJECTED


def test_insufficient_funds() -> None:
    outcome = validate_purchase("buy-hub", 50, GROWING)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == PurchaseErrorKind.INSUFFICIENT_FUNDS
    assert outcome.data == {"option": "Add Another 8-Port Hub", "cost": 53, "budget": 50}
    assert "$53" in outcome.explanation


def test_affordable_eligible_option() -> None:
    outcome = validate_purchase("use-existing", 16, GROWING)
    assert isinstance(outcome, Valid)
    assert outcome.value.id == "use-existing"


def test_unknown_option_is_contract_violation() -> None:
    with pytest.raises(ContractViolation):
        validate_purchase("buy-mainframe", 100, GROWING)


def test_good_cart() -> None:
    outcome = validate_cart(GOOD_CART, 350, HOOK)
    assert outcome == Valid(CartQuote(lines=GOOD_CART, total=GOOD_CART_TOTAL))


def test_cart_accepts_mapping() -> None:
    outcome = validate_cart({"linksys-befsr41": 1, "netgear-ds108": 1, "cat5-cable": 6}, 350, HOOK)
    assert isinstance(outcome, Valid)
    assert outcome.value.total == 182


def test_red_herring_comes_first() -> None:
    outcome = validate_cart({"56k-modem": 1}, 350, HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == CartErrorKind.RED_HERRING
    assert outcome.title == "You Already Have Better!"


@pytest.mark.parametrize(
    ("cart", "expected"),
    [
        ({"netgear-ds108": 1, "cat5-cable": 6}, CartErrorKind.NO_ROUTER),
        ({"linksys-befsr41": 1, "cat5-cable": 6}, CartErrorKind.NO_HUB),
        ({"linksys-befsr41": 1, "netgear-ds108": 1, "cat5-cable": 5}, CartErrorKind.NOT_ENOUGH_CABLES),
    ],
)
def test_missing_equipment(cart: dict[str, int], expected: CartErrorKind) -> None:
    outcome = validate_cart(cart, 350, HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == expected
    assert_explained(outcome)


def test_cable_count_in_message() -> None:
    outcome = validate_cart({"linksys-befsr41": 1, "netgear-ds108": 1, "cat5-cable": 2}, 350, HOOK)
    assert isinstance(outcome, Invalid)
    assert "Only 2 cable(s)" in outcome.explanation
    assert "at least 6" in outcome.explanation


def test_over_budget() -> None:
    outcome = validate_cart(GOOD_CART, 100, HOOK)
    assert isinstance(outcome, Invalid)
    assert outcome.kind == CartErrorKind.OVER_BUDGET
    assert "$182" in outcome.explanation and "$100" in outcome.explanation


def test_unknown_item_and_negative_quantity() -> None:
    with pytest.raises(ContractViolation):
        validate_cart({"flux-capacitor": 1}, 350, HOOK)
    with pytest.raises(ContractViolation):
        validate_cart((CartLine("cat5-cable", -1),), 350, HOOK)


@given(carts(HOOK))
def test_valid_carts_fit_the_budget(cart: tuple[CartLine, ...]) -> None:
    outcome = validate_cart(cart, 350, HOOK)
    if isinstance(outcome, Valid):
        assert 0 < outcome.value.total <= 350
