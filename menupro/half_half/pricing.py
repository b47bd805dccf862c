"""
Pricing for half-and-half pizzas.

Given N selected flavors with resolved prices p_1..p_N for the chosen size
and M = max_flavors:

    base = max(p)/M   rule=highest, N < M
         = max(p)     rule=highest, N = M
         = sum(p)/M   rule in (average, sum), N < M
         = sum(p)/N   rule in (average, sum), N = M

    total = (base + sum(option modifiers) - discount) * quantity

While the selection is partial the base is a running total of the fractions
chosen so far (one flavor of R$48 on a two-flavor pizza shows R$24).

preview_price() prices any selection, partial or full, for display.
committed_price() only prices a full selection and is what goes to the cart.
"""

import logging
from typing import Iterable, List, Sequence

from ..schemas import GroupKind, PriceBreakdown, PricingRule, SelectedOption
from .errors import FlavorCountError, PricingError

logger = logging.getLogger(__name__)


def round_money(amount: float) -> float:
    """Round to 2 decimal places for currency."""
    return round(amount, 2)


def base_price(prices: Sequence[float], max_flavors: int, rule: PricingRule | str) -> float:
    """
    Combine the flavor prices into the pizza's base price.

    Raises:
        PricingError: If no prices are given or max_flavors is below 1
    """
    if not prices:
        raise PricingError("Cannot price a half-and-half pizza without flavors")
    if max_flavors < 1:
        raise PricingError(f"max_flavors must be at least 1, got {max_flavors}")

    rule = PricingRule(rule)
    is_partial = len(prices) < max_flavors

    if rule == PricingRule.HIGHEST:
        highest = max(prices)
        return highest / max_flavors if is_partial else highest

    # average and sum: one fraction per flavor slot
    denominator = max_flavors if is_partial else len(prices)
    return sum(prices) / denominator


def options_total(selected: Iterable[SelectedOption], allow_crust_extra_price: bool = True) -> float:
    """Sum the option modifiers; crusts are free when the store does not charge for them."""
    total = 0.0
    for option in selected:
        if option.group_kind == GroupKind.CRUST and not allow_crust_extra_price:
            continue
        total += option.price_modifier
    return total


def apply_discount(subtotal: float, discount_percentage: float) -> float:
    """Return the discount amount for a subtotal."""
    if discount_percentage < 0 or discount_percentage > 100:
        raise PricingError(f"Discount must be between 0 and 100, got {discount_percentage}")
    if discount_percentage == 0:
        return 0.0
    return subtotal * (discount_percentage / 100)


def _breakdown(
    prices: List[float],
    max_flavors: int,
    rule: PricingRule | str,
    selected: Iterable[SelectedOption],
    allow_crust_extra_price: bool,
    discount_percentage: float,
    quantity: int,
) -> PriceBreakdown:
    if quantity < 1:
        raise PricingError(f"Quantity must be at least 1, got {quantity}")

    base = base_price(prices, max_flavors, rule)
    extras = options_total(selected, allow_crust_extra_price)
    subtotal = base + extras
    discount = apply_discount(subtotal, discount_percentage)
    unit_price = subtotal - discount

    return PriceBreakdown(
        base_price=round_money(base),
        options_price=round_money(extras),
        subtotal=round_money(subtotal),
        discount=round_money(discount),
        unit_price=round_money(unit_price),
        quantity=quantity,
        total=round_money(unit_price * quantity),
        is_partial=len(prices) < max_flavors,
    )


def preview_price(
    prices: List[float],
    max_flavors: int,
    rule: PricingRule | str,
    selected: Iterable[SelectedOption] = (),
    allow_crust_extra_price: bool = True,
    discount_percentage: float = 0.0,
    quantity: int = 1,
) -> PriceBreakdown:
    """Running price for display; accepts partial selections."""
    if len(prices) > max_flavors:
        raise PricingError(f"{len(prices)} flavors exceed the limit of {max_flavors}")
    return _breakdown(
        prices, max_flavors, rule, selected,
        allow_crust_extra_price, discount_percentage, quantity,
    )


def committed_price(
    prices: List[float],
    max_flavors: int,
    rule: PricingRule | str,
    selected: Iterable[SelectedOption] = (),
    allow_crust_extra_price: bool = True,
    discount_percentage: float = 0.0,
    quantity: int = 1,
) -> PriceBreakdown:
    """
    Final price of a finished pizza.

    Raises:
        FlavorCountError: Unless exactly max_flavors prices are given
    """
    if len(prices) != max_flavors:
        raise FlavorCountError(len(prices), max_flavors)
    breakdown = _breakdown(
        prices, max_flavors, rule, selected,
        allow_crust_extra_price, discount_percentage, quantity,
    )
    logger.debug(
        "Committed half-and-half price: rule=%s prices=%s unit=%.2f total=%.2f",
        PricingRule(rule).value, prices, breakdown.unit_price, breakdown.total,
    )
    return breakdown
