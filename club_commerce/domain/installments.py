"""Installment plan pricing for club products"""

from decimal import Decimal
from typing import List

from club_commerce.domain.exceptions import PlanNotFoundError
from club_commerce.domain.models import PAY_IN_FULL, PlanOption, Product
from club_commerce.utils.money import round_money


def price_for(product: Product, plan_months: int) -> Decimal:
    """
    Payable price of a product under a chosen payment option.

    Requirements:
    - plan_months == 0 is pay-in-full: base price unmodified (always cheapest)
    - Otherwise base price times the plan multiplier, rounded to cents
    - No check that multipliers grow with plan length

    Args:
        product: Catalog product
        plan_months: Month count of the chosen plan, 0 for pay in full

    Returns:
        Total price in the product's currency

    Raises:
        PlanNotFoundError: product offers no plan with that month count

    Example:
        base 100.00, 6-month plan at 1.1 → 110.00
    """
    if plan_months == PAY_IN_FULL:
        return product.base_price

    for plan in product.installment_plans:
        if plan.months == plan_months:
            return round_money(product.base_price * plan.multiplier)

    raise PlanNotFoundError(product.id, plan_months)


def monthly_price(total_price: Decimal, months: int) -> Decimal:
    """Per-month display price for a plan total"""
    return round_money(total_price / months)


def plan_options(product: Product) -> List[PlanOption]:
    """Pay-in-full first, then each plan by increasing length"""
    options = [PlanOption(months=PAY_IN_FULL, total_price=product.base_price, monthly_price=None)]
    for plan in sorted(product.installment_plans, key=lambda p: p.months):
        total = price_for(product, plan.months)
        options.append(
            PlanOption(months=plan.months, total_price=total, monthly_price=monthly_price(total, plan.months))
        )
    return options
