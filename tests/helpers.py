"""Shared test helper functions for BudaBook pricing tests.

This module contains builders that can be imported by individual test
files. These are NOT fixtures - they are regular functions.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from budabook.domain.addons import Addon, AddonPricingModel, AddonSelection
from budabook.domain.rates import (
    AdjustmentType,
    AppliesTo,
    AppliesToAll,
    RateAdjustment,
)

# 2026-03-02 is a Monday
MONDAY = date(2026, 3, 2)
TUESDAY = date(2026, 3, 3)
WEDNESDAY = date(2026, 3, 4)
FRIDAY = date(2026, 3, 6)
SATURDAY = date(2026, 3, 7)
SUNDAY = date(2026, 3, 8)
NEXT_MONDAY = date(2026, 3, 9)


def make_adjustment(
    name: str,
    start: date,
    end: date,
    adjustment_type: AdjustmentType = AdjustmentType.PERCENTAGE_DISCOUNT,
    value: int | str = 20,
    applies_to: AppliesTo | None = None,
    is_active: bool = True,
) -> RateAdjustment:
    """Create a rate adjustment; applies to all types unless told otherwise."""
    return RateAdjustment(
        name=name,
        start_date=start,
        end_date=end,
        adjustment_type=adjustment_type,
        adjustment_value=Decimal(value),
        applies_to=applies_to if applies_to is not None else AppliesToAll(),
        is_active=is_active,
    )


def per_person(price: int | str, quantity: int = 1, addon_id: str = "addon-pp") -> AddonSelection:
    addon = Addon(id=addon_id, price=Decimal(price), pricing_model=AddonPricingModel.PER_PERSON)
    return AddonSelection(addon=addon, quantity=quantity)


def per_booking(price: int | str, quantity: int = 1, addon_id: str = "addon-pb") -> AddonSelection:
    addon = Addon(id=addon_id, price=Decimal(price), pricing_model=AddonPricingModel.PER_BOOKING)
    return AddonSelection(addon=addon, quantity=quantity)
