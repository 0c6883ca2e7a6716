"""Day-tour pricing (no overnight stay, flat per-guest rates)."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Sequence

from .addons import AddonSelection, calculate_addons_total
from .money import to_decimal, to_json_number


@dataclass(frozen=True)
class DayTourPrice:
    base_amount: Decimal
    addons_amount: Decimal
    total: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "base_amount": to_json_number(self.base_amount),
            "addons_amount": to_json_number(self.addons_amount),
            "total": to_json_number(self.total),
        }


def calculate_day_tour_price(
    num_adults: int,
    num_children: int,
    adult_rate: Decimal | int | float | str,
    child_rate: Decimal | int | float | str,
    selected_addons: Sequence[AddonSelection] = (),
) -> DayTourPrice:
    """Price a day tour: every adult and child pays their rate.

    The free-child occupancy policy is an overnight concept and does not
    apply here; per-person add-ons count all guests.
    """
    base_amount = num_adults * to_decimal(adult_rate) + num_children * to_decimal(child_rate)
    addons_amount = calculate_addons_total(selected_addons, num_adults + num_children)
    return DayTourPrice(
        base_amount=base_amount,
        addons_amount=addons_amount,
        total=base_amount + addons_amount,
    )
