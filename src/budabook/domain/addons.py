"""Domain logic for add-ons (purchasable extras).

Pure calculation functions for add-on pricing. No DB access here;
the caller is responsible for fetching the add-on catalog.

Add-ons are priced once per stay, never per night.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Iterable

from .money import ZERO


class AddonPricingModel(str, Enum):
    PER_BOOKING = "per_booking"
    PER_PERSON = "per_person"


@dataclass(frozen=True)
class Addon:
    id: str
    price: Decimal
    pricing_model: AddonPricingModel
    name: str | None = None


@dataclass(frozen=True)
class AddonSelection:
    addon: Addon
    quantity: int = 1


def calculate_addon_line_total(
    *,
    addon: Addon,
    quantity: int,
    total_guests: int,
) -> Decimal:
    """Calculate the line total for one selected add-on.

    Args:
        addon: Catalog add-on (price + pricing model).
        quantity: Number of units selected.
        total_guests: adults + children. Every guest counts here,
            including a child exempted from the occupancy surcharge.

    Returns:
        price * total_guests * quantity for per_person,
        price * quantity for per_booking.
    """
    if addon.pricing_model == AddonPricingModel.PER_PERSON:
        return addon.price * total_guests * quantity
    return addon.price * quantity


def calculate_addons_total(selections: Iterable[AddonSelection], total_guests: int) -> Decimal:
    """Sum the line totals of all selections."""
    total = ZERO
    for sel in selections:
        total += calculate_addon_line_total(
            addon=sel.addon,
            quantity=sel.quantity,
            total_guests=total_guests,
        )
    return total
