"""Night rate resolution: base rates and rate adjustments per calendar night.

Pure functions over in-memory catalog data. No DB access here; the caller
fetches the accommodation type and the tenant's rate adjustments and passes
them in.

Each night in [check_in, check_out) is priced on its own:
1. weekday or weekend (Saturday/Sunday) base rate
2. the first matching active rate adjustment, if any
3. effective rate, never below zero
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Sequence, Union

from .money import ZERO, to_json_number


class AdjustmentType(str, Enum):
    PERCENTAGE_DISCOUNT = "percentage_discount"
    PERCENTAGE_SURCHARGE = "percentage_surcharge"
    FIXED_OVERRIDE = "fixed_override"


@dataclass(frozen=True)
class AppliesToAll:
    """Adjustment covers every accommodation type."""

    def matches(self, accommodation_type_id: str) -> bool:
        return True


@dataclass(frozen=True)
class AppliesToSpecific:
    """Adjustment covers only the listed accommodation types.

    An empty set is valid and matches nothing.
    """

    type_ids: frozenset[str] = frozenset()

    def matches(self, accommodation_type_id: str) -> bool:
        return accommodation_type_id in self.type_ids


AppliesTo = Union[AppliesToAll, AppliesToSpecific]


def parse_applies_to(applies_to: str, accommodation_type_ids: Iterable[Any] | None) -> AppliesTo:
    """Map the flat ``applies_to`` + id list columns onto the tagged union."""
    if applies_to == "all":
        return AppliesToAll()
    if applies_to == "specific":
        return AppliesToSpecific(frozenset(str(i) for i in accommodation_type_ids or ()))
    raise ValueError(f"Unknown applies_to: {applies_to}")


@dataclass(frozen=True)
class AccommodationType:
    id: str
    base_rate_weekday: Decimal
    base_rate_weekend: Decimal
    base_pax: int
    max_pax: int
    additional_pax_fee: Decimal
    name: str | None = None


@dataclass(frozen=True)
class RateAdjustment:
    name: str
    start_date: date
    end_date: date
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    applies_to: AppliesTo = AppliesToAll()
    is_active: bool = True
    id: str | None = None

    def covers(self, night: date) -> bool:
        return self.start_date <= night <= self.end_date


@dataclass(frozen=True)
class NightBreakdown:
    """Price of one night.

    ``day_of_week`` counts from 0 = Sunday to 6 = Saturday, the numbering
    used by stored breakdowns. ``adjustment_amount`` is the signed delta
    before the zero floor is applied to ``effective_rate``.
    """

    date: date
    day_of_week: int
    is_weekend: bool
    base_rate: Decimal
    adjustment_name: str | None
    adjustment_amount: Decimal
    effective_rate: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "day_of_week": self.day_of_week,
            "is_weekend": self.is_weekend,
            "base_rate": to_json_number(self.base_rate),
            "adjustment_name": self.adjustment_name,
            "adjustment_amount": to_json_number(self.adjustment_amount),
            "effective_rate": to_json_number(self.effective_rate),
        }


def find_adjustment(
    night: date,
    accommodation_type_id: str,
    rate_adjustments: Sequence[RateAdjustment],
) -> RateAdjustment | None:
    """Return the first active adjustment covering *night* for the type.

    First match in list order wins; overlapping adjustments are not ranked.
    """
    for adj in rate_adjustments:
        if not adj.is_active:
            continue
        if not adj.covers(night):
            continue
        if not adj.applies_to.matches(accommodation_type_id):
            continue
        return adj
    return None


def _apply_adjustment(base_rate: Decimal, adj: RateAdjustment) -> tuple[Decimal, Decimal]:
    """Return (adjustment_amount, effective_rate) before the zero floor."""
    value = adj.adjustment_value

    if adj.adjustment_type == AdjustmentType.PERCENTAGE_DISCOUNT:
        delta = -(base_rate * value / 100)
        return delta, base_rate + delta

    if adj.adjustment_type == AdjustmentType.PERCENTAGE_SURCHARGE:
        delta = base_rate * value / 100
        return delta, base_rate + delta

    # FIXED_OVERRIDE: the value replaces the rate outright
    return value - base_rate, value


def calculate_night_breakdowns(
    check_in: date,
    check_out: date,
    accommodation_type: AccommodationType,
    rate_adjustments: Sequence[RateAdjustment],
) -> list[NightBreakdown]:
    """Price every night from check_in (inclusive) to check_out (exclusive).

    Returns an empty list when check_out is not after check_in.
    """
    nights: list[NightBreakdown] = []
    current = check_in

    while current < check_out:
        # date.weekday(): Monday=0 .. Sunday=6
        is_weekend = current.weekday() >= 5
        base_rate = (
            accommodation_type.base_rate_weekend
            if is_weekend
            else accommodation_type.base_rate_weekday
        )

        adj = find_adjustment(current, accommodation_type.id, rate_adjustments)
        if adj is None:
            adjustment_name = None
            adjustment_amount = ZERO
            effective_rate = base_rate
        else:
            adjustment_name = adj.name
            adjustment_amount, effective_rate = _apply_adjustment(base_rate, adj)

        nights.append(
            NightBreakdown(
                date=current,
                day_of_week=(current.weekday() + 1) % 7,
                is_weekend=is_weekend,
                base_rate=base_rate,
                adjustment_name=adjustment_name,
                adjustment_amount=adjustment_amount,
                effective_rate=max(ZERO, effective_rate),
            )
        )
        current += timedelta(days=1)

    return nights


def adjustments_for_stay(
    rate_adjustments: Iterable[RateAdjustment],
    check_in: date,
    check_out: date,
) -> list[RateAdjustment]:
    """Keep active adjustments whose range overlaps [check_in, check_out].

    Input order is preserved, so first-match selection is unaffected.
    """
    return [
        adj
        for adj in rate_adjustments
        if adj.is_active and adj.start_date <= check_out and adj.end_date >= check_in
    ]
