"""Stay pricing: single stays and multi-room group bookings.

Builds on the night rate resolver. Adds the occupancy surcharge and
add-ons, and for group bookings keeps a per-room breakdown so the total
can be split across the bookings created for each room.

The functions never raise for structurally valid input: guest counts,
capacity and date ordering are validated by the caller. Results are
deterministic for identical input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Sequence

from .addons import AddonSelection, calculate_addons_total
from .money import ZERO, to_json_number
from .rates import AccommodationType, NightBreakdown, RateAdjustment, calculate_night_breakdowns


@dataclass(frozen=True)
class PriceCalculation:
    nights: list[NightBreakdown]
    total_nights: int
    total_base_rate: Decimal
    extra_pax: int
    pax_surcharge_per_night: Decimal
    total_pax_surcharge: Decimal
    addons_total: Decimal
    grand_total: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "nights": [n.as_dict() for n in self.nights],
            "total_nights": self.total_nights,
            "total_base_rate": to_json_number(self.total_base_rate),
            "extra_pax": self.extra_pax,
            "pax_surcharge_per_night": to_json_number(self.pax_surcharge_per_night),
            "total_pax_surcharge": to_json_number(self.total_pax_surcharge),
            "addons_total": to_json_number(self.addons_total),
            "grand_total": to_json_number(self.grand_total),
        }


@dataclass(frozen=True)
class RoomEntry:
    room_id: str
    accommodation_type: AccommodationType
    num_adults: int
    num_children: int = 0


@dataclass(frozen=True)
class PerRoomBreakdown:
    room_id: str
    type_id: str
    base_amount: Decimal
    pax_surcharge: Decimal
    addons_amount: Decimal
    total_amount: Decimal

    def as_dict(self) -> dict[str, Any]:
        return {
            "room_id": self.room_id,
            "type_id": self.type_id,
            "base_amount": to_json_number(self.base_amount),
            "pax_surcharge": to_json_number(self.pax_surcharge),
            "addons_amount": to_json_number(self.addons_amount),
            "total_amount": to_json_number(self.total_amount),
        }


@dataclass(frozen=True)
class MultiRoomPriceCalculation(PriceCalculation):
    """Aggregate price of a group booking.

    ``addons_total`` includes both the per-room add-ons and
    ``group_addons_total`` (group add-ons are counted once, not per room).
    """

    per_room_breakdown: list[PerRoomBreakdown] = field(default_factory=list)
    group_addons_total: Decimal = ZERO

    def as_dict(self) -> dict[str, Any]:
        data = super().as_dict()
        data["per_room_breakdown"] = [b.as_dict() for b in self.per_room_breakdown]
        data["group_addons_total"] = to_json_number(self.group_addons_total)
        return data


def billable_pax(num_adults: int, num_children: int) -> int:
    """Guests counted against base occupancy.

    One child per stay/room rides free, however many children there are.
    """
    free_children = min(num_children, 1)
    return num_adults + num_children - free_children


def _pax_surcharge(
    accommodation_type: AccommodationType,
    num_adults: int,
    num_children: int,
    total_nights: int,
) -> tuple[int, Decimal, Decimal]:
    """Return (extra_pax, surcharge_per_night, total_surcharge).

    The surcharge is flat per night; rate adjustments do not touch it.
    max_pax is not enforced here.
    """
    extra_pax = max(0, billable_pax(num_adults, num_children) - accommodation_type.base_pax)
    per_night = extra_pax * accommodation_type.additional_pax_fee
    return extra_pax, per_night, per_night * total_nights


def empty_price_calculation() -> MultiRoomPriceCalculation:
    return MultiRoomPriceCalculation(
        nights=[],
        total_nights=0,
        total_base_rate=ZERO,
        extra_pax=0,
        pax_surcharge_per_night=ZERO,
        total_pax_surcharge=ZERO,
        addons_total=ZERO,
        grand_total=ZERO,
        per_room_breakdown=[],
        group_addons_total=ZERO,
    )


def calculate_price(
    check_in: date,
    check_out: date,
    num_adults: int,
    num_children: int,
    accommodation_type: AccommodationType,
    rate_adjustments: Sequence[RateAdjustment],
    selected_addons: Sequence[AddonSelection] = (),
) -> PriceCalculation:
    """Full price calculation for one overnight stay."""
    nights = calculate_night_breakdowns(check_in, check_out, accommodation_type, rate_adjustments)
    total_nights = len(nights)
    total_base_rate = sum((n.effective_rate for n in nights), ZERO)

    extra_pax, per_night, total_surcharge = _pax_surcharge(
        accommodation_type, num_adults, num_children, total_nights
    )
    addons_total = calculate_addons_total(selected_addons, num_adults + num_children)

    return PriceCalculation(
        nights=nights,
        total_nights=total_nights,
        total_base_rate=total_base_rate,
        extra_pax=extra_pax,
        pax_surcharge_per_night=per_night,
        total_pax_surcharge=total_surcharge,
        addons_total=addons_total,
        grand_total=total_base_rate + total_surcharge + addons_total,
    )


def calculate_multi_room_price(
    check_in: date,
    check_out: date,
    rooms: Sequence[RoomEntry],
    rate_adjustments: Sequence[RateAdjustment],
    group_addons: Sequence[AddonSelection] = (),
    room_addons: Mapping[str, Sequence[AddonSelection]] | None = None,
) -> MultiRoomPriceCalculation:
    """Price each room on its own, then aggregate into one group total.

    Args:
        check_in: Shared check-in date (inclusive).
        check_out: Shared check-out date (exclusive).
        rooms: One entry per room; rooms may be of different types.
        rate_adjustments: Shared adjustment list (first match wins per night).
        group_addons: Add-ons charged once for the whole group
            (normally per_booking). A per_person add-on here is scaled by
            the guest count of all rooms.
        room_addons: room_id -> that room's own add-ons (normally
            per_person), priced with the room's own guest count.

    Returns:
        Aggregate totals plus one PerRoomBreakdown per room, in input order.
        An empty room list yields the all-zero result.
    """
    if not rooms:
        return empty_price_calculation()

    room_addons = room_addons or {}

    breakdowns: list[PerRoomBreakdown] = []
    shared_nights: list[NightBreakdown] | None = None
    total_base = ZERO
    total_surcharge = ZERO
    per_night_surcharge = ZERO
    extra_pax_total = 0
    rooms_addons_total = ZERO
    group_guests = 0

    for room in rooms:
        nights = calculate_night_breakdowns(
            check_in, check_out, room.accommodation_type, rate_adjustments
        )
        if shared_nights is None:
            shared_nights = nights

        base_amount = sum((n.effective_rate for n in nights), ZERO)
        extra_pax, per_night, surcharge = _pax_surcharge(
            room.accommodation_type, room.num_adults, room.num_children, len(nights)
        )
        room_guests = room.num_adults + room.num_children
        addons_amount = calculate_addons_total(room_addons.get(room.room_id, ()), room_guests)

        breakdowns.append(
            PerRoomBreakdown(
                room_id=room.room_id,
                type_id=room.accommodation_type.id,
                base_amount=base_amount,
                pax_surcharge=surcharge,
                addons_amount=addons_amount,
                total_amount=base_amount + surcharge + addons_amount,
            )
        )

        total_base += base_amount
        total_surcharge += surcharge
        per_night_surcharge += per_night
        extra_pax_total += extra_pax
        rooms_addons_total += addons_amount
        group_guests += room_guests

    group_addons_total = calculate_addons_total(group_addons, group_guests)
    addons_total = rooms_addons_total + group_addons_total
    nights = shared_nights or []

    return MultiRoomPriceCalculation(
        nights=nights,
        total_nights=len(nights),
        total_base_rate=total_base,
        extra_pax=extra_pax_total,
        pax_surcharge_per_night=per_night_surcharge,
        total_pax_surcharge=total_surcharge,
        addons_total=addons_total,
        grand_total=total_base + total_surcharge + addons_total,
        per_room_breakdown=breakdowns,
        group_addons_total=group_addons_total,
    )


def group_totals_consistent(result: MultiRoomPriceCalculation) -> bool:
    """Check that the per-room breakdown adds up to the aggregate totals.

    A False here means a logic bug, not bad input; callers log it.
    """
    rooms = result.per_room_breakdown
    base = sum((b.base_amount for b in rooms), ZERO)
    surcharge = sum((b.pax_surcharge for b in rooms), ZERO)
    addons = sum((b.addons_amount for b in rooms), ZERO)
    totals = sum((b.total_amount for b in rooms), ZERO)

    return (
        base == result.total_base_rate
        and surcharge == result.total_pax_surcharge
        and addons + result.group_addons_total == result.addons_total
        and totals + result.group_addons_total == result.grand_total
    )
