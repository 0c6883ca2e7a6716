"""Voucher discount calculation.

Checks whether a voucher can be used for a booking and computes the
discount. The discount is reported separately; it never alters a
PriceCalculation. The caller fetches the voucher (scoped to the tenant).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

from .money import to_decimal

BookingType = Literal["overnight", "day_tour"]


class VoucherRejected(Exception):
    def __init__(self, reason_code: str, meta: dict | None = None):
        self.reason_code = reason_code
        self.meta = meta or {}
        super().__init__(f"Voucher rejected: {reason_code}")


@dataclass(frozen=True)
class Voucher:
    code: str
    discount_type: Literal["percentage", "fixed"]
    discount_value: Decimal
    description: str | None = None
    max_discount: Decimal | None = None
    min_booking_amount: Decimal | None = None
    valid_from: date | None = None
    valid_until: date | None = None
    usage_limit: int | None = None
    times_used: int = 0
    applies_to: Literal["overnight", "day_tour", "both"] = "both"
    is_active: bool = True


def calculate_voucher_discount(
    voucher: Voucher,
    *,
    booking_type: BookingType,
    booking_amount: Decimal | int | float | str,
    today: date,
) -> Decimal:
    """Return the discount the voucher grants on *booking_amount*.

    Checks run in a fixed order and the first failure is raised.

    Raises:
        VoucherRejected: inactive, not_yet_active, expired, limit_reached,
            wrong_type or min_amount.
    """
    amount = to_decimal(booking_amount)

    if not voucher.is_active:
        raise VoucherRejected("inactive")
    if voucher.valid_from is not None and today < voucher.valid_from:
        raise VoucherRejected("not_yet_active", {"valid_from": str(voucher.valid_from)})
    if voucher.valid_until is not None and today > voucher.valid_until:
        raise VoucherRejected("expired", {"valid_until": str(voucher.valid_until)})
    if voucher.usage_limit is not None and voucher.times_used >= voucher.usage_limit:
        raise VoucherRejected("limit_reached")
    if voucher.applies_to != "both" and voucher.applies_to != booking_type:
        raise VoucherRejected("wrong_type", {"applies_to": voucher.applies_to})
    # A zero minimum means no minimum
    if voucher.min_booking_amount and amount < voucher.min_booking_amount:
        raise VoucherRejected(
            "min_amount", {"min_booking_amount": str(voucher.min_booking_amount)}
        )

    if voucher.discount_type == "percentage":
        discount = amount * voucher.discount_value / 100
        if voucher.max_discount and discount > voucher.max_discount:
            discount = voucher.max_discount
    else:
        discount = voucher.discount_value

    discount = min(discount, amount)
    return discount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
