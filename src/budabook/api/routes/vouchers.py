"""Voucher validation endpoint.

POST /vouchers/validate: checks a voucher record against a booking amount
and returns the discount it grants. The caller looks the voucher up by
code for the tenant; an unknown code never reaches this service.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from budabook.domain.money import format_currency, to_json_number
from budabook.domain.vouchers import Voucher, VoucherRejected, calculate_voucher_discount
from budabook.infra.time import utc_today
from budabook.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/vouchers", tags=["vouchers"])


class VoucherIn(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    description: str | None = None
    discount_type: Literal["percentage", "fixed"]
    discount_value: Decimal = Field(ge=0)
    max_discount: Decimal | None = Field(default=None, ge=0)
    min_booking_amount: Decimal | None = Field(default=None, ge=0)
    valid_from: date | None = None
    valid_until: date | None = None
    usage_limit: int | None = Field(default=None, ge=0)
    times_used: int = Field(default=0, ge=0)
    applies_to: Literal["overnight", "day_tour", "both"] = "both"
    is_active: bool = True

    def to_domain(self) -> Voucher:
        return Voucher(**self.model_dump())


class ValidateVoucherRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    voucher: VoucherIn
    booking_type: Literal["overnight", "day_tour"]
    booking_amount: Decimal = Field(ge=0)


_REJECTION_MESSAGES = {
    "not_yet_active": "Voucher is not yet active",
    "expired": "Voucher has expired",
    "limit_reached": "Voucher usage limit reached",
}

_BOOKING_TYPE_LABELS = {"overnight": "overnight stays", "day_tour": "day tours"}


def _rejection_response(exc: VoucherRejected) -> JSONResponse:
    """Map a rejection to its HTTP status, message and error code."""
    # An inactive voucher is reported the same as an unknown code
    if exc.reason_code == "inactive":
        return JSONResponse(
            status_code=404,
            content={"success": False, "error": "Invalid voucher code", "code": "INVALID_CODE"},
        )

    if exc.reason_code == "wrong_type":
        label = _BOOKING_TYPE_LABELS.get(exc.meta["applies_to"], exc.meta["applies_to"])
        message = f"Voucher is only valid for {label}"
    elif exc.reason_code == "min_amount":
        minimum = format_currency(exc.meta["min_booking_amount"])
        message = f"Minimum booking amount of {minimum} required"
    else:
        message = _REJECTION_MESSAGES.get(exc.reason_code, "Voucher cannot be applied")

    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message, "code": exc.reason_code.upper()},
    )


@router.post("/validate")
def post_validate_voucher(body: ValidateVoucherRequest):
    """Return the discount for a voucher, or an error with a rejection code.

    Validity dates are checked against the server's current UTC date.
    """
    voucher = body.voucher.to_domain()
    try:
        discount = calculate_voucher_discount(
            voucher,
            booking_type=body.booking_type,
            booking_amount=body.booking_amount,
            today=utc_today(),
        )
    except VoucherRejected as exc:
        logger.info("voucher rejected", extra={"reason_code": exc.reason_code})
        return _rejection_response(exc)

    return {
        "success": True,
        "data": {
            "code": voucher.code,
            "description": voucher.description,
            "discount_type": voucher.discount_type,
            "discount_value": to_json_number(voucher.discount_value),
            "discount_amount": to_json_number(discount),
            "max_discount": (
                to_json_number(voucher.max_discount) if voucher.max_discount is not None else None
            ),
        },
    }
