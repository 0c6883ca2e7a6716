"""Price calculation endpoints for the booking wizard.

POST /calculate-price: single stay
POST /calculate-price/multi-room: group booking, one breakdown per room

Catalog records (accommodation types, rate adjustments, add-ons) arrive in
the request body already scoped to the tenant; this service does no
lookups of its own. Every call is a snapshot: the wizard re-posts on each
input change and discards responses for stale inputs.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, ConfigDict, Field, field_validator

from budabook.domain.addons import Addon, AddonPricingModel, AddonSelection
from budabook.domain.pricing import (
    RoomEntry,
    calculate_multi_room_price,
    calculate_price,
    group_totals_consistent,
)
from budabook.domain.rates import (
    AccommodationType,
    AdjustmentType,
    RateAdjustment,
    adjustments_for_stay,
    parse_applies_to,
)
from budabook.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/calculate-price", tags=["pricing"])

MAX_GUESTS_PER_FIELD = 20
MAX_ROOMS = 50


# ── Schemas ───────────────────────────────────────────────


class AccommodationTypeIn(BaseModel):
    id: str
    name: str | None = None
    base_rate_weekday: Decimal = Field(ge=0)
    base_rate_weekend: Decimal = Field(ge=0)
    base_pax: int = Field(ge=0)
    max_pax: int = Field(ge=0)
    additional_pax_fee: Decimal = Field(default=Decimal(0), ge=0)

    def to_domain(self) -> AccommodationType:
        return AccommodationType(
            id=self.id,
            name=self.name,
            base_rate_weekday=self.base_rate_weekday,
            base_rate_weekend=self.base_rate_weekend,
            base_pax=self.base_pax,
            max_pax=self.max_pax,
            additional_pax_fee=self.additional_pax_fee,
        )


class RateAdjustmentIn(BaseModel):
    id: str | None = None
    name: str
    start_date: date
    end_date: date
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    applies_to: Literal["all", "specific"] = "all"
    accommodation_type_ids: list[str] = Field(default_factory=list)
    is_active: bool = True

    def to_domain(self) -> RateAdjustment:
        return RateAdjustment(
            id=self.id,
            name=self.name,
            start_date=self.start_date,
            end_date=self.end_date,
            adjustment_type=self.adjustment_type,
            adjustment_value=self.adjustment_value,
            applies_to=parse_applies_to(self.applies_to, self.accommodation_type_ids),
            is_active=self.is_active,
        )


class AddonIn(BaseModel):
    id: str
    name: str | None = None
    price: Decimal = Field(ge=0)
    pricing_model: AddonPricingModel


class AddonSelectionIn(BaseModel):
    addon: AddonIn
    quantity: int = Field(default=1, ge=1)

    def to_domain(self) -> AddonSelection:
        return AddonSelection(
            addon=Addon(
                id=self.addon.id,
                name=self.addon.name,
                price=self.addon.price,
                pricing_model=self.addon.pricing_model,
            ),
            quantity=self.quantity,
        )


class StayDates(BaseModel):
    check_in_date: date
    check_out_date: date


class CalculatePriceRequest(StayDates):
    model_config = ConfigDict(extra="forbid")

    num_adults: int = Field(ge=1, le=MAX_GUESTS_PER_FIELD)
    num_children: int = Field(default=0, ge=0, le=MAX_GUESTS_PER_FIELD)
    accommodation_type: AccommodationTypeIn
    rate_adjustments: list[RateAdjustmentIn] = Field(default_factory=list)
    addons: list[AddonSelectionIn] = Field(default_factory=list)


class RoomIn(BaseModel):
    room_id: str
    accommodation_type: AccommodationTypeIn
    num_adults: int = Field(ge=1, le=MAX_GUESTS_PER_FIELD)
    num_children: int = Field(default=0, ge=0, le=MAX_GUESTS_PER_FIELD)
    addons: list[AddonSelectionIn] = Field(default_factory=list)


class CalculateMultiRoomPriceRequest(StayDates):
    model_config = ConfigDict(extra="forbid")

    rooms: list[RoomIn]
    rate_adjustments: list[RateAdjustmentIn] = Field(default_factory=list)
    group_addons: list[AddonSelectionIn] = Field(default_factory=list)

    @field_validator("rooms")
    @classmethod
    def limit_rooms(cls, v: list[RoomIn]) -> list[RoomIn]:
        if len(v) > MAX_ROOMS:
            raise ValueError(f"at most {MAX_ROOMS} rooms per request")
        room_ids = [r.room_id for r in v]
        if len(set(room_ids)) != len(room_ids):
            raise ValueError("room_id values must be unique")
        return v


def _require_valid_range(body: StayDates) -> None:
    if body.check_out_date <= body.check_in_date:
        raise HTTPException(
            status_code=400, detail="check_out_date must be after check_in_date"
        )


# ── POST /calculate-price ─────────────────────────────────


@router.post("")
def post_calculate_price(body: CalculatePriceRequest) -> dict:
    """Price a single stay, night by night."""
    _require_valid_range(body)

    adjustments = adjustments_for_stay(
        [a.to_domain() for a in body.rate_adjustments],
        body.check_in_date,
        body.check_out_date,
    )
    result = calculate_price(
        body.check_in_date,
        body.check_out_date,
        body.num_adults,
        body.num_children,
        body.accommodation_type.to_domain(),
        adjustments,
        [s.to_domain() for s in body.addons],
    )

    logger.info(
        "price calculated",
        extra={
            "accommodation_type_id": body.accommodation_type.id,
            "nights": result.total_nights,
            "adjustments_considered": len(adjustments),
            "grand_total": str(result.grand_total),
        },
    )
    return {"success": True, "data": result.as_dict()}


# ── POST /calculate-price/multi-room ──────────────────────


@router.post("/multi-room")
def post_calculate_multi_room_price(body: CalculateMultiRoomPriceRequest) -> dict:
    """Price a group booking room by room and aggregate.

    The per-room breakdown is what gets stored on each room's booking, so
    the aggregate is checked against it before returning.
    """
    _require_valid_range(body)

    adjustments = adjustments_for_stay(
        [a.to_domain() for a in body.rate_adjustments],
        body.check_in_date,
        body.check_out_date,
    )
    rooms = [
        RoomEntry(
            room_id=r.room_id,
            accommodation_type=r.accommodation_type.to_domain(),
            num_adults=r.num_adults,
            num_children=r.num_children,
        )
        for r in body.rooms
    ]
    room_addons = {r.room_id: [s.to_domain() for s in r.addons] for r in body.rooms}

    result = calculate_multi_room_price(
        body.check_in_date,
        body.check_out_date,
        rooms,
        adjustments,
        [s.to_domain() for s in body.group_addons],
        room_addons,
    )

    if not group_totals_consistent(result):
        logger.error(
            "multi-room totals do not match per-room breakdown",
            extra={"rooms": len(rooms), "grand_total": str(result.grand_total)},
        )

    logger.info(
        "multi-room price calculated",
        extra={
            "rooms": len(rooms),
            "nights": result.total_nights,
            "adjustments_considered": len(adjustments),
            "grand_total": str(result.grand_total),
        },
    )
    return {"success": True, "data": result.as_dict()}
