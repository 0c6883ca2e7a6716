"""Day-tour price endpoint.

POST /day-tours/calculate-price: flat adult/child rates plus add-ons.
The tenant's day-tour rates are supplied by the caller.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import APIRouter
from pydantic import BaseModel, ConfigDict, Field

from budabook.domain.day_tours import calculate_day_tour_price
from budabook.observability.logging import get_logger

from .pricing import AddonSelectionIn

logger = get_logger(__name__)

router = APIRouter(prefix="/day-tours", tags=["day-tours"])

MAX_DAY_TOUR_GUESTS_PER_FIELD = 50


class DayTourPriceRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    tour_date: date | None = None
    num_adults: int = Field(ge=1, le=MAX_DAY_TOUR_GUESTS_PER_FIELD)
    num_children: int = Field(default=0, ge=0, le=MAX_DAY_TOUR_GUESTS_PER_FIELD)
    adult_rate: Decimal = Field(ge=0)
    child_rate: Decimal = Field(default=Decimal(0), ge=0)
    addons: list[AddonSelectionIn] = Field(default_factory=list)


@router.post("/calculate-price")
def post_day_tour_price(body: DayTourPriceRequest) -> dict:
    """Price a day tour."""
    result = calculate_day_tour_price(
        body.num_adults,
        body.num_children,
        body.adult_rate,
        body.child_rate,
        [s.to_domain() for s in body.addons],
    )
    logger.info(
        "day tour price calculated",
        extra={
            "tour_date": body.tour_date,
            "guests": body.num_adults + body.num_children,
            "total": str(result.total),
        },
    )
    return {"success": True, "data": result.as_dict()}
