"""Service-level routes."""

from fastapi import APIRouter

from budabook.infra.settings import get_settings

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Health check endpoint."""
    return {"status": "ok", "currency": get_settings().currency_code}
