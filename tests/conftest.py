"""Shared pytest fixtures for BudaBook pricing tests."""
import sys
sys.dont_write_bytecode = True

from decimal import Decimal  # noqa: E402

import pytest  # noqa: E402

from budabook.domain.rates import AccommodationType  # noqa: E402



@pytest.fixture(autouse=True)
def _clear_settings_env(monkeypatch):
    """Run every test against default settings.

    Settings are read from the environment on each call, so a developer's
    CURRENCY_SYMBOL or LOG_LEVEL would otherwise leak into assertions.
    """
    for var in ("CURRENCY_CODE", "CURRENCY_SYMBOL", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def villa() -> AccommodationType:
    """Type used in the reference scenarios: 2000/2500, 2 included, fee 300."""
    return AccommodationType(
        id="type-villa",
        name="Garden Villa",
        base_rate_weekday=Decimal(2000),
        base_rate_weekend=Decimal(2500),
        base_pax=2,
        max_pax=6,
        additional_pax_fee=Decimal(300),
    )


@pytest.fixture
def family_room() -> AccommodationType:
    return AccommodationType(
        id="type-family",
        name="Family Room",
        base_rate_weekday=Decimal(3000),
        base_rate_weekend=Decimal(3500),
        base_pax=4,
        max_pax=8,
        additional_pax_fee=Decimal(200),
    )
