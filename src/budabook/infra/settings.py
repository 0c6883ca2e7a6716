"""Runtime settings for the pricing service.

Read from environment variables each time they are requested; nothing is
cached at module level.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass


@dataclass(frozen=True)
class PricingSettings:
    """Settings for display formatting and logging.

    Attributes:
        currency_code: ISO 4217 code of the resort's currency.
        currency_symbol: Symbol prefixed by format_currency.
        log_level: Name of the stdlib logging level.
    """

    currency_code: str = "PHP"
    currency_symbol: str = "₱"
    log_level: str = "INFO"

    @property
    def log_level_number(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


def get_settings() -> PricingSettings:
    """Load settings, falling back to defaults for unset variables."""
    defaults = PricingSettings()
    return PricingSettings(
        currency_code=os.environ.get("CURRENCY_CODE") or defaults.currency_code,
        currency_symbol=os.environ.get("CURRENCY_SYMBOL") or defaults.currency_symbol,
        log_level=os.environ.get("LOG_LEVEL") or defaults.log_level,
    )
