"""FX conversion helpers.

AED is the fixed base currency. Amounts are first converted into AED using the
source multiplier, then into the display currency by dividing by the display
multiplier.
"""
from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USD_TO_AED = 3.6725
DEFAULT_INR_TO_AED = 0.044
BASE_CURRENCY = "AED"

CURRENCY_SYMBOLS = {
    "AED": "AED",
    "INR": "₹",
    "USD": "$",
}


@dataclass(frozen=True)
class CurrencyConfig:
    """Conversion rates to AED plus the currency amounts are displayed in."""

    display_currency: str = BASE_CURRENCY
    usd_to_aed: float = DEFAULT_USD_TO_AED
    inr_to_aed: float = DEFAULT_INR_TO_AED

    def multiplier(self, currency: str) -> float:
        """Return the factor that turns one unit of ``currency`` into AED."""

        code = currency.upper()
        if code == "INR":
            return self.inr_to_aed
        if code == "USD":
            return self.usd_to_aed
        return 1.0

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS.get(self.display_currency.upper(), self.display_currency.upper())


def to_aed(amount: float, currency: str, config: CurrencyConfig) -> float:
    """Convert ``amount`` in ``currency`` into AED."""

    return amount * config.multiplier(currency)


def convert(amount: float, from_currency: str, config: CurrencyConfig) -> float:
    """Convert an amount from its original currency into the display currency."""

    amount_aed = to_aed(amount, from_currency, config)
    target = config.display_currency.upper()
    if target == BASE_CURRENCY:
        return amount_aed
    rate = config.multiplier(target)
    return amount_aed / rate if rate > 0 else amount_aed


def convert_aed(amount_aed: float, config: CurrencyConfig) -> float:
    return convert(amount_aed, BASE_CURRENCY, config)


def format_amount(amount: float | None, config: CurrencyConfig, *, decimals: int = 2) -> str:
    """Format an amount already expressed in the display currency."""

    if amount is None:
        return "—"
    return f"{config.symbol} {amount:,.{decimals}f}"


def format_aed(amount_aed: float | None, config: CurrencyConfig, *, decimals: int = 2) -> str:
    """Format an AED amount after converting it into the display currency."""

    if amount_aed is None:
        return "—"
    return format_amount(convert_aed(amount_aed, config), config, decimals=decimals)


__all__ = [
    "BASE_CURRENCY",
    "CURRENCY_SYMBOLS",
    "CurrencyConfig",
    "DEFAULT_INR_TO_AED",
    "DEFAULT_USD_TO_AED",
    "convert",
    "convert_aed",
    "format_aed",
    "format_amount",
    "to_aed",
]
