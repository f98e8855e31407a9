"""Supported store currencies and price formatting."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal


@dataclass(frozen=True)
class Currency:
    code: str
    symbol: str
    name: str
    symbol_position: Literal["before", "after"] = "before"


CURRENCIES: tuple[Currency, ...] = (
    Currency("USD", "$", "US Dollar"),
    Currency("EUR", "€", "Euro"),
    Currency("GBP", "£", "British Pound"),
    Currency("NGN", "₦", "Nigerian Naira"),
    Currency("GHS", "₵", "Ghanaian Cedi"),
    Currency("KES", "KSh", "Kenyan Shilling"),
    Currency("ZAR", "R", "South African Rand"),
    Currency("CAD", "C$", "Canadian Dollar"),
    Currency("AUD", "A$", "Australian Dollar"),
    Currency("JPY", "¥", "Japanese Yen"),
    Currency("CNY", "¥", "Chinese Yuan"),
    Currency("INR", "₹", "Indian Rupee"),
)

DEFAULT_CURRENCY = "USD"

_BY_CODE = {currency.code: currency for currency in CURRENCIES}


def is_supported(code: str) -> bool:
    return code in _BY_CODE


def get_currency(code: str | None) -> Currency:
    """Look up a currency by ISO code, falling back to the default."""
    return _BY_CODE.get(code or "", _BY_CODE[DEFAULT_CURRENCY])


def format_price(amount: Decimal | float | int | str, code: str | None = None) -> str:
    """Format an amount with two decimals and the currency symbol, e.g. ``₦1200.00``."""
    currency = get_currency(code)
    number = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    if currency.symbol_position == "before":
        return f"{currency.symbol}{number}"
    return f"{number}{currency.symbol}"
