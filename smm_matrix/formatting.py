"""smm_matrix.formatting
========================
Mini-README: Small presentation helpers registered as Jinja2 filters. Prices are
stored in USD and converted at fixed display rates.
"""

from __future__ import annotations

from decimal import Decimal

CURRENCY_RATES = {"USD": Decimal("1"), "EUR": Decimal("0.92"), "GBP": Decimal("0.78")}
CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "GBP": "£"}


def currency(value: Decimal | float | int | None, code: str = "USD") -> str:
    """Format a USD amount in ``code``; whole amounts drop their decimals."""

    code = code.upper()
    amount = Decimal(str(value or 0)) * CURRENCY_RATES.get(code, Decimal("1"))
    symbol = CURRENCY_SYMBOLS.get(code, "$")
    if amount == amount.to_integral_value():
        return f"{symbol}{int(amount)}"
    return f"{symbol}{amount:.2f}"


def stars(rating: int | None) -> str:
    """Render a 1-5 rating as filled stars."""

    return "★" * max(0, min(5, int(rating or 0)))


def paragraphs(text: str | None) -> list[str]:
    """Split a post body into non-empty blocks separated by blank lines."""

    return [block.strip() for block in (text or "").split("\n\n") if block.strip()]
