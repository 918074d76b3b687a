"""
Denomination constants and helpers for erdkit.

EGLD amounts travel on the wire as integers in the smallest unit:

    1 EGLD = 10**18 denominated units

Conversions go through ``Decimal`` so no float ever touches an amount.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

# Number of decimal places of the native currency.
EGLD_DECIMALS: int = 18

# Denominated units per whole EGLD.
DENOMINATION: int = 10 ** EGLD_DECIMALS

NATIVE_TICKER: str = "EGLD"


def to_denominated(amount: str | int | Decimal, decimals: int = EGLD_DECIMALS) -> int:
    """Convert a human amount (``"1.5"``) into an integer of smallest units.

    >>> to_denominated("1.5")
    1500000000000000000
    >>> to_denominated("0.01", 2)
    1
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation as exc:
        raise ValueError(f"Invalid amount: {amount!r}") from exc
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError("Amount must not be negative")
    with localcontext() as ctx:
        # scaleb rounds to the context precision
        ctx.prec = max(ctx.prec, len(value.as_tuple().digits))
        scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimal places")
    return int(scaled)


def from_denominated(value: int, decimals: int = EGLD_DECIMALS) -> Decimal:
    """Convert an integer of smallest units back to a ``Decimal`` amount."""
    amount = Decimal(value)
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, len(amount.as_tuple().digits))
        return amount.scaleb(-decimals)


def egld_to_denominated(amount: str | int | Decimal) -> int:
    return to_denominated(amount, EGLD_DECIMALS)


def denominated_to_egld(value: int) -> Decimal:
    return from_denominated(value, EGLD_DECIMALS)


def format_amount(value: int, decimals: int = EGLD_DECIMALS, ticker: str = NATIVE_TICKER) -> str:
    """Return a human-readable string with every decimal place shown."""
    whole, frac = divmod(value, 10 ** decimals)
    if decimals == 0:
        return f"{whole} {ticker}"
    return f"{whole}.{frac:0{decimals}d} {ticker}"
