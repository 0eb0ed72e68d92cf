"""Value repair rules.

This module derives or corrects numeric and date fields from sibling
fields of the same record. Rules are pure, never consult other records,
and resolve invalid input to null or a default instead of raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import cast

from core.constants import (
    CANONICAL_CATEGORY_SEPARATOR,
    CATEGORY_CODE_LENGTH,
    CATEGORY_CODE_SEPARATOR,
    MONEY_QUANTUM,
    PACKED_DATE_FORMAT,
    PACKED_DATE_LENGTH,
    PRODUCT_KEY_SUFFIX_OFFSET,
)
from transforms.field_normalization import clean_text

_ZERO = Decimal("0")
_MONEY_QUANTUM = Decimal(MONEY_QUANTUM)


@dataclass(frozen=True)
class SalesAmounts:
    """Mutually consistent sales amount, quantity, and unit price."""

    sales: Decimal
    quantity: int
    price: Decimal


@dataclass(frozen=True)
class ProductKeyParts:
    """Structural decomposition of a product key.

    Attributes:
        cat_id: Category code prefix with canonical separators.
        prd_key_clean: Key suffix after the category code.
    """

    cat_id: str
    prd_key_clean: str


def reconcile_sales_amounts(
    sales: Decimal | None,
    quantity: int | None,
    price: Decimal | None,
) -> SalesAmounts:
    """Repair the sales amount, quantity, and unit price of one line.

    Rules run in order, each seeing the values repaired before it:
    a missing or non-positive amount becomes quantity times price, a
    missing or negative quantity becomes zero, and a missing or zero
    price becomes amount over quantity. A negative price is sign-corrected.

    Args:
        sales: Raw sales amount.
        quantity: Raw quantity.
        price: Raw unit price.

    Returns:
        Repaired amounts.
    """
    if sales is None or sales <= _ZERO:
        if quantity is not None and price is not None:
            sales = Decimal(quantity) * price
        else:
            sales = _ZERO
    if quantity is None or quantity < 0:
        quantity = 0
    if price is None or price == _ZERO:
        if quantity != 0:
            price = sales / Decimal(quantity)
        else:
            price = _ZERO
    elif price < _ZERO:
        price = abs(price)
    return SalesAmounts(sales=to_money(sales), quantity=quantity, price=to_money(price))


def split_product_key(prd_key: str) -> ProductKeyParts:
    """Split a product key into category code and clean suffix.

    Both parts are cleaned again after slicing so a space next to the
    split point never leaks into the output.

    Args:
        prd_key: Cleaned product key, e.g. ``CO-RF-FR-R92B-58``.

    Returns:
        Key parts, e.g. ``CO_RF`` and ``FR-R92B-58``.
    """
    prefix = prd_key[:CATEGORY_CODE_LENGTH]
    cat_id = prefix.replace(CATEGORY_CODE_SEPARATOR, CANONICAL_CATEGORY_SEPARATOR)
    return ProductKeyParts(
        cat_id=cast(str, clean_text(cat_id)),
        prd_key_clean=cast(str, clean_text(prd_key[PRODUCT_KEY_SUFFIX_OFFSET:])),
    )


def default_cost(cost: Decimal | None) -> Decimal:
    """Return the cost, or zero when it is missing."""
    if cost is None:
        return to_money(_ZERO)
    return to_money(cost)


def sanitize_birth_date(bdate: date | None, processed_at: datetime) -> date | None:
    """Null out a birth date later than the processing date.

    Args:
        bdate: Raw birth date.
        processed_at: Processing timestamp of the current run.

    Returns:
        The birth date, or None when it lies in the future.
    """
    if bdate is None or bdate > processed_at.date():
        return None
    return bdate


def parse_packed_date(value: int | None) -> date | None:
    """Convert a packed ``YYYYMMDD`` integer into a date.

    Only values of exactly eight decimal digits that form a real calendar
    date convert; every other value yields None.

    Args:
        value: Packed integer date.

    Returns:
        Parsed date, or None.
    """
    if value is None or value < 0:
        return None
    digits = str(value)
    if len(digits) != PACKED_DATE_LENGTH:
        return None
    try:
        return datetime.strptime(digits, PACKED_DATE_FORMAT).date()
    except ValueError:
        return None


def to_money(value: Decimal) -> Decimal:
    """Quantize a decimal to two places, rounding half up.

    Raises:
        decimal.InvalidOperation: If the value is not finite or has too
            many digits to hold two decimal places.
    """
    return value.quantize(_MONEY_QUANTUM, rounding=ROUND_HALF_UP)
