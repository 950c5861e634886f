"""
Validation of user-entered and scanned values.

Each validator either returns a normalized fragment or raises a
``DraftValidationError`` subclass whose ``code`` names the single rule
that failed. The same item validator is used for manual entry and for
every receipt-scan candidate.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Iterable, Optional

from apps.bills.models import ItemCategory

from .currency import parse_rupiah
from .exceptions import (
    DraftValidationError,
    ItemValidationError,
    ParticipantValidationError,
    SaveGateError,
)


MAX_ITEM_NAME_LENGTH = 100
MAX_ITEM_PRICE = Decimal('999999999')
MAX_ITEM_QUANTITY = 9999
MAX_CATEGORY_LENGTH = 50

# Stored amounts have 20 digits, 2 of them decimals
MAX_SURCHARGE = Decimal('999999999999')
MAX_BILL_TOTAL = Decimal('999999999999999')

MAX_PARTICIPANT_NAME_LENGTH = 100
MAX_PARTICIPANTS = 10
MIN_PARTICIPANTS_TO_SAVE = 2

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000


@dataclass(frozen=True)
class ItemFragment:
    name: str
    price: Decimal
    quantity: int
    category: str


@dataclass(frozen=True)
class ParticipantFragment:
    name: str


def _clean_text(value) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _coerce_price(value) -> Optional[Decimal]:
    if isinstance(value, str):
        return parse_rupiah(value)
    if value is None or isinstance(value, bool):
        return None
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return price if price.is_finite() else None


def _coerce_quantity(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, Decimal):
        return int(value) if value.is_finite() and value == value.to_integral_value() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def validate_item(*, name, price, quantity=1, category=ItemCategory.FOOD) -> ItemFragment:
    """
    Validate a single item.

    Args:
        name: Item name; surrounding whitespace is trimmed.
        price: Unit price as a number or rupiah-formatted text.
        quantity: Whole number of units.
        category: One of ``ItemCategory`` or free text.

    Returns:
        ItemFragment with the normalized values.

    Raises:
        ItemValidationError: With one of the codes ``empty_name``,
            ``name_too_long``, ``invalid_price``, ``price_too_high``,
            ``invalid_quantity``, ``quantity_too_high``, ``category_too_long``.
    """
    clean_name = _clean_text(name)
    if not clean_name:
        raise ItemValidationError("Item name cannot be empty", code='empty_name')
    if len(clean_name) > MAX_ITEM_NAME_LENGTH:
        raise ItemValidationError(
            f"Item name must be at most {MAX_ITEM_NAME_LENGTH} characters",
            code='name_too_long'
        )

    clean_price = _coerce_price(price)
    if clean_price is None or clean_price <= 0:
        raise ItemValidationError("Price must be greater than 0", code='invalid_price')
    if clean_price > MAX_ITEM_PRICE:
        raise ItemValidationError(
            f"Price must be at most {MAX_ITEM_PRICE}",
            code='price_too_high'
        )

    clean_quantity = _coerce_quantity(quantity)
    if clean_quantity is None or clean_quantity < 1:
        raise ItemValidationError(
            "Quantity must be a whole number of at least 1",
            code='invalid_quantity'
        )
    if clean_quantity > MAX_ITEM_QUANTITY:
        raise ItemValidationError(
            f"Quantity must be at most {MAX_ITEM_QUANTITY}",
            code='quantity_too_high'
        )

    clean_category = ItemCategory.FOOD.value if category in (None, '') else str(category)
    if len(clean_category) > MAX_CATEGORY_LENGTH:
        raise ItemValidationError(
            f"Category must be at most {MAX_CATEGORY_LENGTH} characters",
            code='category_too_long'
        )

    return ItemFragment(
        name=clean_name,
        price=clean_price,
        quantity=clean_quantity,
        category=clean_category,
    )


def validate_participant(*, name, existing_names: Iterable[str] = ()) -> ParticipantFragment:
    """
    Validate a participant name against the current participants.

    Raises:
        ParticipantValidationError: With one of the codes ``empty_name``,
            ``name_too_long``, ``participant_limit``, ``duplicate_participant``.
    """
    clean_name = _clean_text(name)
    if not clean_name:
        raise ParticipantValidationError("Participant name cannot be empty", code='empty_name')
    if len(clean_name) > MAX_PARTICIPANT_NAME_LENGTH:
        raise ParticipantValidationError(
            f"Participant name must be at most {MAX_PARTICIPANT_NAME_LENGTH} characters",
            code='name_too_long'
        )

    existing = [existing_name.lower() for existing_name in existing_names]
    if len(existing) >= MAX_PARTICIPANTS:
        raise ParticipantValidationError(
            f"A bill can have at most {MAX_PARTICIPANTS} participants",
            code='participant_limit'
        )
    if clean_name.lower() in existing:
        raise ParticipantValidationError(
            f"Participant '{clean_name}' already exists",
            code='duplicate_participant'
        )

    return ParticipantFragment(name=clean_name)


def validate_details(*, title, description='') -> tuple:
    """
    Validate the bill title and optional description.

    Returns:
        Tuple of (title, description), both trimmed.

    Raises:
        SaveGateError: ``empty_title``, ``title_too_long`` or
            ``description_too_long``.
    """
    clean_title = _clean_text(title)
    clean_description = _clean_text(description)

    if not clean_title:
        raise SaveGateError("Title cannot be empty", code='empty_title')
    if len(clean_title) > MAX_TITLE_LENGTH:
        raise SaveGateError(
            f"Title must be at most {MAX_TITLE_LENGTH} characters",
            code='title_too_long'
        )
    if len(clean_description) > MAX_DESCRIPTION_LENGTH:
        raise SaveGateError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
            code='description_too_long'
        )

    return clean_title, clean_description


def validate_surcharge(amount: Decimal) -> Decimal:
    """
    Reject a surcharge above ``MAX_SURCHARGE``.

    Raises:
        DraftValidationError: ``surcharge_too_high``.
    """
    if amount > MAX_SURCHARGE:
        raise DraftValidationError(
            f"Surcharge must be at most {MAX_SURCHARGE}",
            code='surcharge_too_high'
        )
    return amount


def validate_bill_total(total: Decimal) -> Decimal:
    """
    Reject a change that would push the grand total past ``MAX_BILL_TOTAL``.

    Raises:
        DraftValidationError: ``total_too_high``.
    """
    if total > MAX_BILL_TOTAL:
        raise DraftValidationError(
            f"Bill total must be at most {MAX_BILL_TOTAL}",
            code='total_too_high'
        )
    return total
