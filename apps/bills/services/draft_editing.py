"""
Draft editing service.

All changes to a ``BillDraft`` go through these functions. Each one checks
everything it needs before touching the draft, so a raised exception always
leaves the draft exactly as it was.
"""

import logging
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .allocation import allocate_draft
from .currency import ZERO, parse_rupiah
from .draft_state import SURCHARGE_KINDS, BillDraft, DraftItem, DraftParticipant
from .exceptions import DraftValidationError
from .validation import (
    MAX_DESCRIPTION_LENGTH,
    validate_bill_total,
    validate_item,
    validate_participant,
    validate_surcharge,
)
from apps.bills.models import ItemCategory

logger = logging.getLogger(__name__)


class ScanStatus(str, Enum):
    FULL = 'full'
    PARTIAL = 'partial'
    FAILED = 'failed'


@dataclass(frozen=True)
class ScanOutcome:
    """How many of the scanned candidates made it into the draft."""

    kept: int
    scanned: int

    @property
    def status(self) -> ScanStatus:
        if self.kept == 0:
            return ScanStatus.FAILED
        if self.kept < self.scanned:
            return ScanStatus.PARTIAL
        return ScanStatus.FULL

    @property
    def message(self) -> str:
        if self.status == ScanStatus.FAILED:
            return "No valid items could be added"
        if self.status == ScanStatus.PARTIAL:
            return f"{self.kept} of {self.scanned} items added"
        return f"{self.kept} items added from scan"


def _new_id() -> str:
    return uuid.uuid4().hex


def add_item(draft: BillDraft, *, name, price, quantity=1, category=ItemCategory.FOOD) -> DraftItem:
    """
    Validate and append an item with no assignees.

    Raises:
        ItemValidationError: If any field is rejected.
        DraftValidationError: ``total_too_high`` if the bill would grow past
            the largest total that can be stored.
    """
    fragment = validate_item(name=name, price=price, quantity=quantity, category=category)
    validate_bill_total(allocate_draft(draft).total + fragment.price * fragment.quantity)
    item = DraftItem(
        id=_new_id(),
        name=fragment.name,
        price=fragment.price,
        quantity=fragment.quantity,
        category=fragment.category,
    )
    draft.items.append(item)
    return item


def remove_item(draft: BillDraft, *, item_id: str) -> None:
    """Remove an item. Participants are untouched."""
    item = draft.get_item(item_id)
    draft.items.remove(item)


def add_participant(draft: BillDraft, *, name) -> DraftParticipant:
    """
    Validate and append a participant.

    Raises:
        ParticipantValidationError: Empty/long name, limit reached or duplicate.
    """
    fragment = validate_participant(name=name, existing_names=draft.participant_names())
    participant = DraftParticipant(id=_new_id(), name=fragment.name)
    draft.participants.append(participant)
    return participant


def remove_participant(draft: BillDraft, *, participant_id: str) -> None:
    """Remove a participant together with all of its item assignments."""
    participant = draft.get_participant(participant_id)

    draft.participants.remove(participant)
    for item in draft.items:
        if participant_id in item.assigned_to:
            item.assigned_to.remove(participant_id)


def toggle_assignment(draft: BillDraft, *, item_id: str, participant_id: str) -> bool:
    """
    Assign a participant to an item, or unassign if already assigned.

    Returns:
        True if the participant is now assigned to the item.

    Raises:
        ItemNotFoundError: If the item id is not in the draft.
        ParticipantNotFoundError: If the participant id is not in the draft.
    """
    item = draft.get_item(item_id)
    draft.get_participant(participant_id)

    if participant_id in item.assigned_to:
        item.assigned_to.remove(participant_id)
        return False

    item.assigned_to.append(participant_id)
    return True


def set_surcharge(draft: BillDraft, *, kind: str, raw_value) -> None:
    """
    Set tax, service or tip from raw user input.

    Blank, unparseable and negative input all become zero; the fields are
    optional and often half-typed. Amounts that are too large to store are
    rejected with ``surcharge_too_high`` or ``total_too_high``.
    """
    if kind not in SURCHARGE_KINDS:
        raise DraftValidationError(f"Unknown surcharge '{kind}'", code='invalid_surcharge')

    amount = parse_rupiah(raw_value)
    amount = validate_surcharge(amount if amount > ZERO else ZERO)
    validate_bill_total(allocate_draft(draft).total - getattr(draft, kind) + amount)

    setattr(draft, kind, amount)


def set_details(draft: BillDraft, *, title=None, description=None) -> None:
    """Update title and/or description. The title is checked at save time."""
    if description is not None and len(str(description).strip()) > MAX_DESCRIPTION_LENGTH:
        raise DraftValidationError(
            f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters",
            code='description_too_long'
        )

    if title is not None:
        draft.title = str(title)
    if description is not None:
        draft.description = str(description)


def add_scanned_items(draft: BillDraft, candidates: Iterable) -> ScanOutcome:
    """
    Add receipt-scan candidates that pass item validation.

    Each candidate is a mapping with ``name``, ``price`` and an optional
    ``quantity`` (defaults to 1). Invalid candidates are dropped; the
    outcome reports how many of them were kept. A candidate that would push
    the bill past the largest storable total is dropped as well.
    """
    candidates = list(candidates)
    accepted: List[DraftItem] = []
    running_total = allocate_draft(draft).total

    for candidate in candidates:
        if not isinstance(candidate, dict):
            continue
        try:
            fragment = validate_item(
                name=candidate.get('name'),
                price=candidate.get('price'),
                quantity=candidate.get('quantity') or 1,
                category=ItemCategory.FOOD,
            )
            line_amount = fragment.price * fragment.quantity
            validate_bill_total(running_total + line_amount)
        except DraftValidationError as e:
            logger.debug("Dropped scanned item %r: %s", candidate.get('name'), e.code)
            continue

        running_total += line_amount
        accepted.append(DraftItem(
            id=_new_id(),
            name=fragment.name,
            price=fragment.price,
            quantity=fragment.quantity,
            category=fragment.category,
        ))

    draft.items.extend(accepted)

    outcome = ScanOutcome(kept=len(accepted), scanned=len(candidates))
    logger.info(
        "Receipt scan: kept %d of %d candidates (%s)",
        outcome.kept, outcome.scanned, outcome.status.value
    )
    return outcome
