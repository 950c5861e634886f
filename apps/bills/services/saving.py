"""
Save gate and bill persistence.

``save_draft`` is the single path from a draft to stored records. It
refuses drafts that are not ready, recomputes the allocation with the same
engine the preview uses, and hands the result to the transaction store.
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple
from uuid import UUID

from django.db import transaction

from .allocation import Allocation, allocate_draft
from .draft_state import BillDraft
from .exceptions import PersistenceError, SaveGateError
from .stores import get_transaction_store
from .validation import MIN_PARTICIPANTS_TO_SAVE, validate_details

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SavedBill:
    transaction_id: UUID
    item_ids: Tuple[UUID, ...]
    participant_ids: Tuple[UUID, ...]
    allocation: Allocation


def check_save_gate(draft: BillDraft) -> Tuple[str, str]:
    """
    Check that a draft can be saved.

    Checks run in this order and the first failure wins:
        1. Title (and description) lengths.
        2. At least one item.
        3. At least two participants.
        4. Every item assigned to someone.

    Returns:
        Tuple of the trimmed (title, description).

    Raises:
        SaveGateError: With code ``empty_title``, ``title_too_long``,
            ``description_too_long``, ``no_items``,
            ``not_enough_participants`` or ``unassigned_items``. For the
            last one, ``items`` lists the names of the unassigned items.
    """
    title, description = validate_details(title=draft.title, description=draft.description)

    if not draft.items:
        raise SaveGateError("Add at least 1 item", code='no_items')

    if len(draft.participants) < MIN_PARTICIPANTS_TO_SAVE:
        raise SaveGateError(
            f"Add at least {MIN_PARTICIPANTS_TO_SAVE} participants",
            code='not_enough_participants'
        )

    unassigned = [item.name for item in draft.unassigned_items()]
    if unassigned:
        raise SaveGateError(
            f"These items are not assigned yet: {', '.join(unassigned)}",
            code='unassigned_items',
            items=unassigned,
        )

    return title, description


def _assignment_pairs(draft: BillDraft, item_ids: List[UUID], participant_ids: List[UUID]):
    stored_participant = {
        participant.id: stored_id
        for participant, stored_id in zip(draft.participants, participant_ids)
    }
    return [
        (stored_item_id, stored_participant[participant_id])
        for item, stored_item_id in zip(draft.items, item_ids)
        for participant_id in item.assigned_to
    ]


def save_draft(*, draft: BillDraft, user, store=None) -> SavedBill:
    """
    Persist a draft as a transaction.

    The store receives, in order: the transaction record, the item
    records, the participant records with their owed amounts, and the
    item/participant assignment pairs keyed by the ids the store returned.

    Args:
        draft: The draft to save. It is not modified.
        user: Owner of the saved transaction.
        store: Transaction store; defaults to ``get_transaction_store()``.

    Returns:
        SavedBill with the stored ids and the allocation that was stored.

    Raises:
        SaveGateError: If the draft is not ready (see ``check_save_gate``).
        PersistenceError: If any insert fails. Nothing after the failing
            insert is attempted.
    """
    title, description = check_save_gate(draft)
    allocation = allocate_draft(draft)
    store = store or get_transaction_store()

    try:
        with transaction.atomic():
            transaction_id = store.create_transaction(
                user=user,
                title=title,
                description=description,
                allocation=allocation,
            )
            item_ids = store.create_items(transaction_id, draft.items)
            participant_ids = store.create_participants(
                transaction_id,
                draft.participants,
                allocation.participant_totals,
            )
            store.create_assignments(_assignment_pairs(draft, item_ids, participant_ids))
    except PersistenceError:
        logger.exception("Saving bill %r failed", title)
        raise

    logger.info(
        "Saved bill %s (%d items, %d participants, total %s)",
        transaction_id, len(item_ids), len(participant_ids), allocation.total
    )

    return SavedBill(
        transaction_id=transaction_id,
        item_ids=tuple(item_ids),
        participant_ids=tuple(participant_ids),
        allocation=allocation,
    )
