"""
Transaction store.

The store is the only place saved bills are written. It exposes four
inserts, called in order by ``save_draft``; each returns the ids of what it
created, in input order. A failing insert raises ``PersistenceError``.
"""

from typing import Dict, List, Sequence, Tuple
from uuid import UUID

from django.conf import settings
from django.db import DatabaseError
from django.utils.module_loading import import_string

from apps.bills.models import (
    ItemAssignment,
    Transaction,
    TransactionItem,
    TransactionParticipant,
)

from .allocation import Allocation
from .currency import to_money
from .draft_state import DraftItem, DraftParticipant
from .exceptions import PersistenceError


class OrmTransactionStore:
    """Writes saved bills through the Django ORM."""

    def create_transaction(self, *, user, title: str, description: str, allocation: Allocation) -> UUID:
        try:
            record = Transaction.objects.create(
                user=user,
                title=title,
                description=description,
                total_amount=to_money(allocation.total),
                tax_amount=to_money(allocation.tax),
                service_amount=to_money(allocation.service),
                tip_amount=to_money(allocation.tip),
            )
        except DatabaseError as e:
            raise PersistenceError(f"Could not save transaction: {e}") from e
        return record.id

    def create_items(self, transaction_id: UUID, items: Sequence[DraftItem]) -> List[UUID]:
        records = [
            TransactionItem(
                transaction_id=transaction_id,
                item_name=item.name,
                item_price=to_money(item.price),
                quantity=item.quantity,
                category=item.category,
                position=position,
            )
            for position, item in enumerate(items)
        ]
        try:
            TransactionItem.objects.bulk_create(records)
        except DatabaseError as e:
            raise PersistenceError(f"Could not save items: {e}") from e
        return [record.id for record in records]

    def create_participants(
        self,
        transaction_id: UUID,
        participants: Sequence[DraftParticipant],
        totals: Dict[str, object],
    ) -> List[UUID]:
        records = [
            TransactionParticipant(
                transaction_id=transaction_id,
                participant_name=participant.name,
                total_amount=to_money(totals.get(participant.id, 0)),
                position=position,
            )
            for position, participant in enumerate(participants)
        ]
        try:
            TransactionParticipant.objects.bulk_create(records)
        except DatabaseError as e:
            raise PersistenceError(f"Could not save participants: {e}") from e
        return [record.id for record in records]

    def create_assignments(self, pairs: Sequence[Tuple[UUID, UUID]]) -> None:
        records = [
            ItemAssignment(item_id=item_id, participant_id=participant_id)
            for item_id, participant_id in pairs
        ]
        try:
            ItemAssignment.objects.bulk_create(records)
        except DatabaseError as e:
            raise PersistenceError(f"Could not save assignments: {e}") from e


def get_transaction_store():
    """Instantiate the store class named by ``BILLS_TRANSACTION_STORE``."""
    store_path = getattr(
        settings,
        'BILLS_TRANSACTION_STORE',
        'apps.bills.services.stores.OrmTransactionStore'
    )
    return import_string(store_path)()
