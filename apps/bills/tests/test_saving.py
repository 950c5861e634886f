from decimal import Decimal
from uuid import uuid4

import pytest

from apps.bills.models import ItemAssignment, Transaction, TransactionItem, TransactionParticipant
from apps.bills.services import (
    PersistenceError,
    SaveGateError,
    add_item,
    add_participant,
    check_save_gate,
    remove_participant,
    save_draft,
    set_details,
    toggle_assignment,
)
from apps.bills.services.stores import OrmTransactionStore


class RecordingStore:
    """Store that hands out fresh ids and remembers every call."""

    def __init__(self):
        self.calls = []

    def create_transaction(self, *, user, title, description, allocation):
        self.calls.append(('transaction', title, description, allocation.total))
        return uuid4()

    def create_items(self, transaction_id, items):
        self.calls.append(('items', [item.name for item in items]))
        return [uuid4() for _ in items]

    def create_participants(self, transaction_id, participants, totals):
        self.calls.append(('participants', [totals[p.id] for p in participants]))
        return [uuid4() for _ in participants]

    def create_assignments(self, pairs):
        self.calls.append(('assignments', list(pairs)))


class FailingParticipantsStore(OrmTransactionStore):
    """ORM store whose participant insert always fails."""

    def __init__(self):
        self.assignments_called = False

    def create_participants(self, transaction_id, participants, totals):
        raise PersistenceError("Could not save participants: connection lost")

    def create_assignments(self, pairs):
        self.assignments_called = True
        super().create_assignments(pairs)


# =============================================================================
# Save Gate
# =============================================================================

class TestSaveGate:

    def test_ready_draft_passes(self, ready_draft):
        assert check_save_gate(ready_draft) == ('Makan malam', '')

    def test_empty_title(self, ready_draft):
        set_details(ready_draft, title='   ')

        with pytest.raises(SaveGateError) as exc_info:
            check_save_gate(ready_draft)
        assert exc_info.value.code == 'empty_title'

    def test_title_too_long(self, ready_draft):
        set_details(ready_draft, title='t' * 201)

        with pytest.raises(SaveGateError) as exc_info:
            check_save_gate(ready_draft)
        assert exc_info.value.code == 'title_too_long'

    def test_no_items(self, draft):
        set_details(draft, title='Kosong')
        add_participant(draft, name='Andi')
        add_participant(draft, name='Budi')

        with pytest.raises(SaveGateError) as exc_info:
            check_save_gate(draft)
        assert exc_info.value.code == 'no_items'

    def test_one_participant(self, ready_draft):
        remove_participant(ready_draft, participant_id=ready_draft.participants[1].id)

        with pytest.raises(SaveGateError) as exc_info:
            check_save_gate(ready_draft)
        assert exc_info.value.code == 'not_enough_participants'

    def test_unassigned_items_are_listed(self, ready_draft):
        add_item(ready_draft, name='Kerupuk', price=2000)
        add_item(ready_draft, name='Sambal', price=1000)

        with pytest.raises(SaveGateError) as exc_info:
            check_save_gate(ready_draft)

        assert exc_info.value.code == 'unassigned_items'
        assert exc_info.value.items == ['Kerupuk', 'Sambal']
        assert 'Kerupuk, Sambal' in exc_info.value.message

    def test_rejected_draft_reaches_no_store(self, draft):
        store = RecordingStore()

        with pytest.raises(SaveGateError):
            save_draft(draft=draft, user=None, store=store)

        assert store.calls == []


# =============================================================================
# Saving
# =============================================================================

@pytest.mark.django_db
class TestSaveDraft:

    def test_store_calls_in_order(self, ready_draft):
        store = RecordingStore()

        save_draft(draft=ready_draft, user=None, store=store)

        assert [call[0] for call in store.calls] == [
            'transaction', 'items', 'participants', 'assignments'
        ]
        assert store.calls[0] == ('transaction', 'Makan malam', '', Decimal('49500'))
        assert store.calls[1] == ('items', ['Nasi Goreng', 'Es Teh'])
        assert store.calls[2] == ('participants', [Decimal('22250'), Decimal('27250')])

    def test_assignment_pairs_use_stored_ids(self, ready_draft):
        store = RecordingStore()

        saved = save_draft(draft=ready_draft, user=None, store=store)

        nasi_id, teh_id = saved.item_ids
        andi_id, budi_id = saved.participant_ids
        assert store.calls[3] == ('assignments', [
            (nasi_id, andi_id),
            (nasi_id, budi_id),
            (teh_id, budi_id),
        ])

    def test_persists_records(self, ready_draft, user):
        saved = save_draft(draft=ready_draft, user=user)

        transaction = Transaction.objects.get(id=saved.transaction_id)
        assert transaction.user == user
        assert transaction.title == 'Makan malam'
        assert transaction.total_amount == Decimal('49500.00')
        assert transaction.tax_amount == Decimal('4500.00')
        assert transaction.get_subtotal() == Decimal('45000.00')

        items = list(transaction.items.order_by('position'))
        assert [(i.item_name, i.item_price, i.quantity, i.category) for i in items] == [
            ('Nasi Goreng', Decimal('20000.00'), 2, 'Makanan'),
            ('Es Teh', Decimal('5000.00'), 1, 'Minuman'),
        ]

        participants = list(transaction.participants.order_by('position'))
        assert [(p.participant_name, p.total_amount) for p in participants] == [
            ('Andi', Decimal('22250.00')),
            ('Budi', Decimal('27250.00')),
        ]

        assert ItemAssignment.objects.filter(item__transaction=transaction).count() == 3

    def test_amounts_are_rounded_half_up(self, user, draft):
        set_details(draft, title='Patungan')
        people = [add_participant(draft, name=name) for name in ('Andi', 'Budi', 'Cici')]
        item = add_item(draft, name='Pizza', price=10000)
        for person in people:
            toggle_assignment(draft, item_id=item.id, participant_id=person.id)

        saved = save_draft(draft=draft, user=user)

        amounts = TransactionParticipant.objects.filter(
            transaction_id=saved.transaction_id
        ).values_list('total_amount', flat=True)
        assert list(amounts) == [Decimal('3333.33')] * 3

    def test_draft_is_not_modified(self, ready_draft, user):
        before = ready_draft.to_dict()

        save_draft(draft=ready_draft, user=user)

        assert ready_draft.to_dict() == before

    def test_failing_insert_stops_save(self, ready_draft, user):
        store = FailingParticipantsStore()

        with pytest.raises(PersistenceError):
            save_draft(draft=ready_draft, user=user, store=store)

        assert store.assignments_called is False
        assert Transaction.objects.count() == 0
        assert TransactionItem.objects.count() == 0

    def test_store_from_settings(self, ready_draft, user, settings):
        settings.BILLS_TRANSACTION_STORE = (
            'apps.bills.tests.test_saving.FailingParticipantsStore'
        )

        with pytest.raises(PersistenceError):
            save_draft(draft=ready_draft, user=user)
