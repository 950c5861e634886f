from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from apps.bills.services import (
    BillDraft,
    DraftValidationError,
    ItemNotFoundError,
    ItemValidationError,
    ParticipantNotFoundError,
    ParticipantValidationError,
    ScanStatus,
    add_item,
    add_participant,
    add_scanned_items,
    allocate_draft,
    clear_draft,
    load_draft,
    remove_item,
    remove_participant,
    set_details,
    set_surcharge,
    store_draft,
    toggle_assignment,
)


# =============================================================================
# Items
# =============================================================================

class TestItems:

    def test_add_item_starts_unassigned(self, draft):
        item = add_item(draft, name='Nasi Goreng', price='Rp 20.000', quantity=2)

        assert draft.items == [item]
        assert item.assigned_to == []
        assert item.line_amount == Decimal('40000')

    def test_item_ids_are_unique(self, draft):
        first = add_item(draft, name='Es Teh', price=5000)
        second = add_item(draft, name='Es Teh', price=5000)

        assert first.id != second.id

    def test_rejected_item_leaves_draft_unchanged(self, ready_draft):
        before = ready_draft.to_dict()

        with pytest.raises(ItemValidationError):
            add_item(ready_draft, name='Gratis', price=0)

        assert ready_draft.to_dict() == before

    @patch('apps.bills.services.validation.MAX_BILL_TOTAL', Decimal('50000'))
    def test_item_pushing_total_too_high(self, ready_draft):
        before = ready_draft.to_dict()

        with pytest.raises(DraftValidationError) as exc_info:
            add_item(ready_draft, name='Kerupuk', price=501)

        assert exc_info.value.code == 'total_too_high'
        assert ready_draft.to_dict() == before

    def test_largest_items_fit(self, draft):
        for _ in range(3):
            add_item(draft, name='Genset', price=999999999, quantity=9999)

        assert allocate_draft(draft).subtotal == Decimal('29996999970003')

    def test_remove_item_keeps_participants(self, ready_draft):
        item = ready_draft.items[0]

        remove_item(ready_draft, item_id=item.id)

        assert item not in ready_draft.items
        assert len(ready_draft.participants) == 2

    def test_remove_unknown_item(self, ready_draft):
        with pytest.raises(ItemNotFoundError):
            remove_item(ready_draft, item_id='missing')


# =============================================================================
# Participants
# =============================================================================

class TestParticipants:

    def test_add_participant(self, draft):
        participant = add_participant(draft, name=' Andi ')

        assert participant.name == 'Andi'
        assert draft.participants == [participant]

    def test_duplicate_participant_rejected(self, draft):
        add_participant(draft, name='Andi')

        with pytest.raises(ParticipantValidationError) as exc_info:
            add_participant(draft, name='andi')

        assert exc_info.value.code == 'duplicate_participant'
        assert len(draft.participants) == 1

    def test_eleventh_participant_rejected(self, draft):
        for n in range(10):
            add_participant(draft, name=f'Teman {n}')

        with pytest.raises(ParticipantValidationError) as exc_info:
            add_participant(draft, name='Teman Baru')

        assert exc_info.value.code == 'participant_limit'
        assert len(draft.participants) == 10

    def test_remove_participant_drops_assignments(self, ready_draft):
        budi = ready_draft.participants[1]

        remove_participant(ready_draft, participant_id=budi.id)

        assert budi not in ready_draft.participants
        for item in ready_draft.items:
            assert budi.id not in item.assigned_to
        assert budi.id not in allocate_draft(ready_draft).participant_totals

    def test_readded_participant_has_no_assignments(self, ready_draft):
        budi = ready_draft.participants[1]
        remove_participant(ready_draft, participant_id=budi.id)

        again = add_participant(ready_draft, name='Budi')

        assert again.id != budi.id
        assert all(again.id not in item.assigned_to for item in ready_draft.items)

    def test_removed_participant_item_becomes_unassigned(self, ready_draft):
        budi = ready_draft.participants[1]

        remove_participant(ready_draft, participant_id=budi.id)

        assert [item.name for item in ready_draft.unassigned_items()] == ['Es Teh']

    def test_remove_unknown_participant(self, ready_draft):
        with pytest.raises(ParticipantNotFoundError):
            remove_participant(ready_draft, participant_id='missing')


# =============================================================================
# Assignments
# =============================================================================

class TestToggleAssignment:

    def test_toggle_on_and_off(self, draft):
        andi = add_participant(draft, name='Andi')
        item = add_item(draft, name='Sate', price=15000)

        assert toggle_assignment(draft, item_id=item.id, participant_id=andi.id) is True
        assert item.assigned_to == [andi.id]

        assert toggle_assignment(draft, item_id=item.id, participant_id=andi.id) is False
        assert item.assigned_to == []

    def test_unknown_item(self, ready_draft):
        andi = ready_draft.participants[0]

        with pytest.raises(ItemNotFoundError):
            toggle_assignment(ready_draft, item_id='missing', participant_id=andi.id)

    def test_unknown_participant_leaves_item_untouched(self, ready_draft):
        item = ready_draft.items[0]
        before = list(item.assigned_to)

        with pytest.raises(ParticipantNotFoundError):
            toggle_assignment(ready_draft, item_id=item.id, participant_id='missing')

        assert item.assigned_to == before


# =============================================================================
# Surcharges and Details
# =============================================================================

class TestSurcharges:

    @pytest.mark.parametrize('raw_value, expected', [
        ('Rp 6.000', Decimal('6000')),
        (2500, Decimal('2500')),
        ('', Decimal('0')),
        (None, Decimal('0')),
        ('abc', Decimal('0')),
        ('-Rp 1.000', Decimal('0')),
        (-500, Decimal('0')),
    ])
    def test_set_surcharge(self, draft, raw_value, expected):
        set_surcharge(draft, kind='service', raw_value=raw_value)
        assert draft.service == expected

    def test_unknown_kind(self, draft):
        with pytest.raises(DraftValidationError) as exc_info:
            set_surcharge(draft, kind='discount', raw_value=1000)
        assert exc_info.value.code == 'invalid_surcharge'

    def test_surcharge_too_high(self, ready_draft):
        with pytest.raises(DraftValidationError) as exc_info:
            set_surcharge(ready_draft, kind='tip', raw_value='Rp 1.000.000.000.000')

        assert exc_info.value.code == 'surcharge_too_high'
        assert ready_draft.tip == Decimal('0')

    @patch('apps.bills.services.validation.MAX_BILL_TOTAL', Decimal('50000'))
    def test_surcharge_pushing_total_too_high(self, ready_draft):
        # ready_draft totals 49500 with 4500 tax
        set_surcharge(ready_draft, kind='tax', raw_value=5000)

        with pytest.raises(DraftValidationError) as exc_info:
            set_surcharge(ready_draft, kind='tip', raw_value=1)

        assert exc_info.value.code == 'total_too_high'
        assert ready_draft.tax == Decimal('5000')
        assert ready_draft.tip == Decimal('0')


class TestDetails:

    def test_set_title_and_description(self, draft):
        set_details(draft, title='Makan siang', description='Warung Padang')

        assert draft.title == 'Makan siang'
        assert draft.description == 'Warung Padang'

    def test_partial_update(self, draft):
        set_details(draft, title='Awal', description='Catatan')
        set_details(draft, title='Baru')

        assert draft.title == 'Baru'
        assert draft.description == 'Catatan'

    def test_description_too_long(self, draft):
        with pytest.raises(DraftValidationError) as exc_info:
            set_details(draft, title='Baru', description='x' * 1001)

        assert exc_info.value.code == 'description_too_long'
        assert draft.title == ''


# =============================================================================
# Receipt Scan Results
# =============================================================================

class TestAddScannedItems:

    def test_all_candidates_kept(self, draft):
        outcome = add_scanned_items(draft, [
            {'name': 'Nasi Goreng', 'price': 20000, 'quantity': 2},
            {'name': 'Es Jeruk', 'price': '8.000'},
        ])

        assert outcome.status == ScanStatus.FULL
        assert outcome.message == '2 items added from scan'
        assert [item.name for item in draft.items] == ['Nasi Goreng', 'Es Jeruk']
        assert draft.items[1].quantity == 1
        assert all(item.assigned_to == [] for item in draft.items)

    def test_invalid_candidates_dropped(self, draft):
        outcome = add_scanned_items(draft, [
            {'name': 'Mie Ayam', 'price': 15000},
            {'name': 'Diskon', 'price': 0},
            {'name': 'Teh Manis', 'price': 4000},
        ])

        assert outcome.kept == 2
        assert outcome.scanned == 3
        assert outcome.status == ScanStatus.PARTIAL
        assert outcome.message == '2 of 3 items added'
        assert [item.name for item in draft.items] == ['Mie Ayam', 'Teh Manis']

    def test_nothing_valid(self, draft):
        outcome = add_scanned_items(draft, [{'name': '', 'price': 1000}, 'garbage'])

        assert outcome.status == ScanStatus.FAILED
        assert outcome.message == 'No valid items could be added'
        assert draft.items == []

    def test_appends_to_existing_items(self, ready_draft):
        add_scanned_items(ready_draft, [{'name': 'Kerupuk', 'price': 2000}])

        assert len(ready_draft.items) == 3
        assert ready_draft.items[-1].category == 'Makanan'

    @patch('apps.bills.services.validation.MAX_BILL_TOTAL', Decimal('60000'))
    def test_candidates_past_total_ceiling_dropped(self, ready_draft):
        outcome = add_scanned_items(ready_draft, [
            {'name': 'Sate', 'price': 8000},
            {'name': 'Gurame Bakar', 'price': 85000},
            {'name': 'Kerupuk', 'price': 2000},
        ])

        assert outcome.message == '2 of 3 items added'
        assert [item.name for item in ready_draft.items[2:]] == ['Sate', 'Kerupuk']
        assert allocate_draft(ready_draft).total == Decimal('59500')


# =============================================================================
# Session Storage
# =============================================================================

class TestDraftSerialization:

    def test_round_trip_keeps_everything(self, ready_draft):
        restored = BillDraft.from_dict(ready_draft.to_dict())

        assert restored == ready_draft
        assert allocate_draft(restored) == allocate_draft(ready_draft)


class TestDraftSession:

    @pytest.fixture
    def session(self):
        return {}

    def test_store_and_load(self, session, ready_draft):
        owner = SimpleNamespace(pk=1)
        store_draft(session, owner, ready_draft)

        assert load_draft(session, owner) == ready_draft

    def test_drafts_are_kept_per_user(self, session, ready_draft):
        owner, other = SimpleNamespace(pk=1), SimpleNamespace(pk=2)
        store_draft(session, owner, ready_draft)

        assert load_draft(session, other) == BillDraft()

        clear_draft(session, other)
        assert load_draft(session, owner) == ready_draft

    def test_clear(self, session, ready_draft):
        owner = SimpleNamespace(pk=1)
        store_draft(session, owner, ready_draft)

        clear_draft(session, owner)

        assert load_draft(session, owner) == BillDraft()
