"""
Bills app services layer.

Services hold the bill-splitting logic: validating entries, editing the
session draft, allocating amounts and saving the result. Views only
translate between HTTP and these functions.
"""

from .exceptions import (
    BillsServiceError,
    DraftValidationError,
    ItemValidationError,
    ParticipantValidationError,
    DraftEntityNotFoundError,
    ItemNotFoundError,
    ParticipantNotFoundError,
    SaveGateError,
    PersistenceError,
    ReceiptScanError,
)

from .currency import (
    format_rupiah,
    parse_rupiah,
    to_money,
)

from .draft_state import (
    BillDraft,
    DraftItem,
    DraftParticipant,
    load_draft,
    store_draft,
    clear_draft,
)

from .draft_editing import (
    ScanOutcome,
    ScanStatus,
    add_item,
    remove_item,
    add_participant,
    remove_participant,
    toggle_assignment,
    set_surcharge,
    set_details,
    add_scanned_items,
)

from .allocation import (
    Allocation,
    allocate,
    allocate_draft,
)

from .saving import (
    SavedBill,
    check_save_gate,
    save_draft,
)

from .receipt_scanning import get_receipt_scanner


__all__ = [
    # Exceptions
    'BillsServiceError',
    'DraftValidationError',
    'ItemValidationError',
    'ParticipantValidationError',
    'DraftEntityNotFoundError',
    'ItemNotFoundError',
    'ParticipantNotFoundError',
    'SaveGateError',
    'PersistenceError',
    'ReceiptScanError',

    # Display formatting
    'format_rupiah',
    'parse_rupiah',
    'to_money',

    # Draft state
    'BillDraft',
    'DraftItem',
    'DraftParticipant',
    'load_draft',
    'store_draft',
    'clear_draft',

    # Draft editing
    'ScanOutcome',
    'ScanStatus',
    'add_item',
    'remove_item',
    'add_participant',
    'remove_participant',
    'toggle_assignment',
    'set_surcharge',
    'set_details',
    'add_scanned_items',

    # Allocation
    'Allocation',
    'allocate',
    'allocate_draft',

    # Saving
    'SavedBill',
    'check_save_gate',
    'save_draft',

    # Receipt scanning
    'get_receipt_scanner',
]
