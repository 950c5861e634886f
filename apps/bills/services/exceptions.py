"""
Domain-specific exceptions for bills app.

Every exception carries a short machine-readable ``code`` next to its
user-facing message. Views catch these and convert them to HTTP responses;
none of them leaves the draft in a half-modified state.
"""


class BillsServiceError(Exception):
    """Base exception for all bills service errors."""

    default_code = 'bills_error'

    def __init__(self, message, *, code=None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class DraftValidationError(BillsServiceError):
    """Raised when a user-entered value is rejected."""

    default_code = 'invalid'


class ItemValidationError(DraftValidationError):
    """Raised when an item's name, price, quantity or category is invalid."""

    default_code = 'invalid_item'


class ParticipantValidationError(DraftValidationError):
    """Raised when a participant cannot be added."""

    default_code = 'invalid_participant'


class DraftEntityNotFoundError(BillsServiceError):
    """Raised when an operation references an id not present in the draft."""

    default_code = 'not_found'


class ItemNotFoundError(DraftEntityNotFoundError):
    """Raised when an item id is not in the draft."""

    default_code = 'item_not_found'


class ParticipantNotFoundError(DraftEntityNotFoundError):
    """Raised when a participant id is not in the draft."""

    default_code = 'participant_not_found'


class SaveGateError(BillsServiceError):
    """Raised when the draft is not ready to be saved."""

    default_code = 'not_ready'

    def __init__(self, message, *, code=None, items=None):
        super().__init__(message, code=code)
        self.items = list(items or [])


class PersistenceError(BillsServiceError):
    """Raised when the transaction store fails to insert records."""

    default_code = 'persistence_failed'


class ReceiptScanError(BillsServiceError):
    """Raised when the receipt scanner is unavailable or returns garbage."""

    default_code = 'scan_failed'
