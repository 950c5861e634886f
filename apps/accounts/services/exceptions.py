"""
Domain-specific exceptions for accounts services.

Like the bills exceptions, each one carries a short ``code`` so clients can
tell a taken email from a bad password without parsing the message.
"""


class AccountsServiceError(Exception):
    """Base exception for accounts services."""

    default_code = 'accounts_error'

    def __init__(self, message, *, code=None):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code


class EmailTakenError(AccountsServiceError):
    """Raised when registering with an email that already has an account."""

    default_code = 'email_taken'


class InvalidCredentialsError(AccountsServiceError):
    """Raised when the email/password pair does not match an account."""

    default_code = 'invalid_credentials'


class InactiveAccountError(AccountsServiceError):
    """Raised when a deactivated account tries to sign in."""

    default_code = 'account_inactive'
