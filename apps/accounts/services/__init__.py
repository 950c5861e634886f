"""
Accounts services layer.

Registration and sign-in for the people who save bills. Views turn the
exceptions below into HTTP error responses.
"""

from .exceptions import (
    AccountsServiceError,
    EmailTakenError,
    InvalidCredentialsError,
    InactiveAccountError,
)
from .user_registration import register_user
from .user_authentication import authenticate_user

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'EmailTakenError',
    'InvalidCredentialsError',
    'InactiveAccountError',

    # Services
    'register_user',
    'authenticate_user',
]
