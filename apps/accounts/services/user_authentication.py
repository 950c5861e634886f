"""Sign-in with email and password."""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from .exceptions import InactiveAccountError, InvalidCredentialsError

User = get_user_model()
logger = logging.getLogger(__name__)


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check credentials and stamp ``last_login``.

    Unknown emails and wrong passwords raise the same error so the response
    does not reveal which accounts exist.

    Raises:
        InvalidCredentialsError: If the email/password pair is wrong.
        InactiveAccountError: If the account has been deactivated.
    """
    with transaction.atomic():
        user = (
            User.objects
            .select_for_update()
            .filter(email__iexact=email.strip())
            .first()
        )

        if user is None or not user.check_password(password):
            logger.info("Failed sign-in for %s", email)
            raise InvalidCredentialsError("Invalid email or password")

        if not user.is_active:
            raise InactiveAccountError("Account is deactivated")

        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])

    return user
