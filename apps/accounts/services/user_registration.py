"""Sign-up of new bill owners."""

import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction

from .exceptions import EmailTakenError

User = get_user_model()
logger = logging.getLogger(__name__)


def register_user(*, email: str, password: str, full_name: str = "") -> User:
    """
    Create an account that can save bills.

    The email is normalized and compared without regard to case, so
    ``Budi@Example.com`` and ``budi@example.com`` are the same account.

    Raises:
        EmailTakenError: If the email is already registered.
    """
    email = User.objects.normalize_email(email).strip()

    if User.objects.filter(email__iexact=email).exists():
        raise EmailTakenError("An account with this email already exists")

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=password,
                full_name=full_name.strip(),
            )
    except IntegrityError as e:
        raise EmailTakenError("An account with this email already exists") from e

    logger.info("Registered user %s", user.id)
    return user
