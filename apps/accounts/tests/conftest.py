import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User


PASSWORD = 'Patungan#2024'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def user(db):
    """Active account with a known password."""
    return User.objects.create_user(
        email='budi@example.com',
        password=PASSWORD,
        full_name='Budi Santoso',
    )


@pytest.fixture
def deactivated_user(db):
    return User.objects.create_user(
        email='lama@example.com',
        password=PASSWORD,
        is_active=False,
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """API client carrying a JWT access token for ``user``."""
    access = RefreshToken.for_user(user).access_token
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {access}')
    return api_client
