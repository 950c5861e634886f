import pytest
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User
from apps.bills.services import (
    BillDraft,
    add_item,
    add_participant,
    set_surcharge,
    toggle_assignment,
)


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def user(db):
    """Create and return a test user."""
    return User.objects.create_user(
        email='testuser@example.com',
        password='TestPass123!',
        full_name='Test User',
    )


@pytest.fixture
def other_user(db):
    """Create and return another test user."""
    return User.objects.create_user(
        email='otheruser@example.com',
        password='OtherPass123!',
        full_name='Other User',
    )


@pytest.fixture
def authenticated_client(api_client, user):
    """Return an authenticated API client using JWT."""
    refresh = RefreshToken.for_user(user)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def other_client(other_user):
    """Return a separate authenticated client for another user."""
    client = APIClient()
    refresh = RefreshToken.for_user(other_user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def draft():
    """Return an empty draft."""
    return BillDraft()


@pytest.fixture
def ready_draft():
    """Draft that passes the save gate: 2 items shared by Andi and Budi."""
    draft = BillDraft(title='Makan malam')
    andi = add_participant(draft, name='Andi')
    budi = add_participant(draft, name='Budi')

    nasi = add_item(draft, name='Nasi Goreng', price=20000, quantity=2)
    teh = add_item(draft, name='Es Teh', price=5000, category='Minuman')

    toggle_assignment(draft, item_id=nasi.id, participant_id=andi.id)
    toggle_assignment(draft, item_id=nasi.id, participant_id=budi.id)
    toggle_assignment(draft, item_id=teh.id, participant_id=budi.id)

    set_surcharge(draft, kind='tax', raw_value='Rp 4.500')
    return draft
