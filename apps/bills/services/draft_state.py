"""
In-memory bill draft and its session storage.

A ``BillDraft`` holds everything the user has entered for a bill that has
not been saved yet. It lives in the Django session between requests, keyed by the
signed-in user, and is cleared after a successful save. Clients must keep
the session cookie across requests.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import List

from django.conf import settings

from .exceptions import ItemNotFoundError, ParticipantNotFoundError

ZERO = Decimal('0')

SURCHARGE_KINDS = ('tax', 'service', 'tip')


@dataclass
class DraftItem:
    id: str
    name: str
    price: Decimal
    quantity: int
    category: str
    # Ordered, without duplicates
    assigned_to: List[str] = field(default_factory=list)

    @property
    def line_amount(self) -> Decimal:
        return self.price * self.quantity

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'price': str(self.price),
            'quantity': self.quantity,
            'category': self.category,
            'assigned_to': list(self.assigned_to),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DraftItem':
        return cls(
            id=data['id'],
            name=data['name'],
            price=Decimal(data['price']),
            quantity=int(data['quantity']),
            category=data['category'],
            assigned_to=list(data.get('assigned_to', [])),
        )


@dataclass
class DraftParticipant:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name}

    @classmethod
    def from_dict(cls, data: dict) -> 'DraftParticipant':
        return cls(id=data['id'], name=data['name'])


@dataclass
class BillDraft:
    """Editing state of a bill: details, items, participants and surcharges."""

    title: str = ''
    description: str = ''
    items: List[DraftItem] = field(default_factory=list)
    participants: List[DraftParticipant] = field(default_factory=list)
    tax: Decimal = ZERO
    service: Decimal = ZERO
    tip: Decimal = ZERO

    def get_item(self, item_id: str) -> DraftItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise ItemNotFoundError(f"Item {item_id} not found", code='item_not_found')

    def get_participant(self, participant_id: str) -> DraftParticipant:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        raise ParticipantNotFoundError(
            f"Participant {participant_id} not found",
            code='participant_not_found'
        )

    def participant_names(self) -> List[str]:
        return [participant.name for participant in self.participants]

    def unassigned_items(self) -> List[DraftItem]:
        return [item for item in self.items if not item.assigned_to]

    def to_dict(self) -> dict:
        return {
            'title': self.title,
            'description': self.description,
            'items': [item.to_dict() for item in self.items],
            'participants': [participant.to_dict() for participant in self.participants],
            'tax': str(self.tax),
            'service': str(self.service),
            'tip': str(self.tip),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'BillDraft':
        return cls(
            title=data.get('title', ''),
            description=data.get('description', ''),
            items=[DraftItem.from_dict(item) for item in data.get('items', [])],
            participants=[
                DraftParticipant.from_dict(participant)
                for participant in data.get('participants', [])
            ],
            tax=Decimal(data.get('tax', '0')),
            service=Decimal(data.get('service', '0')),
            tip=Decimal(data.get('tip', '0')),
        )


def _session_key(user) -> str:
    # One draft per user within a session
    base = getattr(settings, 'BILLS_DRAFT_SESSION_KEY', 'bill_draft')
    return f"{base}:{user.pk}"


def load_draft(session, user) -> BillDraft:
    """Return the user's draft from the session, or a new empty one."""
    data = session.get(_session_key(user))
    if not data:
        return BillDraft()
    return BillDraft.from_dict(data)


def store_draft(session, user, draft: BillDraft) -> None:
    """Write the user's draft back into the session."""
    session[_session_key(user)] = draft.to_dict()


def clear_draft(session, user) -> None:
    """Drop the user's draft from the session."""
    session.pop(_session_key(user), None)
