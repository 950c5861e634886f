"""
Bill allocation engine.

Turns the items, participants and surcharges of a bill into a subtotal,
a grand total and the amount each participant owes.

Algorithm:
    1. ``subtotal`` is the sum of ``price * quantity`` over all items.
    2. Tax, service and tip are added up and split equally between all
       participants (nothing when there are no participants).
    3. Each item's line amount is split equally between the participants
       assigned to it. Unassigned items count towards the totals only.

Amounts are exact ``Decimal`` quotients; rounding to the currency unit is
left to display and persistence (see ``currency.to_money``).

Example:
    Two participants sharing a 2 x 20000 item::

        result = allocate(draft.items, draft.participants)
        result.total                     # Decimal('40000')
        result.participant_totals        # {'a': Decimal('20000'), 'b': Decimal('20000')}
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Sequence

from .draft_state import BillDraft, DraftItem, DraftParticipant

ZERO = Decimal('0')


@dataclass(frozen=True)
class Allocation:
    subtotal: Decimal
    tax: Decimal
    service: Decimal
    tip: Decimal
    surcharge_total: Decimal
    surcharge_per_person: Decimal
    total: Decimal
    participant_totals: Dict[str, Decimal] = field(default_factory=dict)


def item_shares(item: DraftItem) -> Dict[str, Decimal]:
    """Split one item's line amount equally between its assignees."""
    if not item.assigned_to:
        return {}
    share = item.line_amount / len(item.assigned_to)
    return {participant_id: share for participant_id in item.assigned_to}


def allocate(
    items: Sequence[DraftItem],
    participants: Sequence[DraftParticipant],
    tax: Decimal = ZERO,
    service: Decimal = ZERO,
    tip: Decimal = ZERO,
) -> Allocation:
    """
    Compute totals and per-participant amounts for a bill.

    Pure and deterministic: the same input always gives an equal result.

    Args:
        items: Items with their assignment lists.
        participants: Participants in display order.
        tax: Tax amount for the whole bill.
        service: Service charge for the whole bill.
        tip: Tip for the whole bill.

    Returns:
        Allocation whose ``participant_totals`` maps every participant id,
        in participant order, to the amount owed.
    """
    subtotal = sum((item.line_amount for item in items), ZERO)
    surcharge_total = tax + service + tip

    if participants:
        surcharge_per_person = surcharge_total / len(participants)
    else:
        surcharge_per_person = ZERO

    participant_totals = {
        participant.id: surcharge_per_person for participant in participants
    }

    for item in items:
        for participant_id, share in item_shares(item).items():
            participant_totals[participant_id] = (
                participant_totals.get(participant_id, ZERO) + share
            )

    return Allocation(
        subtotal=subtotal,
        tax=tax,
        service=service,
        tip=tip,
        surcharge_total=surcharge_total,
        surcharge_per_person=surcharge_per_person,
        total=subtotal + surcharge_total,
        participant_totals=participant_totals,
    )


def allocate_draft(draft: BillDraft) -> Allocation:
    """Allocate a draft. Used for both the live preview and the save."""
    return allocate(
        draft.items,
        draft.participants,
        tax=draft.tax,
        service=draft.service,
        tip=draft.tip,
    )
