from decimal import ROUND_HALF_UP

from rest_framework import serializers

from .models import ItemCategory, Transaction, TransactionItem, TransactionParticipant
from .services import format_rupiah, to_money
from .services.validation import MAX_DESCRIPTION_LENGTH


class RawInputField(serializers.Field):
    """
    Pass the submitted value through untouched.

    Amounts and quantities may arrive as JSON numbers or as rupiah-formatted
    text; the bill services do the parsing and report their own errors.
    """

    def to_internal_value(self, data):
        return data

    def to_representation(self, value):
        return value


def money_field(**kwargs):
    return serializers.DecimalField(
        max_digits=20,
        decimal_places=2,
        rounding=ROUND_HALF_UP,
        **kwargs
    )


# =============================================================================
# Input Serializers
# =============================================================================

class DraftDetailsInputSerializer(serializers.Serializer):
    """
    Validate title/description updates.

    The title is only length-checked when the bill is saved.
    """

    title = serializers.CharField(required=False, allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(
        required=False,
        allow_blank=True,
        max_length=MAX_DESCRIPTION_LENGTH,
    )


class ItemInputSerializer(serializers.Serializer):
    """
    Shape of a new item.

    Fields:
        name (str): Item name
        price: Unit price, number or rupiah text (e.g. "Rp 20.000")
        quantity: Whole number, defaults to 1
        category (str): One of the item categories or free text
    """

    name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    price = RawInputField(allow_null=True)
    quantity = RawInputField(required=False, default=1)
    category = serializers.CharField(
        required=False,
        allow_blank=True,
        default=ItemCategory.FOOD.value,
        help_text=f"One of {', '.join(ItemCategory.values)} or free text.",
    )


class ParticipantInputSerializer(serializers.Serializer):
    name = serializers.CharField(allow_blank=True, trim_whitespace=False)


class ToggleAssignmentInputSerializer(serializers.Serializer):
    item_id = serializers.CharField()
    participant_id = serializers.CharField()


class SurchargesInputSerializer(serializers.Serializer):
    """Raw tax/service/tip input; blank or malformed values count as zero."""

    tax = RawInputField(required=False, allow_null=True)
    service = RawInputField(required=False, allow_null=True)
    tip = RawInputField(required=False, allow_null=True)


class ReceiptScanInputSerializer(serializers.Serializer):
    image = serializers.FileField()


# =============================================================================
# Draft Output Serializers
# =============================================================================

class DraftItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    price = money_field()
    quantity = serializers.IntegerField()
    category = serializers.CharField()
    assigned_to = serializers.ListField(child=serializers.CharField())
    line_amount = money_field()


class DraftParticipantSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField()
    amount_owed = money_field()
    amount_owed_display = serializers.CharField()


class AllocationSerializer(serializers.Serializer):
    subtotal = money_field()
    tax = money_field()
    service = money_field()
    tip = money_field()
    surcharge_total = money_field()
    surcharge_per_person = money_field()
    total = money_field()
    total_display = serializers.CharField()


class BillDraftSerializer(serializers.Serializer):
    """Draft plus its live allocation, built by ``draft_payload``."""

    title = serializers.CharField()
    description = serializers.CharField()
    items = DraftItemSerializer(many=True)
    participants = DraftParticipantSerializer(many=True)
    unassigned_items = serializers.ListField(child=serializers.CharField())
    allocation = AllocationSerializer()


def draft_payload(draft, allocation):
    """Combine a draft and its allocation into ``BillDraftSerializer`` input."""
    return {
        'title': draft.title,
        'description': draft.description,
        'items': [
            {
                'id': item.id,
                'name': item.name,
                'price': item.price,
                'quantity': item.quantity,
                'category': item.category,
                'assigned_to': item.assigned_to,
                'line_amount': item.line_amount,
            }
            for item in draft.items
        ],
        'participants': [
            {
                'id': participant.id,
                'name': participant.name,
                'amount_owed': to_money(allocation.participant_totals[participant.id]),
                'amount_owed_display': format_rupiah(allocation.participant_totals[participant.id]),
            }
            for participant in draft.participants
        ],
        'unassigned_items': [item.name for item in draft.unassigned_items()],
        'allocation': {
            'subtotal': allocation.subtotal,
            'tax': allocation.tax,
            'service': allocation.service,
            'tip': allocation.tip,
            'surcharge_total': allocation.surcharge_total,
            'surcharge_per_person': allocation.surcharge_per_person,
            'total': allocation.total,
            'total_display': format_rupiah(allocation.total),
        },
    }


class ScanResultSerializer(serializers.Serializer):
    status = serializers.CharField()
    message = serializers.CharField()
    kept = serializers.IntegerField()
    scanned = serializers.IntegerField()
    draft = BillDraftSerializer()


# =============================================================================
# Saved Transaction Serializers
# =============================================================================

class TransactionItemSerializer(serializers.ModelSerializer):
    """Saved item with the ids of the participants sharing it."""

    assigned_to = serializers.SerializerMethodField()
    line_amount = money_field(read_only=True)

    class Meta:
        model = TransactionItem
        fields = [
            'id',
            'item_name',
            'item_price',
            'quantity',
            'category',
            'line_amount',
            'assigned_to',
        ]
        read_only_fields = fields

    def get_assigned_to(self, obj):
        return [str(assignment.participant_id) for assignment in obj.assignments.all()]


class TransactionParticipantSerializer(serializers.ModelSerializer):

    class Meta:
        model = TransactionParticipant
        fields = ['id', 'participant_name', 'total_amount']
        read_only_fields = fields


class TransactionSerializer(serializers.ModelSerializer):
    """Main serializer for saved transactions."""

    items = TransactionItemSerializer(many=True, read_only=True)
    participants = TransactionParticipantSerializer(many=True, read_only=True)
    subtotal_amount = serializers.SerializerMethodField()

    class Meta:
        model = Transaction
        fields = [
            'id',
            'title',
            'description',
            'subtotal_amount',
            'tax_amount',
            'service_amount',
            'tip_amount',
            'total_amount',
            'items',
            'participants',
            'created_at',
        ]
        read_only_fields = fields

    def get_subtotal_amount(self, obj):
        return str(obj.get_subtotal())


class TransactionListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    item_count = serializers.IntegerField(read_only=True)
    participant_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Transaction
        fields = [
            'id',
            'title',
            'total_amount',
            'item_count',
            'participant_count',
            'created_at',
        ]
        read_only_fields = fields
