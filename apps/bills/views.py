from django.db.models import Count
from drf_spectacular.utils import extend_schema
from rest_framework import serializers as drf_serializers
from rest_framework import status, viewsets
from rest_framework.decorators import api_view, parser_classes, permission_classes
from rest_framework.pagination import PageNumberPagination
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Transaction
from .permissions import IsTransactionOwner
from .serializers import (
    BillDraftSerializer,
    ScanResultSerializer,
    TransactionListSerializer,
    TransactionSerializer,
    draft_payload,
    # Input serializers
    DraftDetailsInputSerializer,
    ItemInputSerializer,
    ParticipantInputSerializer,
    ReceiptScanInputSerializer,
    SurchargesInputSerializer,
    ToggleAssignmentInputSerializer,
)
from .services import (
    add_item,
    add_participant,
    add_scanned_items,
    allocate_draft,
    clear_draft,
    get_receipt_scanner,
    load_draft,
    remove_item,
    remove_participant,
    save_draft,
    set_details,
    set_surcharge,
    store_draft,
    toggle_assignment,
    # Exceptions
    DraftEntityNotFoundError,
    DraftValidationError,
    PersistenceError,
    ReceiptScanError,
    SaveGateError,
)


# Response serializers for API documentation
class ErrorResponseSerializer(drf_serializers.Serializer):
    error = drf_serializers.CharField()
    code = drf_serializers.CharField()
    items = drf_serializers.ListField(child=drf_serializers.CharField(), required=False)


def _draft_response(draft, status_code=status.HTTP_200_OK):
    """Serialize the draft together with a fresh allocation."""
    serializer = BillDraftSerializer(draft_payload(draft, allocate_draft(draft)))
    return Response(serializer.data, status=status_code)


def _error_response(error, status_code):
    payload = {'error': error.message, 'code': error.code}
    if isinstance(error, SaveGateError) and error.items:
        payload['items'] = error.items
    return Response(payload, status=status_code)


# =============================================================================
# Draft Endpoints
# =============================================================================

@extend_schema(
    request=DraftDetailsInputSerializer,
    responses={200: BillDraftSerializer, 400: ErrorResponseSerializer},
    description=(
        "GET the current bill draft with its live split, PATCH its title/description, "
        "or DELETE it to start over."
    ),
    tags=['bills'],
)
@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def draft_detail(request):
    """Read, update or reset the session's bill draft."""
    if request.method == 'DELETE':
        clear_draft(request.session, request.user)
        return _draft_response(load_draft(request.session, request.user))

    draft = load_draft(request.session, request.user)

    if request.method == 'PATCH':
        serializer = DraftDetailsInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            set_details(
                draft,
                title=serializer.validated_data.get('title'),
                description=serializer.validated_data.get('description'),
            )
        except DraftValidationError as e:
            return _error_response(e, status.HTTP_400_BAD_REQUEST)

        store_draft(request.session, request.user, draft)

    return _draft_response(draft)


@extend_schema(
    request=ItemInputSerializer,
    responses={201: BillDraftSerializer, 400: ErrorResponseSerializer},
    description="Add an item to the draft. New items are not assigned to anyone.",
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def draft_items(request):
    """Add an item to the draft."""
    serializer = ItemInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    draft = load_draft(request.session, request.user)
    try:
        add_item(draft, **serializer.validated_data)
    except DraftValidationError as e:
        return _error_response(e, status.HTTP_400_BAD_REQUEST)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft, status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: BillDraftSerializer, 404: ErrorResponseSerializer},
    description="Remove an item from the draft.",
    tags=['bills'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def draft_item_detail(request, item_id):
    """Remove an item from the draft."""
    draft = load_draft(request.session, request.user)
    try:
        remove_item(draft, item_id=item_id)
    except DraftEntityNotFoundError as e:
        return _error_response(e, status.HTTP_404_NOT_FOUND)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft)


@extend_schema(
    request=ParticipantInputSerializer,
    responses={201: BillDraftSerializer, 400: ErrorResponseSerializer},
    description="Add a participant. Names are unique ignoring case; at most 10 participants.",
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def draft_participants(request):
    """Add a participant to the draft."""
    serializer = ParticipantInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    draft = load_draft(request.session, request.user)
    try:
        add_participant(draft, name=serializer.validated_data['name'])
    except DraftValidationError as e:
        return _error_response(e, status.HTTP_400_BAD_REQUEST)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft, status.HTTP_201_CREATED)


@extend_schema(
    request=None,
    responses={200: BillDraftSerializer, 404: ErrorResponseSerializer},
    description="Remove a participant and all of their item assignments.",
    tags=['bills'],
)
@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def draft_participant_detail(request, participant_id):
    """Remove a participant from the draft."""
    draft = load_draft(request.session, request.user)
    try:
        remove_participant(draft, participant_id=participant_id)
    except DraftEntityNotFoundError as e:
        return _error_response(e, status.HTTP_404_NOT_FOUND)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft)


@extend_schema(
    request=ToggleAssignmentInputSerializer,
    responses={200: BillDraftSerializer, 404: ErrorResponseSerializer},
    description="Assign a participant to an item, or unassign them if already assigned.",
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def draft_toggle_assignment(request):
    """Toggle whether a participant shares an item."""
    serializer = ToggleAssignmentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    draft = load_draft(request.session, request.user)
    try:
        toggle_assignment(
            draft,
            item_id=serializer.validated_data['item_id'],
            participant_id=serializer.validated_data['participant_id'],
        )
    except DraftEntityNotFoundError as e:
        return _error_response(e, status.HTTP_404_NOT_FOUND)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft)


@extend_schema(
    request=SurchargesInputSerializer,
    responses={200: BillDraftSerializer, 400: ErrorResponseSerializer},
    description=(
        "Set tax, service and/or tip from raw input such as \"Rp 6.000\". "
        "Blank, malformed or negative values are stored as zero; amounts too "
        "large to store are rejected."
    ),
    tags=['bills'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def draft_surcharges(request):
    """Update the draft's surcharges."""
    serializer = SurchargesInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    draft = load_draft(request.session, request.user)
    try:
        for kind, raw_value in serializer.validated_data.items():
            set_surcharge(draft, kind=kind, raw_value=raw_value)
    except DraftValidationError as e:
        return _error_response(e, status.HTTP_400_BAD_REQUEST)

    store_draft(request.session, request.user, draft)
    return _draft_response(draft)


@extend_schema(
    request=ReceiptScanInputSerializer,
    responses={200: ScanResultSerializer, 502: ErrorResponseSerializer},
    description=(
        "Scan a receipt image and add the items it contains. Items the scanner "
        "got wrong are skipped; the response says how many were kept."
    ),
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
@parser_classes([MultiPartParser, FormParser])
def draft_scan_receipt(request):
    """Add items read from a receipt image."""
    serializer = ReceiptScanInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        candidates = get_receipt_scanner().scan(serializer.validated_data['image'])
    except ReceiptScanError as e:
        return Response(
            {'error': f"{e.message}. No items were added.", 'code': e.code},
            status=status.HTTP_502_BAD_GATEWAY
        )

    draft = load_draft(request.session, request.user)
    outcome = add_scanned_items(draft, candidates)
    store_draft(request.session, request.user, draft)

    result = ScanResultSerializer({
        'status': outcome.status.value,
        'message': outcome.message,
        'kept': outcome.kept,
        'scanned': outcome.scanned,
        'draft': draft_payload(draft, allocate_draft(draft)),
    })
    return Response(result.data)


@extend_schema(
    request=None,
    responses={
        201: TransactionSerializer,
        400: ErrorResponseSerializer,
        503: ErrorResponseSerializer,
    },
    description=(
        "Save the draft as a transaction. Requires a title, at least one item, "
        "at least two participants and every item assigned. The draft is cleared "
        "only when saving succeeds."
    ),
    tags=['bills'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def draft_save(request):
    """Save the session's draft."""
    draft = load_draft(request.session, request.user)

    try:
        saved = save_draft(draft=draft, user=request.user)
    except SaveGateError as e:
        return _error_response(e, status.HTTP_400_BAD_REQUEST)
    except PersistenceError as e:
        return Response(
            {'error': 'Failed to save the transaction. Please try again.', 'code': e.code},
            status=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    clear_draft(request.session, request.user)

    transaction = Transaction.objects.prefetch_related(
        'items__assignments',
        'participants',
    ).get(id=saved.transaction_id)
    return Response(TransactionSerializer(transaction).data, status=status.HTTP_201_CREATED)


# =============================================================================
# Saved Transactions
# =============================================================================

class TransactionPagination(PageNumberPagination):
    """Custom pagination for transaction history."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for the user's saved transactions (read-only).

    list: Get the current user's transactions, newest first
    retrieve: Get a transaction with its items and participants
    """

    serializer_class = TransactionSerializer
    permission_classes = [IsAuthenticated, IsTransactionOwner]
    pagination_class = TransactionPagination

    def get_queryset(self):
        """Return only the current user's transactions."""
        queryset = Transaction.objects.filter(user=self.request.user)

        if self.action == 'list':
            return queryset.annotate(
                item_count=Count('items', distinct=True),
                participant_count=Count('participants', distinct=True),
            )

        return queryset.prefetch_related('items__assignments', 'participants')

    def get_serializer_class(self):
        """Use a lighter serializer for the list."""
        if self.action == 'list':
            return TransactionListSerializer
        return TransactionSerializer
