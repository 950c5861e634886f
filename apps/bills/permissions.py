"""
Custom permission classes for bills app.
"""
from rest_framework.permissions import BasePermission


class IsTransactionOwner(BasePermission):
    """
    Permission to view a saved transaction.

    Only the user who saved the bill can see it.

    Usage:
        class TransactionViewSet(viewsets.ReadOnlyModelViewSet):
            permission_classes = [IsAuthenticated, IsTransactionOwner]
    """

    message = 'You do not have permission to view this transaction.'

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.id
