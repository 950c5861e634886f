from django.contrib import admin
from apps.bills.models import (
    ItemAssignment,
    Transaction,
    TransactionItem,
    TransactionParticipant,
)


class TransactionItemInline(admin.TabularInline):
    """Inline admin for transaction items."""
    model = TransactionItem
    extra = 0
    fields = ['position', 'item_name', 'item_price', 'quantity', 'category']
    readonly_fields = fields


class TransactionParticipantInline(admin.TabularInline):
    """Inline admin for transaction participants."""
    model = TransactionParticipant
    extra = 0
    fields = ['position', 'participant_name', 'total_amount']
    readonly_fields = fields


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    """Admin interface for saved bills."""

    list_display = [
        'title',
        'user',
        'total_amount',
        'created_at'
    ]
    list_filter = ['created_at']
    search_fields = ['title', 'description', 'user__email']
    readonly_fields = [
        'id',
        'user',
        'tax_amount',
        'service_amount',
        'tip_amount',
        'total_amount',
        'created_at'
    ]
    inlines = [TransactionItemInline, TransactionParticipantInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('id', 'user', 'title', 'description')
        }),
        ('Amounts', {
            'fields': ('tax_amount', 'service_amount', 'tip_amount', 'total_amount')
        }),
        ('Metadata', {
            'fields': ('created_at',),
            'classes': ('collapse',)
        }),
    )


@admin.register(ItemAssignment)
class ItemAssignmentAdmin(admin.ModelAdmin):
    list_display = ['item', 'participant']
    search_fields = ['item__item_name', 'participant__participant_name']
    readonly_fields = ['item', 'participant']
