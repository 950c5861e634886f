from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class ItemCategory(models.TextChoices):
    FOOD = 'Makanan', 'Makanan'
    DRINK = 'Minuman', 'Minuman'
    TRANSPORT = 'Transportasi', 'Transportasi'
    ACCOMMODATION = 'Akomodasi', 'Akomodasi'
    ENTERTAINMENT = 'Hiburan', 'Hiburan'
    OTHER = 'Lainnya', 'Lainnya'


class Transaction(models.Model):
    """A saved split bill with its computed surcharges and grand total."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        'accounts.User',
        on_delete=models.CASCADE,
        related_name='transactions'
    )

    title = models.CharField(max_length=200)
    description = models.TextField(max_length=1000, blank=True)

    # Computed amounts, rounded to 2 decimals at save time
    total_amount = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    tax_amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))
    service_amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))
    tip_amount = models.DecimalField(max_digits=20, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'transactions'
        indexes = [
            models.Index(fields=['user', 'created_at'], name='transactions_user_created_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} - {self.total_amount}"

    def get_subtotal(self):
        """Return the total without surcharges."""
        return self.total_amount - self.tax_amount - self.service_amount - self.tip_amount


class TransactionItem(models.Model):
    """A purchased line of a saved transaction."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name='items'
    )

    item_name = models.CharField(max_length=100)
    item_price = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    quantity = models.PositiveIntegerField(
        default=1,
        validators=[MinValueValidator(1), MaxValueValidator(9999)]
    )
    category = models.CharField(max_length=50, default=ItemCategory.FOOD)

    # Preserves the order items were entered in
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'transaction_items'
        ordering = ['transaction', 'position']

    def __str__(self):
        return f"{self.item_name} x{self.quantity}"

    @property
    def line_amount(self):
        return self.item_price * self.quantity


class TransactionParticipant(models.Model):
    """A person splitting a saved transaction and what they owe."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    transaction = models.ForeignKey(
        Transaction,
        on_delete=models.CASCADE,
        related_name='participants'
    )

    participant_name = models.CharField(max_length=100)
    total_amount = models.DecimalField(
        max_digits=20,
        decimal_places=2,
        default=Decimal('0.00')
    )

    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'transaction_participants'
        ordering = ['transaction', 'position']

    def __str__(self):
        return f"{self.participant_name} owes {self.total_amount}"


class ItemAssignment(models.Model):
    """Links an item to one of the participants sharing it."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    item = models.ForeignKey(
        TransactionItem,
        on_delete=models.CASCADE,
        related_name='assignments'
    )
    participant = models.ForeignKey(
        TransactionParticipant,
        on_delete=models.CASCADE,
        related_name='assignments'
    )

    class Meta:
        db_table = 'item_assignments'
        unique_together = [['item', 'participant']]

    def __str__(self):
        return f"{self.item.item_name} -> {self.participant.participant_name}"
