from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from .exceptions import ImmutableTransactionError


class TransactionType(models.TextChoices):
    DEPOSIT = 'deposit', 'Deposit'
    WITHDRAWAL = 'withdrawal', 'Withdrawal'


class FundTransaction(models.Model):
    """Single immutable movement of the development fund."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    transaction_type = models.CharField(max_length=10, choices=TransactionType.choices)

    # As entered
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3)

    # Converted at posting time
    amount_base = models.DecimalField(max_digits=12, decimal_places=2)
    amount_secondary = models.DecimalField(max_digits=14, decimal_places=2)
    exchange_rate = models.DecimalField(max_digits=14, decimal_places=6)

    transaction_date = models.DateField(default=timezone.localdate)
    apartment = models.ForeignKey(
        'apartments.Apartment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fund_transactions'
    )
    booking = models.ForeignKey(
        'bookings.Booking',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='fund_transactions'
    )
    source = models.CharField(max_length=100, blank=True)
    description = models.TextField(blank=True)
    is_system_generated = models.BooleanField(default=False)
    resulted_in_debt = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'fund_transactions'
        indexes = [
            models.Index(fields=['transaction_type', 'transaction_date'], name='fund_tx_type_date_idx'),
            models.Index(fields=['apartment', 'transaction_date'], name='fund_tx_apt_date_idx'),
        ]
        ordering = ['-transaction_date', '-created_at']

    def __str__(self):
        return f"{self.get_transaction_type_display()} {self.amount} {self.currency} ({self.transaction_date})"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableTransactionError("Fund transactions cannot be modified")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableTransactionError("Fund transactions cannot be deleted")

    @property
    def signed_amount_base(self):
        if self.transaction_type == TransactionType.WITHDRAWAL:
            return -self.amount_base
        return self.amount_base
