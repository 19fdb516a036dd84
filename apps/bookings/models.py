from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from decimal import Decimal
import secrets
import uuid


class BookingStatus(models.TextChoices):
    """Statuses stored on a booking. Date-derived statuses are computed."""
    PENDING = 'pending', 'Pending'
    CONFIRMED = 'confirmed', 'Confirmed'
    CANCELLED = 'cancelled', 'Cancelled'
    ENDED_EARLY = 'ended-early', 'Ended early'


class EffectiveStatus(models.TextChoices):
    UPCOMING = 'upcoming', 'Upcoming'
    ACTIVE = 'active', 'Active'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'
    ENDED_EARLY = 'ended-early', 'Ended early'


class DevDeductionType(models.TextChoices):
    NONE = 'none', 'None'
    FIXED = 'fixed', 'Fixed amount'
    PERCENT = 'percent', 'Percent of total'


class PaymentMethod(models.TextChoices):
    CASH = 'cash', 'Cash'
    BANK_TRANSFER = 'bank_transfer', 'Bank transfer'
    CARD = 'card', 'Card'
    PLATFORM = 'platform', 'Paid via platform'
    OTHER = 'other', 'Other'


TERMINAL_STATUSES = (BookingStatus.CANCELLED, BookingStatus.ENDED_EARLY)


class Booking(models.Model):
    """A guest's stay in one room for a half-open date range."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    reference = models.CharField(max_length=32, unique=True, editable=False)

    apartment = models.ForeignKey(
        'apartments.Apartment',
        on_delete=models.PROTECT,
        related_name='bookings'
    )
    room = models.ForeignKey(
        'apartments.Room',
        on_delete=models.PROTECT,
        related_name='bookings'
    )

    # Guest
    guest_name = models.CharField(max_length=200)
    guest_phone = models.CharField(max_length=50, blank=True)
    guest_email = models.EmailField(blank=True)
    guest_nationality = models.CharField(max_length=100, blank=True)

    # Stay (check_out is exclusive)
    check_in = models.DateField()
    check_out = models.DateField()
    number_of_nights = models.PositiveIntegerField(default=1)
    status = models.CharField(
        max_length=20,
        choices=BookingStatus.choices,
        default=BookingStatus.CONFIRMED
    )

    # Price and locked rates
    total_booking_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='USD')
    exchange_rate = models.DecimalField(
        max_digits=14,
        decimal_places=6,
        validators=[MinValueValidator(Decimal('0.000001'))],
        help_text='Secondary-currency units per base unit, locked at booking time'
    )
    locked_rates = models.JSONField(default=dict, blank=True)

    # Platform and development fund
    source = models.CharField(max_length=50, default='External')
    platform_commission = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    dev_deduction_type = models.CharField(
        max_length=10,
        choices=DevDeductionType.choices,
        default=DevDeductionType.NONE
    )
    dev_deduction_value = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    development_deduction = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text='Amount currently posted to the development fund (base currency)'
    )

    # Room transfer linkage
    origin_apartment = models.ForeignKey(
        'apartments.Apartment',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    origin_room = models.ForeignKey(
        'apartments.Room',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+'
    )
    transfer_from_booking = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='transfers'
    )
    transfer_commission_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )

    # Early termination
    actual_check_out = models.DateField(null=True, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'bookings'
        indexes = [
            models.Index(fields=['room', 'check_in', 'check_out'], name='bookings_room_range_idx'),
            models.Index(fields=['apartment', 'check_in'], name='bookings_apt_checkin_idx'),
            models.Index(fields=['check_in'], name='bookings_checkin_idx'),
            models.Index(fields=['status'], name='bookings_status_idx'),
        ]
        ordering = ['-check_in', '-created_at']

    def __str__(self):
        return f"{self.reference} {self.guest_name} ({self.check_in} - {self.check_out})"

    def save(self, *args, **kwargs):
        if not self.reference:
            self.reference = self._generate_reference()
        if self.is_external:
            self.platform_commission = Decimal('0.00')
        super().save(*args, **kwargs)

    def _generate_reference(self):
        # Format: BK-<short-uuid>-<4-digit-random>
        short_id = str(self.id)[:8].upper()
        return f"BK-{short_id}-{secrets.randbelow(10000):04d}"

    @property
    def is_external(self):
        return self.source == settings.EXTERNAL_SOURCE

    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES


class Payment(models.Model):
    """One payment towards a booking, in any currency."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    currency = models.CharField(max_length=3, default='USD')
    method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH
    )
    position = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'booking_payments'
        ordering = ['position', 'created_at']

    def __str__(self):
        return f"{self.amount} {self.currency} ({self.method})"


class BookingExtension(models.Model):
    """Audit record of a stay extension."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='extensions'
    )
    extra_days = models.PositiveIntegerField()
    extra_amount = models.DecimalField(max_digits=12, decimal_places=2)
    previous_check_out = models.DateField()
    new_check_out = models.DateField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'booking_extensions'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.booking.reference} +{self.extra_days} nights"
