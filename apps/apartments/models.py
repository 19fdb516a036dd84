from django.db import models
from django.db.models import Sum
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class BathroomType(models.TextChoices):
    PRIVATE = 'private', 'Private'
    SHARED = 'shared', 'Shared'


class PartnerType(models.TextChoices):
    INVESTOR = 'investor', 'Investor'
    COMPANY_OWNER = 'company_owner', 'Company owner'


class ExpenseCategory(models.TextChoices):
    MAINTENANCE = 'maintenance', 'Maintenance'
    UTILITIES = 'utilities', 'Utilities'
    CLEANING = 'cleaning', 'Cleaning'
    SUPPLIES = 'supplies', 'Supplies'
    TRANSFER_COMMISSION = 'transfer_commission', 'Transfer commission'
    OTHER = 'other', 'Other'


class Apartment(models.Model):
    """Rentable apartment made of rooms, optionally partner-owned."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    address = models.CharField(max_length=300, blank=True)
    description = models.TextField(blank=True)

    # Investment recovery tracking
    investment_target = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    investment_start_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'apartments'
        ordering = ['name']

    def __str__(self):
        return self.name

    @property
    def has_investment(self):
        return self.investment_target is not None and self.investment_target > 0

    def total_partner_percentage(self):
        """Sum of all partner agreement percentages."""
        return self.partner_agreements.aggregate(
            total=Sum('percentage')
        )['total'] or Decimal('0.00')


class Room(models.Model):
    """Bookable room inside an apartment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    apartment = models.ForeignKey(
        Apartment,
        on_delete=models.CASCADE,
        related_name='rooms'
    )
    room_number = models.CharField(max_length=20)
    room_type = models.CharField(max_length=50, blank=True)
    bed_count = models.PositiveSmallIntegerField(default=1)
    bathroom_type = models.CharField(
        max_length=20,
        choices=BathroomType.choices,
        default=BathroomType.SHARED
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'rooms'
        unique_together = [['apartment', 'room_number']]
        ordering = ['position', 'room_number']

    def __str__(self):
        return f"{self.apartment.name} / {self.room_number}"


class Partner(models.Model):
    """Investor or owner who takes a share of an apartment's revenue."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'partners'
        ordering = ['name']

    def __str__(self):
        return self.name


class PartnerAgreement(models.Model):
    """
    Percentage of an apartment's revenue owed to a partner.

    Investors take their percentage of the distributable amount. Company
    owners take theirs from what is left after all investors are paid.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    apartment = models.ForeignKey(
        Apartment,
        on_delete=models.CASCADE,
        related_name='partner_agreements'
    )
    partner = models.ForeignKey(
        Partner,
        on_delete=models.CASCADE,
        related_name='agreements'
    )
    percentage = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00')), MaxValueValidator(Decimal('100.00'))]
    )
    partner_type = models.CharField(
        max_length=20,
        choices=PartnerType.choices,
        default=PartnerType.INVESTOR
    )

    class Meta:
        db_table = 'partner_agreements'
        unique_together = [['apartment', 'partner']]
        ordering = ['-percentage']

    def __str__(self):
        return f"{self.partner.name}: {self.percentage}% of {self.apartment.name}"

    def clean(self):
        others = self.apartment.partner_agreements.filter(
            partner_type=self.partner_type
        ).exclude(pk=self.pk).aggregate(
            total=Sum('percentage')
        )['total'] or Decimal('0.00')
        if others + (self.percentage or Decimal('0.00')) > Decimal('100.00'):
            raise ValidationError({
                'percentage': f'{self.get_partner_type_display()} percentages for an apartment cannot exceed 100'
            })


class Expense(models.Model):
    """One-off operating expense, optionally tied to an apartment."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    apartment = models.ForeignKey(
        Apartment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='expenses'
    )
    category = models.CharField(
        max_length=30,
        choices=ExpenseCategory.choices,
        default=ExpenseCategory.OTHER
    )
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, default='USD')
    date = models.DateField()
    description = models.TextField(blank=True)

    # Expenses created by the booking engine (e.g. transfer commissions)
    is_system_generated = models.BooleanField(default=False)
    booking_reference = models.CharField(max_length=64, blank=True, db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'expenses'
        indexes = [
            models.Index(fields=['apartment', 'date'], name='expenses_apt_date_idx'),
            models.Index(fields=['date'], name='expenses_date_idx'),
        ]
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.get_category_display()} {self.amount} {self.currency} ({self.date})"


class RecurringExpense(models.Model):
    """Fixed monthly cost of running an apartment (rent, internet...)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    apartment = models.ForeignKey(
        Apartment,
        on_delete=models.CASCADE,
        related_name='recurring_expenses'
    )
    name = models.CharField(max_length=200)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    currency = models.CharField(max_length=3, default='USD')

    class Meta:
        db_table = 'recurring_expenses'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.amount} {self.currency}/month)"
