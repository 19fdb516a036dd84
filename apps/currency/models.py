from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class CurrencyRate(models.Model):
    """
    Exchange rate of one currency against the base currency.

    `units_per_base` is how many units of `currency` buy one unit of the
    base currency (e.g. EGP 50.000000 when the base is USD).
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    currency = models.CharField(max_length=3, unique=True)
    units_per_base = models.DecimalField(
        max_digits=14,
        decimal_places=6,
        validators=[MinValueValidator(Decimal('0.000001'))]
    )
    source = models.CharField(max_length=50, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'currency_rates'
        ordering = ['currency']

    def __str__(self):
        return f"{self.currency} {self.units_per_base}"

    def save(self, *args, **kwargs):
        self.currency = self.currency.upper()
        super().save(*args, **kwargs)
