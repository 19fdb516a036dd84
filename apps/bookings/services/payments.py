"""
Payment ledger - multi-currency payment totals for a booking.

Every booking carries an ordered list of payments, each in its own
currency. Totals are always reported in the base currency using the rates
locked onto the booking when it was created. Rounding to cents happens once,
after summing, so splitting one payment into several never changes the total.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional

from django.conf import settings

from apps.currency.services import RateTable
from apps.bookings.models import PaymentMethod

CENTS = Decimal('0.01')


def quantize_money(value) -> Decimal:
    """Round a money amount half-up to cents."""
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _payment_field(payment, name):
    if isinstance(payment, dict):
        return payment.get(name)
    return getattr(payment, name)


def normalize_payments(payments: Optional[Iterable] = None, single_payment: Optional[dict] = None) -> list:
    """
    Return the one domain representation of payments: a list of dicts.

    Single-payment input becomes a one-element list; an empty single payment
    (no amount) becomes an empty list.
    """
    if payments is not None:
        return [dict(p) for p in payments]
    if single_payment and single_payment.get('amount') is not None:
        return [dict(single_payment)]
    return []


def total_paid_in_base(payments: Iterable, rate_table: RateTable, default_rate=None) -> Decimal:
    """
    Sum payments converted into the base currency.

    Payments in the base currency pass through unchanged. A currency missing
    from `rate_table` is converted with `default_rate` (a warning is logged);
    without a default, RateUnavailableError propagates.

    Args:
        payments: Payment rows or dicts with `amount` and `currency`
        rate_table: Table to convert with (normally the booking's locked rates)
        default_rate: Fallback units-per-base rate

    Returns:
        Total paid in base currency, rounded to cents
    """
    total = Decimal('0')
    for payment in payments:
        amount = _payment_field(payment, 'amount') or Decimal('0')
        currency = _payment_field(payment, 'currency') or rate_table.base_currency
        total += rate_table.to_base(amount, currency, default_rate)
    return quantize_money(total)


def remaining(total_price, paid_total) -> Decimal:
    """Outstanding amount, never negative."""
    return max(Decimal('0.00'), quantize_money(total_price) - quantize_money(paid_total))


def booking_rate_table(booking) -> RateTable:
    """Rate table locked onto the booking, with the booking's own secondary rate."""
    rates = dict(booking.locked_rates or {})
    if booking.exchange_rate:
        rates.setdefault(settings.SECONDARY_CURRENCY, str(booking.exchange_rate))
    return RateTable.from_snapshot(rates)


def booking_total_in_base(booking, rate_table: Optional[RateTable] = None) -> Decimal:
    """Booking price in base currency (unrounded)."""
    table = rate_table or booking_rate_table(booking)
    return table.to_base(booking.total_booking_price, booking.currency, settings.DEFAULT_EXCHANGE_RATE)


def booking_paid_in_base(booking, rate_table: Optional[RateTable] = None) -> Decimal:
    table = rate_table or booking_rate_table(booking)
    return total_paid_in_base(booking.payments.all(), table, settings.DEFAULT_EXCHANGE_RATE)


def booking_payment_summary(booking, rate_table: Optional[RateTable] = None) -> dict:
    """
    Payment status of a booking in base currency.

    Returns:
        dict with total, paid, remaining, is_fully_paid, payment_count,
        payments_by_method and base_currency
    """
    table = rate_table or booking_rate_table(booking)
    payments = list(booking.payments.all())

    total = quantize_money(booking_total_in_base(booking, table))
    paid = total_paid_in_base(payments, table, settings.DEFAULT_EXCHANGE_RATE)
    outstanding = remaining(total, paid)

    by_method = {}
    for payment in payments:
        method = payment.method or PaymentMethod.OTHER
        by_method.setdefault(method, []).append(payment)

    return {
        'base_currency': table.base_currency,
        'total': total,
        'paid': paid,
        'remaining': outstanding,
        'is_fully_paid': outstanding == Decimal('0.00'),
        'payment_count': len(payments),
        'payments_by_method': {
            method: total_paid_in_base(items, table, settings.DEFAULT_EXCHANGE_RATE)
            for method, items in by_method.items()
        },
    }
