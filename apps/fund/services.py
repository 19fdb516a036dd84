"""
Fund Services Module
=====================

Business logic for the development fund ledger.

The ledger is append-only: deposits and withdrawals are written once and
never edited. Corrections (for example when a booking's development
deduction changes) are posted as new transactions. The balance is always
derived from the full history, in the base currency and in the secondary
display currency.

Withdrawals never fail for lack of funds. When one takes the balance below
zero the caller gets a warning flag back and the transaction is marked as
having created a debt.

Example:
    Recording spending::

        from apps.fund.services import withdraw

        txn, went_negative = withdraw(
            amount=Decimal('2500'),
            currency='EGP',
            description='New mattresses',
        )
        if went_negative:
            ...  # show the debt warning
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import Count, Q, QuerySet, Sum, DecimalField
from django.db.models.functions import Coalesce

from apps.currency.services import RateTable, get_rate_table
from .exceptions import InvalidFundAmountError
from .models import FundTransaction, TransactionType

logger = logging.getLogger(__name__)

CENTS = Decimal('0.01')
ZERO = Decimal('0.00')


def _money(value) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def _totals(queryset: QuerySet) -> dict:
    money = DecimalField(max_digits=14, decimal_places=2)
    return queryset.aggregate(
        deposits=Coalesce(Sum('amount_base', filter=Q(transaction_type=TransactionType.DEPOSIT)), ZERO, output_field=money),
        withdrawals=Coalesce(Sum('amount_base', filter=Q(transaction_type=TransactionType.WITHDRAWAL)), ZERO, output_field=money),
        deposits_secondary=Coalesce(Sum('amount_secondary', filter=Q(transaction_type=TransactionType.DEPOSIT)), ZERO, output_field=money),
        withdrawals_secondary=Coalesce(Sum('amount_secondary', filter=Q(transaction_type=TransactionType.WITHDRAWAL)), ZERO, output_field=money),
        transaction_count=Count('id'),
    )


def _post(
    *,
    transaction_type: str,
    amount,
    currency: str,
    source: str = '',
    description: str = '',
    apartment=None,
    booking=None,
    transaction_date: Optional[date] = None,
    is_system_generated: bool = False,
    rate_table: Optional[RateTable] = None,
    exchange_rate: Optional[Decimal] = None,
    resulted_in_debt: bool = False,
) -> FundTransaction:
    table = rate_table or get_rate_table()
    amount_base = _money(table.to_base(amount, currency, settings.DEFAULT_EXCHANGE_RATE))
    rate = exchange_rate or table.rate_for(
        settings.SECONDARY_CURRENCY, default=settings.DEFAULT_EXCHANGE_RATE
    )

    fields = {
        'transaction_type': transaction_type,
        'amount': _money(amount),
        'currency': currency.upper(),
        'amount_base': amount_base,
        'amount_secondary': _money(amount_base * rate),
        'exchange_rate': Decimal(rate).quantize(Decimal('0.000001')),
        'source': source,
        'description': description,
        'apartment': apartment,
        'booking': booking,
        'is_system_generated': is_system_generated,
        'resulted_in_debt': resulted_in_debt,
    }
    if transaction_date:
        fields['transaction_date'] = transaction_date
    return FundTransaction.objects.create(**fields)


def _validate_amount(amount) -> Decimal:
    if amount is None:
        raise InvalidFundAmountError("Amount is required")
    amount = Decimal(amount)
    if amount <= 0:
        raise InvalidFundAmountError("Amount must be positive")
    return amount


def deposit(
    *,
    amount,
    currency: str,
    source: str = '',
    description: str = '',
    apartment=None,
    transaction_date: Optional[date] = None,
    rate_table: Optional[RateTable] = None,
) -> FundTransaction:
    """
    Add money to the fund.

    Raises:
        InvalidFundAmountError: If amount is not positive
    """
    amount = _validate_amount(amount)
    txn = _post(
        transaction_type=TransactionType.DEPOSIT,
        amount=amount,
        currency=currency,
        source=source,
        description=description,
        apartment=apartment,
        transaction_date=transaction_date,
        rate_table=rate_table,
    )
    logger.info("Fund deposit %s %s (%s)", txn.amount, txn.currency, source or 'manual')
    return txn


@transaction.atomic
def withdraw(
    *,
    amount,
    currency: str,
    description: str = '',
    apartment=None,
    transaction_date: Optional[date] = None,
    rate_table: Optional[RateTable] = None,
) -> tuple:
    """
    Take money out of the fund. Always succeeds.

    Returns:
        tuple: (FundTransaction, went_negative) where went_negative is True
        when the resulting balance is below zero.

    Raises:
        InvalidFundAmountError: If amount is not positive
    """
    amount = _validate_amount(amount)
    table = rate_table or get_rate_table()
    amount_base = _money(table.to_base(amount, currency, settings.DEFAULT_EXCHANGE_RATE))

    current = get_balance()['balance']
    went_negative = current - amount_base < 0

    txn = _post(
        transaction_type=TransactionType.WITHDRAWAL,
        amount=amount,
        currency=currency,
        description=description,
        apartment=apartment,
        transaction_date=transaction_date,
        rate_table=table,
        resulted_in_debt=went_negative,
    )
    if went_negative:
        logger.warning(
            "Fund withdrawal %s %s leaves balance at %s",
            txn.amount, txn.currency, current - amount_base
        )
    return txn, went_negative


def record_booking_contribution(
    *,
    booking,
    amount: Decimal,
    rate_table: Optional[RateTable] = None,
) -> FundTransaction:
    """
    Post a booking's development deduction change to the fund.

    A positive amount is a system deposit; a negative amount reverses part
    of an earlier contribution with a system withdrawal. Amounts are in the
    base currency.
    """
    if amount == 0:
        raise InvalidFundAmountError("Contribution change must be non-zero")

    is_deposit = amount > 0
    txn = _post(
        transaction_type=TransactionType.DEPOSIT if is_deposit else TransactionType.WITHDRAWAL,
        amount=abs(amount),
        currency=settings.BASE_CURRENCY,
        source='booking',
        description=(
            f"Development deduction for booking {booking.reference}"
            if is_deposit else
            f"Development deduction correction for booking {booking.reference}"
        ),
        apartment=booking.apartment,
        booking=booking,
        transaction_date=booking.check_in,
        is_system_generated=True,
        rate_table=rate_table,
        exchange_rate=booking.exchange_rate,
    )
    logger.info(
        "Booking %s development contribution %s%s %s",
        booking.reference, '+' if is_deposit else '-', txn.amount, txn.currency
    )
    return txn


def get_balance() -> dict:
    """
    Current fund balance derived from every transaction.

    Returns:
        dict with balance, balance_secondary, total_deposits,
        total_withdrawals, transaction_count, is_debt and debt
    """
    totals = _totals(FundTransaction.objects.all())
    balance = _money(totals['deposits'] - totals['withdrawals'])
    return {
        'base_currency': settings.BASE_CURRENCY,
        'secondary_currency': settings.SECONDARY_CURRENCY,
        'balance': balance,
        'balance_secondary': _money(totals['deposits_secondary'] - totals['withdrawals_secondary']),
        'total_deposits': _money(totals['deposits']),
        'total_withdrawals': _money(totals['withdrawals']),
        'transaction_count': totals['transaction_count'],
        'is_debt': balance < 0,
        'debt': abs(balance) if balance < 0 else ZERO,
    }


def list_transactions(
    *,
    apartment_id: Optional[UUID] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    transaction_type: Optional[str] = None,
) -> QuerySet:
    """Transactions with start_date <= transaction_date < end_date."""
    queryset = FundTransaction.objects.select_related('apartment', 'booking')
    if apartment_id:
        queryset = queryset.filter(apartment_id=apartment_id)
    if start_date:
        queryset = queryset.filter(transaction_date__gte=start_date)
    if end_date:
        queryset = queryset.filter(transaction_date__lt=end_date)
    if transaction_type:
        queryset = queryset.filter(transaction_type=transaction_type)
    return queryset


def period_totals(
    *,
    start_date: date,
    end_date: date,
    apartment_id: Optional[UUID] = None,
) -> dict:
    """Deposits, withdrawals and net movement for [start_date, end_date)."""
    totals = _totals(list_transactions(
        apartment_id=apartment_id,
        start_date=start_date,
        end_date=end_date,
    ))
    return {
        'deposits': _money(totals['deposits']),
        'withdrawals': _money(totals['withdrawals']),
        'net': _money(totals['deposits'] - totals['withdrawals']),
        'transaction_count': totals['transaction_count'],
    }
