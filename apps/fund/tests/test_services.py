import pytest
from datetime import date
from decimal import Decimal
from apps.fund.models import FundTransaction, TransactionType
from apps.fund.services import (
    deposit,
    withdraw,
    get_balance,
    list_transactions,
    period_totals,
)
from apps.fund.exceptions import InvalidFundAmountError, ImmutableTransactionError


@pytest.mark.django_db
class TestDeposit:

    def test_deposit_in_base_currency(self):
        txn = deposit(amount=Decimal('120.00'), currency='USD', source='owner')

        assert txn.transaction_type == TransactionType.DEPOSIT
        assert txn.amount_base == Decimal('120.00')
        assert txn.is_system_generated is False

    def test_deposit_in_secondary_currency(self, egp_rate):
        txn = deposit(amount=Decimal('500'), currency='egp')

        assert txn.currency == 'EGP'
        assert txn.amount_base == Decimal('10.00')
        assert txn.amount_secondary == Decimal('500.00')
        assert txn.exchange_rate == Decimal('50')

    def test_unknown_rate_uses_default(self, settings):
        settings.DEFAULT_EXCHANGE_RATE = Decimal('40')
        txn = deposit(amount=Decimal('400'), currency='EGP')
        assert txn.amount_base == Decimal('10.00')

    def test_amount_must_be_positive(self):
        with pytest.raises(InvalidFundAmountError):
            deposit(amount=Decimal('0'), currency='USD')
        with pytest.raises(InvalidFundAmountError):
            deposit(amount=Decimal('-5'), currency='USD')


@pytest.mark.django_db
class TestWithdraw:

    def test_withdraw_within_balance(self):
        deposit(amount=Decimal('100'), currency='USD')
        txn, went_negative = withdraw(amount=Decimal('40'), currency='USD', description='Paint')

        assert went_negative is False
        assert txn.resulted_in_debt is False
        assert get_balance()['balance'] == Decimal('60.00')

    def test_overdraw_succeeds_with_warning(self):
        deposit(amount=Decimal('100'), currency='USD')
        txn, went_negative = withdraw(amount=Decimal('150'), currency='USD', description='New beds')

        assert went_negative is True
        assert txn.resulted_in_debt is True

        balance = get_balance()
        assert balance['balance'] == Decimal('-50.00')
        assert balance['is_debt'] is True
        assert balance['debt'] == Decimal('50.00')

    def test_withdraw_to_exactly_zero_is_not_debt(self):
        deposit(amount=Decimal('100'), currency='USD')
        _, went_negative = withdraw(amount=Decimal('100'), currency='USD')

        assert went_negative is False
        assert get_balance()['is_debt'] is False


@pytest.mark.django_db
class TestLedger:

    def test_transactions_cannot_be_edited(self):
        txn = deposit(amount=Decimal('10'), currency='USD')
        txn.amount = Decimal('20')

        with pytest.raises(ImmutableTransactionError):
            txn.save()

    def test_transactions_cannot_be_deleted(self):
        txn = deposit(amount=Decimal('10'), currency='USD')

        with pytest.raises(ImmutableTransactionError):
            txn.delete()
        assert FundTransaction.objects.filter(id=txn.id).exists()

    def test_balance_in_both_currencies(self, egp_rate):
        deposit(amount=Decimal('100'), currency='USD')
        withdraw(amount=Decimal('1000'), currency='EGP')

        balance = get_balance()
        assert balance['balance'] == Decimal('80.00')
        assert balance['balance_secondary'] == Decimal('4000.00')
        assert balance['total_deposits'] == Decimal('100.00')
        assert balance['total_withdrawals'] == Decimal('20.00')
        assert balance['transaction_count'] == 2

    def test_empty_fund(self):
        balance = get_balance()
        assert balance['balance'] == Decimal('0.00')
        assert balance['transaction_count'] == 0

    def test_list_transactions_by_period(self):
        deposit(amount=Decimal('10'), currency='USD', transaction_date=date(2025, 1, 31))
        deposit(amount=Decimal('20'), currency='USD', transaction_date=date(2025, 2, 1))

        january = list_transactions(start_date=date(2025, 1, 1), end_date=date(2025, 2, 1))
        assert [t.amount for t in january] == [Decimal('10.00')]

    def test_period_totals(self, apartment):
        deposit(amount=Decimal('30'), currency='USD', apartment=apartment, transaction_date=date(2025, 1, 5))
        withdraw(amount=Decimal('12'), currency='USD', apartment=apartment, transaction_date=date(2025, 1, 20))
        deposit(amount=Decimal('99'), currency='USD', transaction_date=date(2025, 1, 10))

        totals = period_totals(start_date=date(2025, 1, 1), end_date=date(2025, 2, 1), apartment_id=apartment.id)

        assert totals['deposits'] == Decimal('30.00')
        assert totals['withdrawals'] == Decimal('12.00')
        assert totals['net'] == Decimal('18.00')
        assert totals['transaction_count'] == 2
