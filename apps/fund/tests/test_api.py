import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.fund.models import FundTransaction
from apps.fund.services import deposit


@pytest.mark.django_db
class TestFundBalance:
    """Tests for GET /api/fund/balance/"""

    def test_requires_authentication(self, api_client):
        response = api_client.get(reverse('fund:balance'))
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_balance(self, authenticated_client, egp_rate):
        deposit(amount=Decimal('100'), currency='USD')

        response = authenticated_client.get(reverse('fund:balance'))

        assert response.status_code == status.HTTP_200_OK
        assert Decimal(response.data['balance']) == Decimal('100.00')
        assert Decimal(response.data['balance_secondary']) == Decimal('5000.00')
        assert response.data['secondary_currency'] == 'EGP'
        assert response.data['is_debt'] is False


@pytest.mark.django_db
class TestFundDeposit:
    """Tests for POST /api/fund/deposit/"""

    def test_deposit(self, authenticated_client, apartment):
        payload = {
            'amount': '250.00',
            'source': 'Owner top-up',
            'description': 'Renovation budget',
            'apartment': str(apartment.id),
        }
        response = authenticated_client.post(reverse('fund:deposit'), payload, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['transaction_type'] == 'deposit'
        assert response.data['currency'] == 'USD'
        assert FundTransaction.objects.get().apartment == apartment

    def test_zero_amount_rejected(self, authenticated_client):
        response = authenticated_client.post(reverse('fund:deposit'), {'amount': '0'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not FundTransaction.objects.exists()

    def test_unknown_apartment(self, authenticated_client):
        payload = {'amount': '10.00', 'apartment': '00000000-0000-0000-0000-000000000000'}
        response = authenticated_client.post(reverse('fund:deposit'), payload, format='json')
        assert response.status_code == status.HTTP_404_NOT_FOUND


@pytest.mark.django_db
class TestFundWithdraw:
    """Tests for POST /api/fund/withdraw/"""

    def test_withdraw(self, authenticated_client):
        deposit(amount=Decimal('100'), currency='USD')

        response = authenticated_client.post(
            reverse('fund:withdraw'), {'amount': '30.00', 'description': 'Towels'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['went_negative'] is False
        assert response.data['warning'] is None
        assert Decimal(response.data['balance']['balance']) == Decimal('70.00')

    def test_overdraw_warns(self, authenticated_client):
        response = authenticated_client.post(
            reverse('fund:withdraw'), {'amount': '30.00', 'description': 'Plumber'}, format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['went_negative'] is True
        assert '30.00' in response.data['warning']
        assert response.data['transaction']['resulted_in_debt'] is True
        assert response.data['balance']['is_debt'] is True


@pytest.mark.django_db
class TestFundTransactions:
    """Tests for GET /api/fund/transactions/"""

    def test_history_filtered_by_type(self, authenticated_client):
        deposit(amount=Decimal('100'), currency='USD')
        authenticated_client.post(reverse('fund:withdraw'), {'amount': '10.00'}, format='json')

        response = authenticated_client.get(reverse('fund:transactions'), {'type': 'withdrawal'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        assert response.data['results'][0]['transaction_type'] == 'withdrawal'

    def test_booking_contributions_listed(self, authenticated_client, room):
        from apps.bookings.services import create_booking
        from datetime import date

        booking = create_booking(
            apartment_id=room.apartment_id,
            room_id=room.id,
            guest_name='Fund Guest',
            check_in=date(2025, 7, 1),
            check_out=date(2025, 7, 3),
            total_booking_price=Decimal('200.00'),
            dev_deduction_type='percent',
            dev_deduction_value=Decimal('5'),
        )

        response = authenticated_client.get(reverse('fund:transactions'))

        assert response.data['count'] == 1
        entry = response.data['results'][0]
        assert entry['booking_reference'] == booking.reference
        assert entry['is_system_generated'] is True
        assert Decimal(entry['amount_base']) == Decimal('10.00')
