import pytest
from datetime import date
from decimal import Decimal
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.apartments.models import Apartment, Room, Partner, PartnerAgreement
from apps.currency.models import CurrencyRate


def _client_for(user):
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Users
# =============================================================================

@pytest.fixture
def user(db):
    """Create and return a regular staff member of the hostel."""
    return get_user_model().objects.create_user(
        username='manager',
        email='manager@example.com',
        password='TestPass123!',
    )


@pytest.fixture
def staff_user(db):
    """Create and return an administrator."""
    return get_user_model().objects.create_user(
        username='owner',
        email='owner@example.com',
        password='TestPass123!',
        is_staff=True,
    )


@pytest.fixture
def authenticated_client(user):
    """Return API client authenticated as the regular user."""
    return _client_for(user)


@pytest.fixture
def staff_client(staff_user):
    """Return API client authenticated as the administrator."""
    return _client_for(staff_user)


# =============================================================================
# Exchange rates
# =============================================================================

@pytest.fixture
def egp_rate(db):
    """1 USD = 50 EGP."""
    return CurrencyRate.objects.create(currency='EGP', units_per_base=Decimal('50'), source='test')


@pytest.fixture
def eur_rate(db):
    """1 USD = 0.8 EUR."""
    return CurrencyRate.objects.create(currency='EUR', units_per_base=Decimal('0.8'), source='test')


# =============================================================================
# Apartments
# =============================================================================

@pytest.fixture
def apartment(db):
    """Apartment without an investment target."""
    return Apartment.objects.create(
        name='Nile View',
        address='12 Corniche St, Cairo',
    )


@pytest.fixture
def invested_apartment(db):
    """Apartment with a 1000 USD investment target starting 2025-01-01."""
    return Apartment.objects.create(
        name='Zamalek Loft',
        investment_target=Decimal('1000.00'),
        investment_start_date=date(2025, 1, 1),
    )


@pytest.fixture
def room(apartment):
    return Room.objects.create(apartment=apartment, room_number='101', bed_count=2, position=1)


@pytest.fixture
def other_room(apartment):
    return Room.objects.create(apartment=apartment, room_number='102', bed_count=1, position=2)


@pytest.fixture
def invested_room(invested_apartment):
    return Room.objects.create(apartment=invested_apartment, room_number='A1')


@pytest.fixture
def partners(apartment):
    """Two partners holding 20% and 10% of the apartment."""
    ahmed = Partner.objects.create(name='Ahmed')
    sara = Partner.objects.create(name='Sara')
    PartnerAgreement.objects.create(apartment=apartment, partner=ahmed, percentage=Decimal('20'))
    PartnerAgreement.objects.create(apartment=apartment, partner=sara, percentage=Decimal('10'))
    return [ahmed, sara]
