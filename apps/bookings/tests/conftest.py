import pytest
from datetime import date
from decimal import Decimal
from apps.bookings.services import create_booking


@pytest.fixture
def make_booking(room):
    """
    Factory creating bookings through the service layer.

    Defaults to a 5-night, 500 USD direct booking of `room` in March 2025.
    """
    def _make(**overrides):
        target_room = overrides.pop('room', room)
        data = {
            'apartment_id': target_room.apartment_id,
            'room_id': target_room.id,
            'guest_name': 'John Smith',
            'check_in': date(2025, 3, 1),
            'check_out': date(2025, 3, 6),
            'total_booking_price': Decimal('500.00'),
        }
        data.update(overrides)
        return create_booking(**data)
    return _make


@pytest.fixture
def booking(make_booking):
    """A confirmed direct booking, 2025-03-01 to 2025-03-06."""
    return make_booking()


@pytest.fixture
def platform_booking(make_booking, partners):
    """
    1000 USD platform booking with 100 USD commission, 10% development
    deduction and the apartment's 30% partner agreements.
    """
    return make_booking(
        guest_name='Maria Garcia',
        check_in=date(2025, 4, 1),
        check_out=date(2025, 4, 11),
        total_booking_price=Decimal('1000.00'),
        source='Booking.com',
        platform_commission=Decimal('100.00'),
        dev_deduction_type='percent',
        dev_deduction_value=Decimal('10'),
    )
