import pytest
from datetime import date
from decimal import Decimal
from apps.bookings.services import create_booking


@pytest.fixture
def book():
    """Create a booking in the given room through the service layer."""
    def _book(room, check_in, check_out, total, **extra):
        extra.setdefault('guest_name', 'Report Guest')
        return create_booking(
            apartment_id=room.apartment_id,
            room_id=room.id,
            check_in=check_in,
            check_out=check_out,
            total_booking_price=Decimal(total),
            **extra
        )
    return _book


@pytest.fixture
def january_bookings(book, room, other_room, partners):
    """
    Two January bookings in the partnered apartment plus one cancelled.

    - 2025-01-10 .. 2025-01-15, 500 USD, Airbnb with 50 USD commission
    - 2025-01-31 .. 2025-02-03, 300 USD, direct, 10% development deduction
    - 2025-01-20 .. 2025-01-22, 200 USD, cancelled
    """
    from apps.bookings.services import cancel_booking

    first = book(
        room, date(2025, 1, 10), date(2025, 1, 15), '500.00',
        source='Airbnb', platform_commission=Decimal('50.00'),
        payments=[{'amount': Decimal('500.00'), 'method': 'platform'}],
    )
    month_end = book(
        other_room, date(2025, 1, 31), date(2025, 2, 3), '300.00',
        dev_deduction_type='percent', dev_deduction_value=Decimal('10'),
        payments=[{'amount': Decimal('100.00'), 'method': 'cash'}],
    )
    cancelled = book(room, date(2025, 1, 20), date(2025, 1, 22), '200.00')
    cancel_booking(booking_id=cancelled.id)
    return [first, month_end, cancelled]
