"""Apartment services - lookups and expense recording."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from .models import Apartment, Room, Expense, ExpenseCategory
from .exceptions import ApartmentNotFoundError, RoomNotFoundError, InvalidExpenseError

logger = logging.getLogger(__name__)


def get_apartment_by_id(*, apartment_id: UUID) -> Apartment:
    """
    Raises:
        ApartmentNotFoundError: If apartment doesn't exist
    """
    try:
        return Apartment.objects.get(id=apartment_id)
    except Apartment.DoesNotExist:
        raise ApartmentNotFoundError(f"Apartment {apartment_id} not found")


def get_room(*, apartment_id: UUID, room_id: UUID) -> Room:
    """
    Return a room, checking it belongs to the apartment.

    Raises:
        RoomNotFoundError: If room doesn't exist in that apartment
    """
    try:
        return Room.objects.select_related('apartment').get(id=room_id, apartment_id=apartment_id)
    except Room.DoesNotExist:
        raise RoomNotFoundError(f"Room {room_id} not found in apartment {apartment_id}")


def record_expense(
    *,
    amount: Decimal,
    date: date,
    category: str = ExpenseCategory.OTHER,
    currency: str = 'USD',
    apartment: Optional[Apartment] = None,
    description: str = '',
    is_system_generated: bool = False,
    booking_reference: str = '',
) -> Expense:
    """
    Record an operating expense.

    Raises:
        InvalidExpenseError: If amount is not positive or category unknown
    """
    if amount is None or amount <= 0:
        raise InvalidExpenseError("Expense amount must be positive")
    if category not in ExpenseCategory.values:
        raise InvalidExpenseError(f"Unknown expense category: {category}")

    expense = Expense.objects.create(
        apartment=apartment,
        category=category,
        amount=amount,
        currency=currency.upper(),
        date=date,
        description=description,
        is_system_generated=is_system_generated,
        booking_reference=booking_reference,
    )
    logger.info(
        "Recorded %s expense %s %s for apartment %s",
        category, amount, expense.currency, apartment.id if apartment else None
    )
    return expense


def get_expenses(
    *,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    apartment_id: Optional[UUID] = None,
) -> QuerySet:
    """Expenses with start_date <= date < end_date, optionally for one apartment."""
    queryset = Expense.objects.select_related('apartment')
    if start_date:
        queryset = queryset.filter(date__gte=start_date)
    if end_date:
        queryset = queryset.filter(date__lt=end_date)
    if apartment_id:
        queryset = queryset.filter(apartment_id=apartment_id)
    return queryset


def remove_system_expenses(*, booking_reference: str) -> int:
    """
    Delete the expenses the booking engine generated for a booking.

    Returns:
        Number of expenses removed
    """
    if not booking_reference:
        return 0
    removed, _ = Expense.objects.filter(
        booking_reference=booking_reference,
        is_system_generated=True,
    ).delete()
    if removed:
        logger.info("Removed %s system expense(s) of booking %s", removed, booking_reference)
    return removed
