"""Room availability - half-open date range conflict detection."""

from datetime import date
from typing import Optional
from uuid import UUID

from django.db.models import QuerySet

from apps.bookings.models import Booking, TERMINAL_STATUSES


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """True when [a_start, a_end) and [b_start, b_end) share at least one night."""
    return a_start < b_end and a_end > b_start


def _overlapping(
    *,
    room_id: UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[UUID] = None,
) -> QuerySet:
    queryset = Booking.objects.filter(
        room_id=room_id,
        check_in__lt=check_out,
        check_out__gt=check_in,
    ).exclude(
        status__in=TERMINAL_STATUSES
    )
    if exclude_booking_id:
        queryset = queryset.exclude(id=exclude_booking_id)
    return queryset.order_by('check_in', 'created_at')


def find_conflict(
    *,
    room_id: UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[UUID] = None,
) -> Optional[Booking]:
    """
    Return the first live booking of the room overlapping [check_in, check_out).

    Cancelled and ended-early bookings never block a room, and a stay that
    starts on another's check-out day does not overlap it.

    Returns:
        Conflicting Booking or None
    """
    return _overlapping(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        exclude_booking_id=exclude_booking_id,
    ).first()


def find_conflicts(
    *,
    room_id: UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[UUID] = None,
) -> list:
    """All live bookings of the room overlapping [check_in, check_out)."""
    return list(_overlapping(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        exclude_booking_id=exclude_booking_id,
    ))
