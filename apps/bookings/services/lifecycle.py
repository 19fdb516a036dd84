"""
Booking lifecycle service - create, edit, extend, end early, cancel, delete.

Every write that can change which nights a room is occupied runs inside a
transaction and locks the room row before checking for conflicts, so two
concurrent requests for the same room cannot both pass the check.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.apartments.exceptions import ApartmentServiceError
from apps.apartments.models import Room, ExpenseCategory
from apps.apartments.services import (
    get_apartment_by_id,
    get_room,
    record_expense,
    remove_system_expenses,
)
from apps.currency.exceptions import RateUnavailableError
from apps.currency.services import get_rate_table, RATE_PLACES
from apps.fund.services import record_booking_contribution
from apps.bookings.models import (
    Booking,
    BookingExtension,
    BookingStatus,
    EffectiveStatus,
    DevDeductionType,
    Payment,
    PaymentMethod,
    TERMINAL_STATUSES,
)
from .availability import find_conflict
from .payments import quantize_money, booking_rate_table, booking_total_in_base
from .revenue import development_deduction_amount
from .exceptions import (
    BookingValidationError,
    BookingConflictError,
    BookingNotFoundError,
    InvalidStatusTransitionError,
)

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = (BookingStatus.PENDING, BookingStatus.CONFIRMED)

UPDATABLE_FIELDS = {
    'guest_name',
    'guest_phone',
    'guest_email',
    'guest_nationality',
    'check_in',
    'check_out',
    'room_id',
    'total_booking_price',
    'currency',
    'source',
    'platform_commission',
    'dev_deduction_type',
    'dev_deduction_value',
    'status',
    'notes',
}


# =============================================================================
# Derived values
# =============================================================================

def calculate_nights(check_in: date, check_out: date) -> int:
    """Nights between the two dates, never less than 1."""
    return max(1, (check_out - check_in).days)


def effective_status(booking: Booking, today: Optional[date] = None) -> str:
    """
    Status shown everywhere: stored terminal status, else derived from dates.

    Cancelled and ended-early always win. Otherwise a booking is completed
    once its check-out is in the past, active while today falls inside the
    stay (check-out day included) and upcoming before check-in.
    """
    if booking.status in TERMINAL_STATUSES:
        return booking.status

    today = today or timezone.localdate()
    if booking.check_out < today:
        return EffectiveStatus.COMPLETED
    if booking.check_in <= today <= booking.check_out:
        return EffectiveStatus.ACTIVE
    return EffectiveStatus.UPCOMING


# =============================================================================
# Internal helpers
# =============================================================================

def _validate_stay(check_in: Optional[date], check_out: Optional[date]) -> None:
    if not check_in or not check_out:
        raise BookingValidationError("Check-in and check-out dates are required")
    if check_out <= check_in:
        raise BookingValidationError("Check-out date must be after check-in date")


def _validate_amounts(
    *,
    total_booking_price,
    platform_commission,
    dev_deduction_type: str,
    dev_deduction_value,
) -> None:
    if total_booking_price is None or total_booking_price < 0:
        raise BookingValidationError("Total booking price must be zero or positive")
    if platform_commission is not None and platform_commission < 0:
        raise BookingValidationError("Platform commission cannot be negative")
    if dev_deduction_type not in DevDeductionType.values:
        raise BookingValidationError(f"Unknown development deduction type: {dev_deduction_type}")
    if dev_deduction_value is not None and dev_deduction_value < 0:
        raise BookingValidationError("Development deduction cannot be negative")
    if dev_deduction_type == DevDeductionType.PERCENT and dev_deduction_value > 100:
        raise BookingValidationError("Development deduction percent cannot exceed 100")


def _lock_room(*, apartment_id: UUID, room_id: UUID) -> Room:
    try:
        return Room.objects.select_for_update().get(id=room_id, apartment_id=apartment_id)
    except Room.DoesNotExist:
        raise BookingValidationError("Room does not belong to the selected apartment")


def _ensure_available(
    *,
    room_id: UUID,
    check_in: date,
    check_out: date,
    exclude_booking_id: Optional[UUID] = None,
) -> None:
    conflict = find_conflict(
        room_id=room_id,
        check_in=check_in,
        check_out=check_out,
        exclude_booking_id=exclude_booking_id,
    )
    if conflict:
        logger.info(
            "Room %s unavailable for %s - %s: overlaps %s",
            room_id, check_in, check_out, conflict.reference
        )
        raise BookingConflictError(conflict)


def _lock_rates(currency: str, exchange_rate=None) -> tuple:
    """Snapshot of the current rates plus the secondary-currency rate to lock."""
    table = get_rate_table()
    if exchange_rate is None:
        exchange_rate = table.rate_for(
            settings.SECONDARY_CURRENCY, default=settings.DEFAULT_EXCHANGE_RATE
        )
    elif exchange_rate <= 0:
        raise BookingValidationError("Exchange rate must be positive")

    try:
        table.rate_for(currency)
    except RateUnavailableError:
        if currency.upper() != settings.SECONDARY_CURRENCY.upper():
            raise BookingValidationError(f"No exchange rate available for {currency}")

    exchange_rate = Decimal(exchange_rate).quantize(RATE_PLACES)
    snapshot = table.snapshot()
    snapshot[settings.SECONDARY_CURRENCY.upper()] = str(exchange_rate)
    return exchange_rate, snapshot


def _replace_payments(booking: Booking, payments: list) -> None:
    table = booking_rate_table(booking)
    rows = []
    for position, payment in enumerate(payments):
        amount = payment.get('amount')
        if amount is None or amount < 0:
            raise BookingValidationError("Payment amounts must be zero or positive")
        currency = (payment.get('currency') or booking.currency).upper()
        if currency not in table:
            raise BookingValidationError(f"No exchange rate available for {currency}")
        rows.append(Payment(
            booking=booking,
            amount=amount,
            currency=currency,
            method=payment.get('method') or PaymentMethod.CASH,
            position=position,
        ))
    booking.payments.all().delete()
    Payment.objects.bulk_create(rows)


def _sync_development_contribution(booking: Booking) -> None:
    """Post the difference between the deduction due and what the fund holds."""
    if booking.status == BookingStatus.CANCELLED:
        due = Decimal('0.00')
    else:
        due = quantize_money(
            development_deduction_amount(booking, booking_total_in_base(booking))
        )

    delta = due - booking.development_deduction
    if delta == 0:
        return

    record_booking_contribution(booking=booking, amount=delta, rate_table=booking_rate_table(booking))
    booking.development_deduction = due
    booking.save(update_fields=['development_deduction', 'updated_at'])


def _apply_transfer(booking: Booking, origin: Booking) -> None:
    booking.transfer_from_booking = origin
    if not origin.is_external and origin.platform_commission > 0:
        booking.transfer_commission_amount = origin.platform_commission
        record_expense(
            amount=origin.platform_commission,
            date=booking.check_in,
            category=ExpenseCategory.TRANSFER_COMMISSION,
            currency=settings.BASE_CURRENCY,
            apartment=booking.apartment,
            description=(
                f"{origin.source} commission carried over from booking {origin.reference} "
                f"({booking.guest_name})"
            ),
            is_system_generated=True,
            booking_reference=booking.reference,
        )
    booking.save(update_fields=['transfer_from_booking', 'transfer_commission_amount', 'updated_at'])
    logger.info("Booking %s linked as transfer from %s", booking.reference, origin.reference)


def _validate_origin(origin_apartment_id: Optional[UUID], origin_room_id: Optional[UUID]) -> None:
    try:
        if origin_room_id and origin_apartment_id:
            get_room(apartment_id=origin_apartment_id, room_id=origin_room_id)
        elif origin_room_id:
            if not Room.objects.filter(id=origin_room_id).exists():
                raise BookingValidationError(f"Origin room {origin_room_id} not found")
        elif origin_apartment_id:
            get_apartment_by_id(apartment_id=origin_apartment_id)
    except ApartmentServiceError as e:
        raise BookingValidationError(f"Invalid transfer origin: {e}")


def _get_for_update(booking_id: UUID) -> Booking:
    try:
        return Booking.objects.select_for_update().select_related('apartment').get(id=booking_id)
    except Booking.DoesNotExist:
        raise BookingNotFoundError(f"Booking {booking_id} not found")


# =============================================================================
# Queries
# =============================================================================

def get_booking_by_id(*, booking_id: UUID) -> Booking:
    """
    Raises:
        BookingNotFoundError: If booking doesn't exist
    """
    try:
        return Booking.objects.select_related('apartment', 'room').get(id=booking_id)
    except Booking.DoesNotExist:
        raise BookingNotFoundError(f"Booking {booking_id} not found")


def find_transfer_origin(
    *,
    origin_room_id: Optional[UUID],
    guest_name: str,
    origin_apartment_id: Optional[UUID] = None,
    today: Optional[date] = None,
) -> Optional[Booking]:
    """
    Find the booking a guest is moving out of.

    A match is a confirmed booking of the origin room for the same guest
    (name compared trimmed and case-insensitively) that has not checked out
    before today. Not finding one is not an error.
    """
    if not origin_room_id or not guest_name or not guest_name.strip():
        return None

    today = today or timezone.localdate()
    wanted = guest_name.strip().lower()

    candidates = Booking.objects.filter(
        room_id=origin_room_id,
        status=BookingStatus.CONFIRMED,
        check_out__gte=today,
    ).order_by('-check_in')
    if origin_apartment_id:
        candidates = candidates.filter(apartment_id=origin_apartment_id)

    for candidate in candidates:
        if candidate.guest_name.strip().lower() == wanted:
            return candidate
    return None


# =============================================================================
# Commands
# =============================================================================

@transaction.atomic
def create_booking(
    *,
    apartment_id: UUID,
    room_id: UUID,
    guest_name: str,
    check_in: date,
    check_out: date,
    total_booking_price: Decimal,
    currency: Optional[str] = None,
    status: str = BookingStatus.CONFIRMED,
    guest_phone: str = '',
    guest_email: str = '',
    guest_nationality: str = '',
    source: Optional[str] = None,
    platform_commission: Decimal = Decimal('0.00'),
    dev_deduction_type: str = DevDeductionType.NONE,
    dev_deduction_value: Decimal = Decimal('0.00'),
    exchange_rate: Optional[Decimal] = None,
    payments: Optional[list] = None,
    origin_apartment_id: Optional[UUID] = None,
    origin_room_id: Optional[UUID] = None,
    notes: str = '',
    today: Optional[date] = None,
) -> Booking:
    """
    Create a booking with its payments, all-or-nothing.

    This operation:
    1. Validates guest, dates, amounts and status
    2. Locks the room and rejects overlapping stays
    3. Locks the current exchange rates onto the booking
    4. Links a room transfer when an origin room is given
    5. Posts the development deduction to the fund

    Args:
        apartment_id: Apartment being booked
        room_id: Room inside that apartment
        guest_name: Guest's name (required)
        check_in: First night
        check_out: Departure day (exclusive)
        total_booking_price: Price in `currency`
        currency: Price currency (defaults to base currency)
        status: pending or confirmed
        source: Booking channel; "External" means no platform commission
        platform_commission: Commission in base currency
        dev_deduction_type: none, fixed or percent
        dev_deduction_value: Percent, or fixed amount in secondary currency
        exchange_rate: Override for the secondary-currency rate
        payments: List of {amount, currency, method}
        origin_apartment_id / origin_room_id: Room the guest transfers from
        notes: Free text
        today: Reference date for transfer matching

    Returns:
        Created Booking instance

    Raises:
        BookingValidationError: If input is invalid, including an unknown
            transfer origin
        BookingConflictError: If the room is taken for any of the nights
    """
    if not guest_name or not guest_name.strip():
        raise BookingValidationError("Guest name is required")
    _validate_stay(check_in, check_out)
    if status not in EDITABLE_STATUSES:
        raise BookingValidationError("New bookings must be pending or confirmed")

    source = source or settings.EXTERNAL_SOURCE
    currency = (currency or settings.BASE_CURRENCY).upper()
    _validate_amounts(
        total_booking_price=total_booking_price,
        platform_commission=platform_commission,
        dev_deduction_type=dev_deduction_type,
        dev_deduction_value=dev_deduction_value,
    )

    _validate_origin(origin_apartment_id, origin_room_id)

    room = _lock_room(apartment_id=apartment_id, room_id=room_id)
    _ensure_available(room_id=room.id, check_in=check_in, check_out=check_out)

    locked_rate, snapshot = _lock_rates(currency, exchange_rate)

    origin = None
    if origin_room_id:
        origin = find_transfer_origin(
            origin_apartment_id=origin_apartment_id,
            origin_room_id=origin_room_id,
            guest_name=guest_name,
            today=today,
        )

    booking = Booking.objects.create(
        apartment_id=apartment_id,
        room=room,
        guest_name=guest_name.strip(),
        guest_phone=guest_phone,
        guest_email=guest_email,
        guest_nationality=guest_nationality,
        check_in=check_in,
        check_out=check_out,
        number_of_nights=calculate_nights(check_in, check_out),
        status=status,
        total_booking_price=total_booking_price,
        currency=currency,
        exchange_rate=locked_rate,
        locked_rates=snapshot,
        source=source,
        platform_commission=platform_commission or Decimal('0.00'),
        dev_deduction_type=dev_deduction_type,
        dev_deduction_value=dev_deduction_value or Decimal('0.00'),
        origin_apartment_id=origin_apartment_id,
        origin_room_id=origin_room_id,
        notes=notes,
    )

    if payments:
        _replace_payments(booking, payments)
    if origin:
        _apply_transfer(booking, origin)
    _sync_development_contribution(booking)

    logger.info(
        "Created booking %s for room %s (%s - %s)",
        booking.reference, room.room_number, check_in, check_out
    )
    return booking


@transaction.atomic
def update_booking(*, booking_id: UUID, payments: Optional[list] = None, **changes) -> Booking:
    """
    Edit a booking. Date or room changes re-run the conflict check.

    `payments`, when given, replaces the whole payment list.

    Raises:
        BookingNotFoundError: If booking doesn't exist
        InvalidStatusTransitionError: If booking is cancelled/ended early,
            or a status other than pending/confirmed is requested
        BookingValidationError: If input is invalid
        BookingConflictError: If the new dates/room overlap another stay
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise BookingValidationError(f"Cannot update fields: {', '.join(sorted(unknown))}")

    booking = _get_for_update(booking_id)
    if booking.is_terminal:
        raise InvalidStatusTransitionError(
            f"Booking is {booking.get_status_display().lower()} and can no longer be edited"
        )
    if 'status' in changes and changes['status'] not in EDITABLE_STATUSES:
        raise InvalidStatusTransitionError(
            "Use cancel or end early to close a booking"
        )
    if 'guest_name' in changes:
        if not changes['guest_name'] or not changes['guest_name'].strip():
            raise BookingValidationError("Guest name is required")
        changes['guest_name'] = changes['guest_name'].strip()

    check_in = changes.get('check_in', booking.check_in)
    check_out = changes.get('check_out', booking.check_out)
    room_id = changes.get('room_id', booking.room_id)
    _validate_stay(check_in, check_out)

    _validate_amounts(
        total_booking_price=changes.get('total_booking_price', booking.total_booking_price),
        platform_commission=changes.get('platform_commission', booking.platform_commission),
        dev_deduction_type=changes.get('dev_deduction_type', booking.dev_deduction_type),
        dev_deduction_value=changes.get('dev_deduction_value', booking.dev_deduction_value),
    )

    if 'currency' in changes:
        changes['currency'] = changes['currency'].upper()
        if changes['currency'] not in booking_rate_table(booking):
            raise BookingValidationError(f"No exchange rate available for {changes['currency']}")

    stay_changed = (
        check_in != booking.check_in or
        check_out != booking.check_out or
        room_id != booking.room_id
    )
    if stay_changed:
        _lock_room(apartment_id=booking.apartment_id, room_id=room_id)
        _ensure_available(
            room_id=room_id,
            check_in=check_in,
            check_out=check_out,
            exclude_booking_id=booking.id,
        )

    for field, value in changes.items():
        setattr(booking, field, value)
    booking.number_of_nights = calculate_nights(booking.check_in, booking.check_out)
    booking.save()

    if payments is not None:
        _replace_payments(booking, payments)
    _sync_development_contribution(booking)

    logger.info("Updated booking %s (%s)", booking.reference, ', '.join(sorted(changes)) or 'payments')
    return booking


@transaction.atomic
def extend_booking(*, booking_id: UUID, extra_days: int, extra_amount: Decimal) -> Booking:
    """
    Push a booking's check-out back by `extra_days` and add `extra_amount`.

    Only the added nights are checked for conflicts. Platform commission is
    not changed by an extension.

    Raises:
        BookingValidationError: If days or amount are not positive
        BookingNotFoundError: If booking doesn't exist
        InvalidStatusTransitionError: If booking is cancelled or ended early
        BookingConflictError: If the extended range overlaps another stay
            (the booking is left untouched)
    """
    if extra_days is None or extra_days <= 0:
        raise BookingValidationError("Extension days must be greater than zero")
    if extra_amount is None or extra_amount <= 0:
        raise BookingValidationError("Extension amount must be greater than zero")

    booking = _get_for_update(booking_id)
    if booking.is_terminal:
        raise InvalidStatusTransitionError(
            f"Cannot extend a booking that is {booking.get_status_display().lower()}"
        )

    _lock_room(apartment_id=booking.apartment_id, room_id=booking.room_id)
    previous_check_out = booking.check_out
    new_check_out = previous_check_out + timedelta(days=extra_days)
    _ensure_available(
        room_id=booking.room_id,
        check_in=booking.check_in,
        check_out=new_check_out,
        exclude_booking_id=booking.id,
    )

    booking.check_out = new_check_out
    booking.number_of_nights = calculate_nights(booking.check_in, new_check_out)
    booking.total_booking_price = booking.total_booking_price + extra_amount
    booking.save(update_fields=[
        'check_out', 'number_of_nights', 'total_booking_price', 'updated_at'
    ])

    BookingExtension.objects.create(
        booking=booking,
        extra_days=extra_days,
        extra_amount=extra_amount,
        previous_check_out=previous_check_out,
        new_check_out=new_check_out,
    )
    _sync_development_contribution(booking)

    logger.info("Extended booking %s by %s night(s) to %s", booking.reference, extra_days, new_check_out)
    return booking


@transaction.atomic
def end_booking_early(*, booking_id: UUID, actual_check_out: Optional[date] = None) -> Booking:
    """
    Close a stay before its planned check-out and compute the refund.

    refund = max(0, original nights - nights stayed) * (total / original nights),
    in the booking's currency.

    Raises:
        BookingNotFoundError: If booking doesn't exist
        InvalidStatusTransitionError: If booking is cancelled or already ended
        BookingValidationError: If actual_check_out is outside the stay
    """
    booking = _get_for_update(booking_id)
    if booking.is_terminal:
        raise InvalidStatusTransitionError(
            f"Booking is already {booking.get_status_display().lower()}"
        )

    actual_check_out = actual_check_out or timezone.localdate()
    if actual_check_out < booking.check_in or actual_check_out > booking.check_out:
        raise BookingValidationError(
            "Actual check-out must be between check-in and planned check-out"
        )

    original_nights = booking.number_of_nights or calculate_nights(booking.check_in, booking.check_out)
    nights_stayed = (actual_check_out - booking.check_in).days
    unused_nights = max(0, original_nights - nights_stayed)
    price_per_night = booking.total_booking_price / original_nights

    booking.status = BookingStatus.ENDED_EARLY
    booking.actual_check_out = actual_check_out
    booking.refund_amount = quantize_money(unused_nights * price_per_night)
    booking.ended_at = timezone.now()
    booking.save(update_fields=[
        'status', 'actual_check_out', 'refund_amount', 'ended_at', 'updated_at'
    ])

    logger.info(
        "Booking %s ended early on %s, refund %s %s",
        booking.reference, actual_check_out, booking.refund_amount, booking.currency
    )
    return booking


@transaction.atomic
def cancel_booking(*, booking_id: UUID) -> Booking:
    """
    Cancel a booking, reverse its development fund contribution and drop
    the transfer commission expense recorded for it.

    Raises:
        BookingNotFoundError: If booking doesn't exist
        InvalidStatusTransitionError: If booking is cancelled or ended early
    """
    booking = _get_for_update(booking_id)
    if booking.is_terminal:
        raise InvalidStatusTransitionError(
            f"Booking is already {booking.get_status_display().lower()}"
        )

    booking.status = BookingStatus.CANCELLED
    booking.save(update_fields=['status', 'updated_at'])
    _sync_development_contribution(booking)
    remove_system_expenses(booking_reference=booking.reference)

    logger.info("Cancelled booking %s", booking.reference)
    return booking


@transaction.atomic
def delete_booking(*, booking_id: UUID) -> None:
    """
    Permanently remove a booking (administrative).

    Any development contribution still held by the fund is reversed first
    and expenses generated for the booking are removed.

    Raises:
        BookingNotFoundError: If booking doesn't exist
    """
    booking = _get_for_update(booking_id)
    if booking.development_deduction:
        record_booking_contribution(
            booking=booking,
            amount=-booking.development_deduction,
            rate_table=booking_rate_table(booking),
        )
    remove_system_expenses(booking_reference=booking.reference)
    reference = booking.reference
    booking.delete()
    logger.info("Deleted booking %s", reference)
