"""
Bookings services - Business logic layer.

This package contains all business operations for the bookings app:
- Room availability (conflict detection)
- Payment ledger (multi-currency totals)
- Booking lifecycle (create, edit, extend, end early, cancel, delete)
- Revenue distribution
"""

from .availability import (
    ranges_overlap,
    find_conflict,
    find_conflicts,
)

from .payments import (
    quantize_money,
    normalize_payments,
    total_paid_in_base,
    remaining,
    booking_rate_table,
    booking_payment_summary,
)

from .lifecycle import (
    calculate_nights,
    effective_status,
    get_booking_by_id,
    find_transfer_origin,
    create_booking,
    update_booking,
    extend_booking,
    end_booking_early,
    cancel_booking,
    delete_booking,
)

from .revenue import (
    development_deduction_amount,
    partner_shares,
    distribute,
)

from .exceptions import (
    BookingServiceError,
    BookingValidationError,
    BookingConflictError,
    BookingNotFoundError,
    InvalidStatusTransitionError,
)

__all__ = [
    # Availability
    'ranges_overlap',
    'find_conflict',
    'find_conflicts',
    # Payment ledger
    'quantize_money',
    'normalize_payments',
    'total_paid_in_base',
    'remaining',
    'booking_rate_table',
    'booking_payment_summary',
    # Lifecycle
    'calculate_nights',
    'effective_status',
    'get_booking_by_id',
    'find_transfer_origin',
    'create_booking',
    'update_booking',
    'extend_booking',
    'end_booking_early',
    'cancel_booking',
    'delete_booking',
    # Revenue
    'development_deduction_amount',
    'partner_shares',
    'distribute',
    # Exceptions
    'BookingServiceError',
    'BookingValidationError',
    'BookingConflictError',
    'BookingNotFoundError',
    'InvalidStatusTransitionError',
]
