"""Domain exceptions for bookings app."""


class BookingServiceError(Exception):
    """Base exception for all booking service errors."""
    pass


class BookingValidationError(BookingServiceError):
    """Caller-correctable input problem (dates, amounts, missing fields)."""
    pass


class BookingConflictError(BookingServiceError):
    """Requested stay overlaps an existing booking of the same room."""

    def __init__(self, conflicting_booking, message=None):
        self.conflicting_booking = conflicting_booking
        super().__init__(
            message or
            f"Room is already booked from {conflicting_booking.check_in} "
            f"to {conflicting_booking.check_out} ({conflicting_booking.reference})"
        )


class BookingNotFoundError(BookingServiceError):
    """Booking does not exist."""
    pass


class InvalidStatusTransitionError(BookingServiceError):
    """Operation not allowed for the booking's current status."""
    pass
