"""
Custom permission classes for bookings app.
"""
from rest_framework.permissions import BasePermission


class CanDeleteBooking(BasePermission):
    """
    Permission to permanently delete a booking.

    Deleting removes history, so it is reserved for staff. Everyone else
    cancels instead.

    Usage:
        def get_permissions(self):
            if self.action == 'destroy':
                return [IsAuthenticated(), CanDeleteBooking()]
            return super().get_permissions()
    """

    message = 'Only staff can delete bookings. Cancel the booking instead.'

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_staff)
