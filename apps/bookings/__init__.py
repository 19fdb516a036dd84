"""
Bookings App - Booking Lifecycle and Revenue

Room bookings with conflict detection, multi-currency payments, stay
extensions, early termination, room transfers and per-booking revenue
distribution between platform, development fund, partners and operator.

Architecture:
- Models: Booking, Payment, BookingExtension
- Services: availability, payments, lifecycle, revenue (services/ package)
- Views: BookingViewSet plus availability and transfer lookups
- Exceptions: services/exceptions.py, translated to HTTP in views
"""
