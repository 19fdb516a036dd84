"""
Domain exceptions for analytics app.

Unknown apartments surface as apps.apartments.exceptions.ApartmentNotFoundError,
which the report queries share with the rest of the API.
"""


class AnalyticsServiceError(Exception):
    """Base exception for report queries; views answer it with 400."""

    pass


class InvalidPeriodError(AnalyticsServiceError):
    """Raised when a requested year/month does not name a calendar month."""

    pass
