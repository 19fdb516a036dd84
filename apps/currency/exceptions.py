"""Domain exceptions for currency app."""


class CurrencyServiceError(Exception):
    """Base exception for currency service errors."""
    pass


class RateUnavailableError(CurrencyServiceError):
    """No rate is known for the requested currency and no default was given."""

    def __init__(self, currency):
        self.currency = currency
        super().__init__(f"No exchange rate available for {currency}")


class InvalidRateError(CurrencyServiceError):
    """Rate must be a positive number."""
    pass
