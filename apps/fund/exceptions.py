"""Domain exceptions for fund app."""


class FundServiceError(Exception):
    """Base exception for fund service errors."""
    pass


class InvalidFundAmountError(FundServiceError):
    """Deposit or withdrawal amount must be positive."""
    pass


class ImmutableTransactionError(FundServiceError):
    """Fund transactions cannot be edited or deleted; post a correction instead."""
    pass
