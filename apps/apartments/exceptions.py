"""Domain exceptions for apartments app."""


class ApartmentServiceError(Exception):
    """Base exception for apartment service errors."""
    pass


class ApartmentNotFoundError(ApartmentServiceError):
    """Apartment does not exist."""
    pass


class RoomNotFoundError(ApartmentServiceError):
    """Room does not exist or belongs to another apartment."""
    pass


class InvalidExpenseError(ApartmentServiceError):
    """Expense amount or fields are invalid."""
    pass
