class RestaurantOSError(Exception):
    """Base class for domain errors raised by crud and services."""


class ValidationError(RestaurantOSError, ValueError):
    """Input rejected before any backend write; carries one entry per offending field."""

    def __init__(self, errors: list[dict]):
        self.errors = errors
        super().__init__("; ".join(f"{e['field']}: {e['message']}" for e in errors))

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}])


class OrderValidationError(ValidationError):
    pass


class InvalidTransitionError(RestaurantOSError, ValueError):
    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid transition from '{current}' via '{requested}'")


class StaleOrderError(RestaurantOSError):
    def __init__(self, order_id: str, expected_version: int | None = None):
        self.order_id = order_id
        self.expected_version = expected_version
        super().__init__(f"Order {order_id} was modified concurrently")


class ConflictError(RestaurantOSError):
    """The request clashes with the current state of a record (e.g. a second open shift)."""


class NotFoundError(RestaurantOSError, LookupError):
    pass


class AccessDeniedError(RestaurantOSError, PermissionError):
    pass


class ActionInProgressError(RestaurantOSError):
    """A transition for the same order is still awaiting its response."""
