from fastapi import HTTPException

from restaurant_os.exceptions import (
    AccessDeniedError,
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    RestaurantOSError,
    StaleOrderError,
    ValidationError,
)


def to_http_exception(exc: RestaurantOSError) -> HTTPException:
    """Maps a domain error to the HTTP error the client sees."""
    if isinstance(exc, ValidationError):
        return HTTPException(status_code=422, detail=exc.errors)
    if isinstance(exc, InvalidTransitionError):
        return HTTPException(
            status_code=409,
            detail={"message": str(exc), "current_status": exc.current, "requested": exc.requested},
        )
    if isinstance(exc, StaleOrderError):
        return HTTPException(status_code=409, detail={"message": str(exc), "order_id": exc.order_id})
    if isinstance(exc, ConflictError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc) or "Not found")
    if isinstance(exc, AccessDeniedError):
        return HTTPException(status_code=403, detail="Access denied")
    return HTTPException(status_code=400, detail=str(exc))
