"""API utilities for FastAPI route handling."""

import functools
import logging
from collections.abc import Callable
from typing import Annotated

from fastapi import Header, HTTPException, status

from core.exceptions import (
    DeviceLocationError,
    ExternalServiceException,
    RateLimitException,
    ResourceNotFoundException,
    RoadTripException,
    ServiceUnavailableException,
    ValidationException,
)

# Authentication happens upstream; callers identify themselves by header.
UserId = Annotated[
    str,
    Header(alias="X-User-Id", min_length=1, description="Caller user id"),
]


def api_route(logger: logging.Logger):
    """
    Decorator for FastAPI endpoints that provides standardized error handling.

    Wraps async endpoint functions with try/except to:
    - Re-raise HTTPException instances as-is
    - Map custom exceptions to appropriate HTTP status codes
    - Log and convert other exceptions to 500 HTTPException

    Usage:
        @router.get("/api/example")
        @api_route(logger)
        async def my_endpoint():
            # ... business logic ...
            return result
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except ValidationException as e:
                logger.warning("Validation error in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=e.message,
                ) from e
            except ResourceNotFoundException as e:
                logger.info("Resource not found in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=e.message,
                ) from e
            except DeviceLocationError as e:
                logger.warning("Device location error in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail=e.message,
                ) from e
            except RateLimitException as e:
                logger.warning(
                    "Rate limit exceeded in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                    detail=e.message,
                ) from e
            except ExternalServiceException as e:
                logger.exception(
                    "External service error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_502_BAD_GATEWAY,
                    detail=f"External service error: {e.message}",
                ) from e
            except ServiceUnavailableException as e:
                logger.warning("Service unavailable in %s: %s", func.__name__, e.message)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail=e.message,
                ) from e
            except RoadTripException as e:
                logger.exception(
                    "Application error in %s: %s",
                    func.__name__,
                    e.message,
                )
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=e.message,
                ) from e
            except Exception as e:
                logger.exception("Unexpected error in %s", func.__name__)
                raise HTTPException(
                    status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                    detail=str(e),
                ) from e

        return wrapper

    return decorator
