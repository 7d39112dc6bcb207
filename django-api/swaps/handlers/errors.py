"""Map domain errors to HTTP responses.

Registered as REST_FRAMEWORK["EXCEPTION_HANDLER"]. Domain errors become
``{"error": {"code", "message"}}`` bodies; anything unexpected becomes a
generic 500 that never leaks internal details.
"""

import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from swaps.domain.errors import (
    ConflictError,
    ConsistencyFaultError,
    ContentionError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (InvalidTransitionError, status.HTTP_409_CONFLICT),
    (ContentionError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConsistencyFaultError, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def http_status_for(exc: DomainError) -> int:
    for error_type, http_status in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return http_status
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def domain_exception_handler(exc, context):
    """DRF exception handler aware of swap domain errors."""
    if isinstance(exc, DomainError):
        http_status = http_status_for(exc)
        if http_status >= 500:
            # Consistency faults are already logged on swaps.consistency.
            if not isinstance(exc, ConsistencyFaultError):
                logger.error("Request failed with %s", exc.code.value)
        else:
            logger.info("Request rejected: %s", exc)
        response = Response(
            {"error": {"code": exc.code.value, "message": exc.message}},
            status=http_status,
        )
        if isinstance(exc, ContentionError):
            response["Retry-After"] = "1"
        return response

    response = exception_handler(exc, context)
    if response is not None:
        return response

    logger.error("Unhandled exception in %s", context.get("view"), exc_info=exc)
    return Response(
        {"error": {"code": "INTERNAL_ERROR", "message": "An unexpected error occurred"}},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
