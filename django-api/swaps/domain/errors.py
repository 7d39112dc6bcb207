"""Domain error codes for the swaps module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_ID = "INVALID_ID"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    SWAP_REQUEST_NOT_FOUND = "SWAP_REQUEST_NOT_FOUND"
    EVENT_NOT_SWAPPABLE = "EVENT_NOT_SWAPPABLE"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    CONTENTION = "CONTENTION"
    CONSISTENCY_FAULT = "CONSISTENCY_FAULT"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(DomainError):
    """Raised for malformed input. Never retried."""

    def __init__(
        self, message: str, code: ErrorCode = ErrorCode.VALIDATION_FAILED
    ) -> None:
        super().__init__(code=code, message=message)


class InvalidIdError(ValidationError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "ID") -> None:
        super().__init__(f"Invalid {kind} format", code=ErrorCode.INVALID_ID)


class NotFoundError(DomainError):
    """Raised when a referenced identity does not exist."""


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_FOUND,
            message="Event not found",
        )
        self.event_id = event_id


class SwapRequestNotFoundError(NotFoundError):
    """Raised when a swap request is not found."""

    def __init__(self, swap_request_id: str) -> None:
        super().__init__(
            code=ErrorCode.SWAP_REQUEST_NOT_FOUND,
            message="Swap request not found",
        )
        self.swap_request_id = swap_request_id


class ConflictError(DomainError):
    """Raised when current state forbids the operation."""


class EventNotSwappableError(ConflictError):
    """Raised when an event offered or targeted is not SWAPPABLE."""

    def __init__(self, event_id: str) -> None:
        super().__init__(
            code=ErrorCode.EVENT_NOT_SWAPPABLE,
            message="Event is not available for swapping",
        )
        self.event_id = event_id


class InvalidTransitionError(DomainError):
    """Raised when a status change is not allowed by the state machine."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_TRANSITION, message=message)


class ContentionError(DomainError):
    """Raised when row locks could not be acquired in time."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.CONTENTION,
            message="The resource is busy, try again",
        )


class ConsistencyFaultError(DomainError):
    """Raised when stored state breaks a swap invariant."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            code=ErrorCode.CONSISTENCY_FAULT,
            message="Internal consistency fault",
        )
        self.detail = detail
