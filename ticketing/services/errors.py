"""Error taxonomy for the ticketing core.

Every error carries a code, a caller-safe message and a ``{field: reason}``
mapping. None of them leave state behind: the purchase transaction is rolled
back before they reach the caller.
"""

from enum import Enum


class ErrorCode(Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    EVENT_PASSED = "EVENT_PASSED"
    INSUFFICIENT_CAPACITY = "INSUFFICIENT_CAPACITY"
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    LOCK_TIMEOUT = "LOCK_TIMEOUT"


class TicketingError(Exception):
    """Base error with code and user-safe message."""

    code: ErrorCode

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or {}

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class ValidationError(TicketingError):
    """Malformed or out-of-range input, or a reference to a missing entity."""

    code = ErrorCode.VALIDATION_FAILED

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(reason, {field: reason})
        self.field = field


class BusinessRuleError(TicketingError):
    """Raised when the event date is not in the future."""

    code = ErrorCode.EVENT_PASSED

    def __init__(self, reason: str = "Event has already passed. Tickets cannot be purchased.") -> None:
        super().__init__(reason, {"event_id": reason})


class CapacityError(TicketingError):
    """Raised when fewer tickets remain than were requested."""

    code = ErrorCode.INSUFFICIENT_CAPACITY

    def __init__(self, remaining: int) -> None:
        reason = f"Not enough tickets available. Only {remaining} tickets remaining."
        super().__init__(reason, {"quantity": reason})
        self.remaining = remaining


class EventNotFoundError(TicketingError):
    code = ErrorCode.EVENT_NOT_FOUND

    def __init__(self, event_id: int) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class RetryableError(TicketingError):
    """The per-event lock could not be acquired in time. Nothing was written."""

    code = ErrorCode.LOCK_TIMEOUT

    def __init__(self, event_id: int) -> None:
        super().__init__("Event is busy, please try again.")
        self.event_id = event_id
