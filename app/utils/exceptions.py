"""
Exception handling utilities.

Defines the categorized error taxonomy of the network core. Every error
carries a kind and a stable reason string so calling layers can present a
specific message ("slot already filled" vs "parent not found").
"""

from enum import StrEnum


class ErrorKind(StrEnum):
    """Error categories reported to callers."""

    NOT_FOUND = "not_found"
    INVALID_INPUT = "invalid_input"
    CONFLICT = "conflict"
    PRECONDITION_FAILED = "precondition_failed"


class NetworkCoreError(Exception):
    """Base class for all recoverable network core errors."""

    kind: ErrorKind = ErrorKind.INVALID_INPUT
    reason: str = "network core error"

    def __init__(self, message: str | None = None, **context: object) -> None:
        self.context = context
        super().__init__(message or self.reason)

    def to_dict(self) -> dict[str, object]:
        """Serialize for API layers."""
        return {
            "kind": self.kind.value,
            "reason": self.reason,
            "message": str(self),
            **self.context,
        }


# Not found

class NotFoundError(NetworkCoreError):
    """Raised when a participant or node is absent."""

    kind = ErrorKind.NOT_FOUND
    reason = "not found"


class NodeNotFoundError(NotFoundError):
    reason = "tree node not found"


class ParentNotFoundError(NotFoundError):
    reason = "parent not found"


class RootNotFoundError(NotFoundError):
    reason = "root node not found"


class ParticipantNotFoundError(NotFoundError):
    reason = "participant not found"


# Invalid input

class InvalidInputError(NetworkCoreError):
    """Raised for malformed arguments."""

    kind = ErrorKind.INVALID_INPUT
    reason = "invalid input"


class InvalidPositionError(InvalidInputError):
    reason = "invalid position"


class InvalidAmountError(InvalidInputError):
    reason = "invalid amount"


# Conflict

class ConflictError(NetworkCoreError):
    """Raised when a write would break a uniqueness invariant."""

    kind = ErrorKind.CONFLICT
    reason = "conflict"


class SlotOccupiedError(ConflictError):
    reason = "slot already filled"


class AlreadyPlacedError(ConflictError):
    reason = "participant already placed"


class RootAlreadyExistsError(ConflictError):
    reason = "root already exists"


class ConcurrentUpdateError(ConflictError):
    reason = "concurrent update"


class LockTimeoutError(ConflictError):
    reason = "participant busy"


# Precondition failed

class PreconditionFailedError(NetworkCoreError):
    """Raised when an operation is attempted too early."""

    kind = ErrorKind.PRECONDITION_FAILED
    reason = "precondition failed"


class WindowNotClosedError(PreconditionFailedError):
    reason = "session window not closed"


# Exception categories based on handling strategy

# Reported to the caller as-is
RECOVERABLE = (
    NetworkCoreError,
)


def is_recoverable(exc: Exception) -> bool:
    """
    Check if exception is a local, recoverable condition.

    Args:
        exc: Exception to check

    Returns:
        True if the caller can present the error and continue
    """
    return isinstance(exc, RECOVERABLE)
