"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as a second open cash session."""


class InvalidStateError(DomainError):
    """Operation not allowed in the entity's current state."""


class PersistenceError(DomainError):
    """Underlying storage failure."""


def session_not_found(session_id: int) -> str:
    """Return message for missing cash session."""
    return f"Cash session {session_id} not found"


def session_not_open(session_id: int) -> str:
    """Return message for an operation on a closed cash session."""
    return f"Cash session {session_id} is not open"


def session_already_open(open_session_id: int | None = None) -> str:
    """Return message when a cash session is already open."""
    if open_session_id is None:
        return "There is already an open cash session"
    return f"There is already an open cash session (ID: {open_session_id})"


def payment_method_not_found(method: int | str) -> str:
    """Return message for missing payment method."""
    if isinstance(method, int):
        return f"Payment method ID {method} not found"
    return f"Payment method '{method}' not found"


def amount_must_be_positive(field: str) -> str:
    """Return message for a zero or negative amount."""
    return f"{field} must be greater than zero"


def amount_must_not_be_negative(field: str) -> str:
    """Return message for a negative amount."""
    return f"{field} cannot be negative"
