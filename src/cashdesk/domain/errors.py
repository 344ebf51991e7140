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
    """Domain conflict, such as a second open session."""


class DependencyError(DomainError):
    """Operation blocked due to protected or dependent domain data."""


def channel_not_found(channel: str) -> str:
    """Return message for missing channel by ID or name."""
    return f"Channel '{channel}' not found"


def inactive_channel(name: str) -> str:
    """Return message for an operation against an inactive or unknown channel."""
    return f"Channel '{name}' is not an active channel"


def duplicate_channel_name(name: str) -> str:
    """Return message for a channel name already in use."""
    return f"Channel with name '{name}' already exists"


def default_channel_delete_blocked(channel_id: str) -> str:
    """Return message when deleting a pre-seeded channel."""
    return f"Cannot delete default channel '{channel_id}'. Deactivate it instead."


def session_not_found(session_id: int) -> str:
    """Return message for missing session."""
    return f"Session {session_id} not found"


def no_open_session(user_id: str) -> str:
    """Return message when a user has no open session."""
    return f"No open session for user '{user_id}'"


def session_already_open(user_id: str, session_id: int) -> str:
    """Return message when a user already has an open session."""
    return f"User '{user_id}' already has an open session ({session_id})"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def transaction_already_voided(transaction_id: int) -> str:
    """Return message for voiding twice."""
    return f"Transaction {transaction_id} is already voided"


def invalid_amount(field: str, value: str) -> str:
    """Return message for an amount that does not parse."""
    return f"Invalid {field}: '{value}'"
