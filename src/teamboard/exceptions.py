"""Exceptions raised by teamboard services."""


class TeamBoardError(Exception):
    """Base exception for teamboard errors."""

    pass


class ValidationError(TeamBoardError):
    """A required field was missing or blank.

    Raised before any state change, so the caller can surface the message
    and leave the store untouched.
    """

    def __init__(self, field: str, message: str | None = None) -> None:
        self.field = field
        super().__init__(message or f"{field.replace('_', ' ').capitalize()} is required")
