"""Domain errors raised by the service layer and mapped to HTTP by routes."""
from __future__ import annotations


class PraxisError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(PraxisError):
    status_code = 404


class OwnershipError(PraxisError):
    status_code = 403


class PlanAlreadyExistsError(PraxisError):
    status_code = 409


class InvalidTaskListError(PraxisError):
    status_code = 422


class NoActivePlanError(PraxisError):
    status_code = 404


class ConfirmationRequiredError(PraxisError):
    status_code = 409


class SystemPromptMissingError(PraxisError):
    status_code = 503


class ChatCompletionError(PraxisError):
    status_code = 502
