from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base for errors rendered as the JSON error envelope."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, *, details: Any = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ConfigurationError(AppError):
    """Server-side credentials or endpoints are missing."""

    status_code = 500
    code = "configuration_error"


class ValidationFailedError(AppError):
    status_code = 400
    code = "validation_error"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"


class SubmissionStatusError(AppError):
    """A status update was addressed to a submission type without a status workflow."""

    status_code = 400
    code = "submission_status_not_applicable"


class BackendError(AppError):
    """The hosted auth service rejected or failed a call; its status is passed through."""

    code = "backend_error"

    def __init__(self, message: str, *, status_code: int = 502, details: Any = None) -> None:
        super().__init__(message, details=details)
        self.status_code = status_code
