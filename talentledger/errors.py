"""
Error taxonomy for TalentLedger.

All domain failures derive from TalentLedgerError and carry an error code
and the HTTP status the API layer should answer with.
"""

from typing import Optional


class TalentLedgerError(Exception):
    """Base exception for TalentLedger errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        status_code: int = 500,
        detail: Optional[str] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


class ValidationError(TalentLedgerError):
    """Malformed or out-of-range input. Nothing was written."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=400,
            detail=detail,
        )


class ConflictError(ValidationError):
    """A uniqueness constraint rejected the write."""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message, detail=detail)
        self.code = "CONFLICT"
        self.status_code = 409


class NotFoundError(TalentLedgerError):
    """
    Resource not found.

    Raised both for absent rows and for rows owned by someone else, with
    the same message.
    """

    def __init__(self, resource: str, identifier):
        super().__init__(
            message=f"{resource} not found",
            code="NOT_FOUND",
            status_code=404,
            detail=f"No {resource} with identifier '{identifier}' exists",
        )
        self.resource = resource
        self.identifier = identifier


class StorageError(TalentLedgerError):
    """Underlying database failure."""

    def __init__(self, message: str = "Storage failure", detail: Optional[str] = None):
        super().__init__(
            message=message,
            code="STORAGE_ERROR",
            status_code=500,
            detail=detail,
        )


class AuthenticationError(TalentLedgerError):
    """Missing, unknown or revoked session, or bad credentials."""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message=message,
            code="UNAUTHORIZED",
            status_code=401,
        )
