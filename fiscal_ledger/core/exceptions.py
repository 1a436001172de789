"""Custom exception hierarchy."""

from typing import Optional


class AppError(Exception):
    """Base exception for application errors."""
    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.original_error = original_error


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class ValidationError(AppError):
    """Raised when input validation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class MigrationError(AppError):
    """Raised when a data migration run is aborted.

    An aborted dry run attaches the report gathered so far, including the
    failed record, as ``report``.
    """

    def __init__(
        self,
        message: str,
        original_error: Exception = None,
        report: Optional[object] = None,
    ):
        super().__init__(message, original_error=original_error)
        self.report = report


class BackfillError(MigrationError):
    """Raised when linking a transaction to its canonical entity fails.

    Only the company path raises this; the person paths log the failure
    and carry on.
    """

    def __init__(
        self,
        message: str,
        transaction_id: Optional[object] = None,
        entity_id: Optional[object] = None,
        original_error: Exception = None,
    ):
        super().__init__(message, original_error=original_error)
        self.transaction_id = transaction_id
        self.entity_id = entity_id
