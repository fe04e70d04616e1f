"""
Custom exceptions for the billboard import pipeline and query API.

Every exception carries a context dictionary so that failures can be
logged with enough detail to find the offending record, file or batch.

Exception Hierarchy:
    ETLException (base)
    ├── ConfigurationError          fatal, raised before any store work
    ├── TransformationError
    │   ├── InvalidRecordError      record skipped
    │   └── LocationResolutionError record skipped
    ├── LoadError
    │   ├── DatabaseError
    │   └── BatchInsertError        fatal, earlier batches stay committed
    └── QueryValidationError        HTTP 400
"""

from typing import Optional, Dict, Any
from datetime import datetime, timezone


class ETLException(Exception):
    """
    Base exception for all pipeline and API errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source, file, batch, ...)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.now(timezone.utc)

        self.context["error_timestamp"] = self.timestamp.isoformat()

        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


class ConfigurationError(ETLException):
    """
    Missing credentials, missing input file or an input file whose root
    has the wrong shape. Aborts a run before anything is deleted.

    Context should include:
        - setting or file_path
    """
    pass


# ============================================================================
# Record-level errors (the record is skipped, the run continues)
# ============================================================================

class TransformationError(ETLException):
    """Base exception for record-level failures."""
    pass


class InvalidRecordError(TransformationError):
    """
    A raw record cannot become a billboard row (no usable coordinates).

    Context should include:
        - source: Source tag
        - record_id: Identifier of the raw record, when it has one
        - reason: Short reason string
    """
    pass


class LocationResolutionError(TransformationError):
    """
    A city could not be created for a record for a reason other than a
    uniqueness conflict.

    Context should include:
        - state_id
        - city_name
    """
    pass


# ============================================================================
# Load errors (fatal for the run)
# ============================================================================

class LoadError(ETLException):
    """Base exception for data loading failures."""
    pass


class DatabaseError(LoadError):
    """
    Exception raised when a store operation other than a batch insert fails.

    Context should include:
        - operation: Type of database operation (SELECT, DELETE, INSERT)
        - table_name: Name of the table
    """
    pass


class BatchInsertError(LoadError):
    """
    A billboard batch failed to insert. Batches committed before it are
    not rolled back.

    Context should include:
        - source: Source tag
        - batch_number: 1-based index of the failing batch
        - batch_size: Rows in the failing batch
        - inserted_before_failure: Rows committed by earlier batches
    """
    pass


# ============================================================================
# API errors
# ============================================================================

class QueryValidationError(ETLException):
    """
    Invalid filter value on a read endpoint.

    Context should include:
        - parameter: Query parameter name
        - value: Rejected value
    """
    pass
