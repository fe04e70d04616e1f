"""
Core utilities and configuration for the billboard inventory backend.

This package provides foundational components used by the import jobs and
the query API:

Modules:
    config: Application configuration and environment variable management
    database: Lazily created async engine and session management
    exceptions: Custom exception hierarchy for error handling
    logging: Logging configuration and utilities

Usage:
    from core.config import settings
    from core.database import get_session_maker
    from core.exceptions import InvalidRecordError, BatchInsertError
    from core.logging import setup_logging

Example:
    # Initialize logging
    setup_logging()

    # Get database session
    async with get_session_maker()() as session:
        # Perform database operations
        pass
"""

__all__ = [
    "settings",
    "get_session",
    "get_session_maker",
    "setup_logging",
    # Exceptions
    "ETLException",
    "ConfigurationError",
    "TransformationError",
    "InvalidRecordError",
    "LocationResolutionError",
    "LoadError",
    "DatabaseError",
    "BatchInsertError",
    "QueryValidationError",
]
