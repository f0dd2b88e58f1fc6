"""
Custom exceptions module.

Setup errors abort a run; page and record errors are logged and skipped.
"""

from exceptions.errors import (
    # Base exceptions
    AppError,
    NotFoundError,
    ValidationError,
    ExternalServiceError,
    DatabaseError,

    # Setup
    ConfigurationError,
    MissingCredentialsError,
    SourceFileNotFoundError,
    SpreadsheetParseError,

    # Pages
    PageFetchError,
    PageParseError,

    # Perfumes
    PerfumeNotFoundError,
)

__all__ = [
    # Base
    "AppError",
    "NotFoundError",
    "ValidationError",
    "ExternalServiceError",
    "DatabaseError",

    # Setup
    "ConfigurationError",
    "MissingCredentialsError",
    "SourceFileNotFoundError",
    "SpreadsheetParseError",

    # Pages
    "PageFetchError",
    "PageParseError",

    # Perfumes
    "PerfumeNotFoundError",
]
