"""
Custom Exceptions for the Chances Calculator

Hierarchical exception classes for proper error handling across layers.
The scoring engine itself never raises for incomplete data.
"""

from typing import Optional, Dict, Any, List


class ChancesError(Exception):
    """Base exception for all Chances Calculator errors."""

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details
        }


class ValidationError(ChancesError):
    """Raised when request input validation fails."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, str]]] = None,
        original_error: Optional[Exception] = None
    ):
        details = {"errors": errors or []}
        super().__init__(message, details, original_error)


class DatabaseError(ChancesError):
    """Raised when database operations fail."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        table: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table
        super().__init__(message, details, original_error)


class UpstreamTimeoutError(ChancesError):
    """Raised when the input fetches exceed the request deadline."""

    def __init__(
        self,
        message: str = "Timed out loading admissions data",
        timeout_seconds: Optional[float] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if timeout_seconds is not None:
            details["timeout_seconds"] = timeout_seconds
        super().__init__(message, details, original_error)


class ConfigurationError(ChancesError):
    """Raised when configuration is missing or invalid."""

    def __init__(
        self,
        message: str,
        missing_keys: Optional[list] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if missing_keys:
            details["missing_keys"] = missing_keys
        super().__init__(message, details, original_error)
