"""
Error types for the Crewcharge SDK.
They are raised inside the SDK and turned into Result values at the public
functions, so callers can branch on `result.ok` instead of using try/except.
"""

from typing import Optional


class CrewchargeError(RuntimeError):
    """Base class for every error the SDK reports."""
    pass


class ValidationError(CrewchargeError):
    """Input does not match the recognized payload schema."""
    pass


class HashingError(CrewchargeError):
    """The digest engine failed or is unavailable."""
    pass


class TransportError(CrewchargeError):
    """Network failure, non-2xx response or an unencodable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
