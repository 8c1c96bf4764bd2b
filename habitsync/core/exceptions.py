"""
Custom Exceptions - Application-specific error types
"""
from typing import Optional


class HabitSyncException(Exception):
    """Base exception for all habitsync errors"""

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.__class__.__name__)
        # Human-readable text from the server payload, if it sent one
        self.message = message


class ValidationError(HabitSyncException):
    """Raised when input is rejected, locally or by the server"""
    pass


class AuthError(HabitSyncException):
    """Raised when login or registration is refused (bad credentials, duplicate account)"""
    pass


class Unauthorized(HabitSyncException):
    """Raised when the bearer token is missing, expired or invalid (HTTP 401)"""
    pass


class NetworkError(HabitSyncException):
    """Raised on transport failures and malformed or unsuccessful responses"""
    pass
