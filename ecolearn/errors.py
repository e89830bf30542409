"""
Domain errors raised by logic and service layers.

Each error carries the HTTP status the API layer answers with, so routers
can let them propagate to the exception handlers registered in main.py.
"""
from fastapi import status


class EcoLearnError(Exception):
    """Base class for expected, user-facing failures"""
    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, **extra):
        super().__init__(message)
        self.message = message
        self.extra = extra


class ValidationError(EcoLearnError):
    """Missing or malformed input, or a precondition the caller can fix"""
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(EcoLearnError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(EcoLearnError):
    """Role or ownership mismatch"""
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(EcoLearnError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(EcoLearnError):
    """Duplicate or already-applied state transition"""
    status_code = status.HTTP_409_CONFLICT
