"""Domain exceptions raised by services and translated to HTTP responses in main."""

from typing import Optional

from fastapi import status


class SnapServeError(Exception):
    """Base class for errors that are returned to the caller."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "ERROR"
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, code: Optional[str] = None):
        self.message = message or self.default_message
        if code:
            self.code = code
        super().__init__(self.message)


class ValidationError(SnapServeError):
    code = "VALIDATION_ERROR"
    default_message = "Validation failed"


class DuplicateInvitationError(SnapServeError):
    code = "DUPLICATE_INVITATION"
    default_message = "An active invitation already exists for this email"


class DuplicateUserError(SnapServeError):
    code = "DUPLICATE_USER"
    default_message = "A user with this email already exists"


class InvalidTokenError(SnapServeError):
    code = "INVALID_TOKEN"
    default_message = "Invalid or expired token"


class InvalidStateError(SnapServeError):
    code = "INVALID_STATE"
    default_message = "Operation not allowed in the current state"


class NotFoundError(SnapServeError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    default_message = "Resource not found"


class AuthenticationError(SnapServeError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "INVALID_CREDENTIALS"
    default_message = "Invalid email or password"


class AccountStateError(SnapServeError):
    """Credentials are valid but the account may not log in yet."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCOUNT_INACTIVE"
    default_message = "Account is not active"


class StorageError(SnapServeError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "STORAGE_ERROR"
    default_message = "A storage error occurred"

    def __init__(self, message: Optional[str] = None, correlation_id: Optional[str] = None):
        super().__init__(message)
        self.correlation_id = correlation_id
