"""Domain error taxonomy. Each error carries the HTTP status the API boundary answers with."""

from fastapi import status


class ServiceError(Exception):
    """Base for errors raised by the account and permission services."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request."


class InvalidOrExpiredTokenError(ServiceError):
    """Email verification token does not match or has expired."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid or expired token."


class UnauthorizedError(ServiceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated."


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden."


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflict."


class DuplicateEmailError(ConflictError):
    default_message = "Email already registered."


class InvalidRoleError(ValidationError):
    default_message = "Invalid role. Choose either Admin, Manager, or User."


class UnknownRoleError(ValidationError):
    default_message = "Unknown role."


class WeakPasswordError(ValidationError):
    default_message = "Password does not meet the password policy."


class AlreadyVerifiedError(ValidationError):
    default_message = "Email already verified."


class InvalidCredentialsError(UnauthorizedError):
    # Same message for unknown email and wrong password.
    default_message = "Invalid email or password."


class EmailNotVerifiedError(ForbiddenError):
    default_message = "Please verify your email before logging in."


class AccountNotFoundError(NotFoundError):
    default_message = "User not found."


class UnknownModuleError(NotFoundError):
    default_message = "Unknown module."
