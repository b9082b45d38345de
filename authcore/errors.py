"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
VALIDATION_ERROR = "VALIDATION_ERROR"
MISSING_FIELD = "MISSING_FIELD"
INVALID_EMAIL = "INVALID_EMAIL"
INVALID_PHONE = "INVALID_PHONE"
PASSWORD_MISMATCH = "PASSWORD_MISMATCH"
EMAIL_TAKEN = "EMAIL_TAKEN"
INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
USER_NOT_FOUND = "USER_NOT_FOUND"
DEPENDENCY_ERROR = "DEPENDENCY_ERROR"
STORE_ERROR = "STORE_ERROR"
NOTIFY_FAILED = "NOTIFY_FAILED"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    code = VALIDATION_ERROR


class DomainValidationError(DomainError):
    """Raised when user-supplied input is malformed or incomplete."""

    code = VALIDATION_ERROR


class MissingFieldError(DomainValidationError):
    code = MISSING_FIELD


class InvalidEmailError(DomainValidationError):
    code = INVALID_EMAIL


class InvalidPhoneError(DomainValidationError):
    code = INVALID_PHONE


class PasswordMismatchError(DomainValidationError):
    code = PASSWORD_MISMATCH


class DuplicateResourceError(DomainError):
    """Raised when attempting to create a resource that would violate a uniqueness constraint."""

    code = EMAIL_TAKEN


class UnauthorizedError(DomainError):
    """Raised on bad credentials. The message never says which part was wrong."""

    code = INVALID_CREDENTIALS


class InvalidTokenError(DomainError):
    """Raised when a token is tampered, malformed, expired, or already consumed."""

    code = INVALID_OR_EXPIRED_TOKEN


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist."""

    code = USER_NOT_FOUND


class DependencyError(DomainError):
    """Raised when an external collaborator (store, mailer) fails."""

    code = DEPENDENCY_ERROR


class StoreError(DependencyError):
    code = STORE_ERROR


class NotificationError(DependencyError):
    code = NOTIFY_FAILED
