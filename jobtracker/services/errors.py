class ServiceError(Exception):
    """Base error for lifecycle operations."""


class InvalidTokenError(ServiceError):
    """Raised when a bearer token is malformed, tampered with or expired."""


class InvalidCredentialsError(ServiceError):
    """Raised when login fails; the message never says which part was wrong."""


class NotFoundError(ServiceError):
    """Raised when the referenced entity does not exist."""


class JobNotFoundError(NotFoundError):
    """Raised when a job is absent or no longer open for applications."""


class ForbiddenError(ServiceError):
    """Raised when the caller does not own the entity it tries to touch."""


class ConflictError(ServiceError):
    """Raised when a write would break a uniqueness rule."""


class DuplicateEmailError(ConflictError):
    pass


class AlreadyAppliedError(ConflictError):
    pass
