"""
Utility modules for the Property Catalog API.
"""

from .auth import (
    hash_password,
    verify_password,
    generate_random_password
)

from .exceptions import (
    APIException,
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ConflictError,
    BadRequestError,
    InvalidCredentialsError,
    InvalidTokenError,
    UserNotFoundError,
    PropertyNotFoundError,
    DuplicateResourceError,
    ServiceUnavailableError
)

# Dependencies are imported directly where needed to avoid circular imports

__all__ = [
    # Password utilities
    "hash_password",
    "verify_password",
    "generate_random_password",

    # Exceptions
    "APIException",
    "ValidationError",
    "NotFoundError",
    "UnauthorizedError",
    "ConflictError",
    "BadRequestError",
    "InvalidCredentialsError",
    "InvalidTokenError",
    "UserNotFoundError",
    "PropertyNotFoundError",
    "DuplicateResourceError",
    "ServiceUnavailableError",
]
