"""
Service layer for business logic implementation.
Contains services for authentication, property management, identity verification and error handling.
"""

from .auth import AuthService
from .property import PropertyService
from .identity import GoogleIdentityVerifier, ExternalIdentity
from .error_handler import ErrorHandlerService

__all__ = [
    "AuthService",
    "PropertyService",
    "GoogleIdentityVerifier",
    "ExternalIdentity",
    "ErrorHandlerService"
]
