"""
Middleware package for the Property Catalog API.
Provides request tracking and timing.
"""

from .request_logging import RequestLoggingMiddleware

__all__ = [
    "RequestLoggingMiddleware"
]
