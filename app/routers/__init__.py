"""
API route handlers for the Property Catalog API.
Provides organized routing for different API endpoints.
"""

from .users import router as users_router
from .properties import router as properties_router

__all__ = ["users_router", "properties_router"]
