"""
Database models for the Property Catalog API.
Includes User, Property, and Image models with relationships.
"""

from app.models.user import User
from app.models.property import Property
from app.models.image import Image

# Export all models for easy importing
__all__ = [
    "User",
    "Property",
    "Image",
]
