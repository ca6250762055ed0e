"""
Repository layer for data access operations.
Provides entity-scoped database operations with transactional multi-row writes.
"""

from app.repositories.base import BaseRepository
from app.repositories.image import ImageRepository
from app.repositories.property import PropertyRepository
from app.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "ImageRepository",
    "PropertyRepository",
    "UserRepository"
]
