"""
Repository for Image model operations.
These operations never commit: they join the caller's transaction.
"""

from typing import List, Sequence
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.image import Image
from app.repositories.base import BaseRepository


class ImageRepository(BaseRepository[Image]):
    """Repository for Image database operations."""

    def __init__(self, db: AsyncSession):
        super().__init__(Image, db)

    async def list_by_property(self, property_id: int) -> List[Image]:
        """
        Get all images for a specific property.

        Args:
            property_id: ID of the property

        Returns:
            List of images in insertion order
        """
        query = select(Image).where(Image.property_id == property_id).order_by(Image.id)

        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def delete_by_property(self, property_id: int) -> int:
        """
        Delete all images for a property.

        Args:
            property_id: ID of the property

        Returns:
            Number of deleted images
        """
        # Per-object deletes keep the identity map consistent when ids are reused
        images = await self.list_by_property(property_id)
        for image in images:
            await self.db.delete(image)

        await self.db.flush()
        return len(images)

    async def add_for_property(self, property_id: int, urls: Sequence[str]) -> List[Image]:
        """
        Stage new image rows for a property.

        Args:
            property_id: ID of the property
            urls: Image URLs, stored as given

        Returns:
            The staged images (ids assigned after flush)
        """
        images = [Image(property_id=property_id, url=url) for url in urls]
        self.db.add_all(images)
        await self.db.flush()
        return images
