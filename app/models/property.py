"""
Property model for listings.
Handles listing data, coordinates, pricing, and the owned image set.
"""

from sqlalchemy import String, Text, Float, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from typing import List, TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.image import Image


class Property(Base):
    """
    Property model for a listing owned by a user.
    Exclusively owns its images: they are replaced or deleted with it.
    """

    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Property listing title"
    )

    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Detailed property description"
    )

    price: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        comment="Property price, non-negative"
    )

    latitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        server_default="0",
        comment="Property latitude coordinate"
    )

    longitude: Mapped[float] = mapped_column(
        Float,
        nullable=False,
        default=0.0,
        server_default="0",
        comment="Property longitude coordinate"
    )

    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="ID of the user who owns this property"
    )

    # Relationships
    owner: Mapped["User"] = relationship(
        "User",
        back_populates="properties",
    )

    images: Mapped[List["Image"]] = relationship(
        "Image",
        back_populates="property_rel",
        lazy="selectin",
        order_by="Image.id",
    )

    def __repr__(self) -> str:
        """String representation of the property."""
        return f"<Property(id={self.id}, title={self.title[:30]}, price={self.price})>"

    @property
    def image_urls(self) -> List[str]:
        """URLs of the current image set."""
        return [image.url for image in self.images]

    def validate_price(self) -> None:
        """
        Validate property price.

        Raises:
            ValueError: If price is negative
        """
        if self.price is None or self.price < 0:
            raise ValueError("Property price cannot be negative")
