"""
Image model for externally hosted property photos.
Only the URL is stored; the binary content lives elsewhere.
"""

from sqlalchemy import Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship
from app.database import Base
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.models.property import Property


class Image(Base):
    """
    Image model referencing a photo URL.
    Created and deleted only together with its owning property's image set.
    """

    __tablename__ = "images"

    url: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="URL of the externally hosted photo"
    )

    # RESTRICT: images must be removed before their property
    property_id: Mapped[int] = mapped_column(
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
        comment="ID of the property this image belongs to"
    )

    property_rel: Mapped["Property"] = relationship(
        "Property",
        back_populates="images",
    )

    def __repr__(self) -> str:
        """String representation of the image."""
        return f"<Image(id={self.id}, property_id={self.property_id}, url={self.url[:40]})>"
