"""Audio ORM model: the category-related columns of the audios table."""

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from audio_catalog.infrastructure.persistence.database import Base
from audio_catalog.infrastructure.persistence.models.mixins import CatalogModel


class Audio(CatalogModel, Base):
    """Audio record. Table: audios.

    subject is the legacy free-text category. category_id / subcategory_id
    are set to NULL when the referenced category is deleted.
    """

    __tablename__ = "audios"

    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    subject: Mapped[str | None] = mapped_column(String(100), nullable=True)
    category_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
    subcategory_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("categories.id", ondelete="SET NULL"), nullable=True, index=True
    )
