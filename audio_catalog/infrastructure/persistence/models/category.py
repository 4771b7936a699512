"""Category ORM model. Two-level hierarchy through a self-referential parent_id."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from audio_catalog.core.constants import DEFAULT_COLOR, DEFAULT_ICON
from audio_catalog.infrastructure.persistence.database import Base
from audio_catalog.infrastructure.persistence.models.mixins import CatalogModel


class Category(CatalogModel, Base):
    """Audio category. Table: categories.

    level 1 rows have no parent; level 2 rows point at a level 1 parent.
    Deleting a parent deletes its subcategories (ON DELETE CASCADE).
    """

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    color: Mapped[str | None] = mapped_column(String(7), nullable=True, default=DEFAULT_COLOR)
    icon: Mapped[str | None] = mapped_column(String(16), nullable=True, default=DEFAULT_ICON)
    parent_id: Mapped[str | None] = mapped_column(
        String, ForeignKey("categories.id", ondelete="CASCADE"), nullable=True, index=True
    )
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            "(level = 1 AND parent_id IS NULL) OR (level = 2 AND parent_id IS NOT NULL)",
            name="ck_categories_level_parent",
        ),
        Index("ix_categories_level_sort", "level", "sort_order"),
    )


# Sibling names are unique; COALESCE makes all primaries one sibling group.
Index(
    "uq_categories_name_parent",
    Category.name,
    func.coalesce(Category.parent_id, ""),
    unique=True,
)
