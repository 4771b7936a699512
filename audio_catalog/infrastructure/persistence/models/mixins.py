"""Shared columns for catalog tables: CUID primary key and server-side timestamps."""

from datetime import datetime

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column

from audio_catalog.shared.utils.generators import generate_cuid


class CatalogModel:
    """Columns every catalog table carries. id is a CUID generated client-side."""

    id: Mapped[str] = mapped_column(String, primary_key=True, default=generate_cuid)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
