"""Mark model for season-scoped bleach marks."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base

if TYPE_CHECKING:
    from seal_registry.models.observation import Observation


class Mark(Base):
    """A mark read on a seal during one observation.

    Mark numbers are only unique within a season: the same number may be
    painted on a different animal the following year.
    """

    __tablename__ = "marks"

    mark_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), index=True
    )
    seal_id: Mapped[int] = mapped_column(ForeignKey("seals.seal_id"), index=True)
    number: Mapped[str] = mapped_column(String(32))
    season: Mapped[int] = mapped_column(Integer)
    position: Mapped[str | None] = mapped_column(String(64))
    is_new: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    observation: Mapped[Observation] = relationship(back_populates="marks")

    __table_args__ = (Index("ix_marks_number_season", "number", "season"),)
