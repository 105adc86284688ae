"""Tag model for flipper tags."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base

if TYPE_CHECKING:
    from seal_registry.models.observation import Observation


class Tag(Base):
    """A flipper tag read on a seal during one observation.

    Tag numbers are globally unique and stay with the animal across seasons.
    """

    __tablename__ = "tags"

    tag_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), index=True
    )
    seal_id: Mapped[int] = mapped_column(ForeignKey("seals.seal_id"), index=True)
    number: Mapped[str] = mapped_column(String(32), index=True)
    position: Mapped[str | None] = mapped_column(String(64))
    color: Mapped[str | None] = mapped_column(String(32))
    is_new: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    observation: Mapped[Observation] = relationship(back_populates="tags")
