"""Seal model for resolved animals."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base
from seal_registry.models.enums import Sex

if TYPE_CHECKING:
    from seal_registry.models.observation import SealObservation


class Seal(Base):
    """An individual animal that observations link to.

    A seal's identity is the id of the observation that first established it
    (its first observation). Later observations reference the seal through
    SealObservation and never change that identity.
    """

    __tablename__ = "seals"

    seal_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), primary_key=True, autoincrement=False
    )
    sex: Mapped[Sex | None]
    procedure: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    observation_links: Mapped[list[SealObservation]] = relationship(back_populates="seal")

    @property
    def first_observation_id(self) -> int:
        return self.seal_id
