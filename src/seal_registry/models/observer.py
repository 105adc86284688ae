"""Observer model for people recording sightings."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base

if TYPE_CHECKING:
    from seal_registry.models.observation import Observation


class Observer(Base):
    """A person named as the observer on one or more observations.

    Observers are registered implicitly the first time their name appears on a
    submitted observation.
    """

    __tablename__ = "observers"

    observer_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    observations: Mapped[list[Observation]] = relationship(back_populates="observer")
