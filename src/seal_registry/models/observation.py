"""Observation model for individual seal sightings."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base
from seal_registry.models.enums import Sex

if TYPE_CHECKING:
    from seal_registry.models.mark import Mark
    from seal_registry.models.measurement import Measurement, PupAge, PupCount
    from seal_registry.models.observer import Observer
    from seal_registry.models.seal import Seal
    from seal_registry.models.tag import Tag


class Observation(Base):
    """A single sighting of a seal.

    Observations are immutable once committed. Only their seal linkage and the
    approval flag change afterwards. The season of an observation is the
    calendar year of its date and scopes every mark recorded on it.
    """

    __tablename__ = "observations"

    observation_id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    observer_id: Mapped[int | None] = mapped_column(
        ForeignKey("observers.observer_id"), index=True
    )
    submitted_by: Mapped[str | None] = mapped_column(String(255))
    observed_on: Mapped[date] = mapped_column("date", Date, index=True)
    season: Mapped[int] = mapped_column(Integer, index=True)
    sex: Mapped[Sex | None]
    procedure: Mapped[str | None] = mapped_column(String(255))
    location: Mapped[str | None] = mapped_column(String(255))
    comments: Mapped[str | None] = mapped_column(Text)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    observer: Mapped[Observer | None] = relationship(back_populates="observations")
    marks: Mapped[list[Mark]] = relationship(back_populates="observation", order_by="Mark.mark_id")
    tags: Mapped[list[Tag]] = relationship(back_populates="observation", order_by="Tag.tag_id")
    measurement: Mapped[Measurement | None] = relationship(back_populates="observation")
    pup_age: Mapped[PupAge | None] = relationship(back_populates="observation")
    pup_count: Mapped[PupCount | None] = relationship(back_populates="observation")
    seal_link: Mapped[SealObservation | None] = relationship(back_populates="observation")


class SealObservation(Base):
    """Association between an Observation and the Seal it was resolved to.

    Each observation links to exactly one seal. A seal's first observation
    links to the seal it anchors.
    """

    __tablename__ = "seal_observations"

    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), primary_key=True
    )
    seal_id: Mapped[int] = mapped_column(ForeignKey("seals.seal_id"), index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    observation: Mapped[Observation] = relationship(back_populates="seal_link")
    seal: Mapped[Seal] = relationship(back_populates="observation_links")
