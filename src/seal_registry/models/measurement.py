"""Per-observation measurement and pup facts."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Float, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from seal_registry.models.base import Base

if TYPE_CHECKING:
    from seal_registry.models.observation import Observation


class Measurement(Base):
    """Body measurements taken during an observation (lengths in cm, mass in kg)."""

    __tablename__ = "measurements"

    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), primary_key=True
    )
    standard_length: Mapped[float | None] = mapped_column(Float)
    curvilinear_length: Mapped[float | None] = mapped_column(Float)
    axillary_girth: Mapped[float | None] = mapped_column(Float)
    mass: Mapped[float | None] = mapped_column(Float)
    tare: Mapped[float | None] = mapped_column(Float)

    observation: Mapped[Observation] = relationship(back_populates="measurement")


class PupAge(Base):
    """Estimated age in days of the pup accompanying an observed female."""

    __tablename__ = "pup_ages"

    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), primary_key=True
    )
    age: Mapped[int] = mapped_column(Integer)

    observation: Mapped[Observation] = relationship(back_populates="pup_age")


class PupCount(Base):
    """Number of pups seen with an observed female."""

    __tablename__ = "pup_counts"

    observation_id: Mapped[int] = mapped_column(
        ForeignKey("observations.observation_id"), primary_key=True
    )
    count: Mapped[int] = mapped_column(Integer)

    observation: Mapped[Observation] = relationship(back_populates="pup_count")
