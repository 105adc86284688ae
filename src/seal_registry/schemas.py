"""Pydantic schemas for observation payloads and API responses.

Incoming payloads are assumed to be pre-validated for presence and length
by the caller; these models only fix their shape. Response models read
directly from ORM rows (``from_attributes``).
"""

from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, ConfigDict, Field

from seal_registry.models.enums import Sex


class MarkEntry(BaseModel):
    """A mark as written down by the observer."""

    number: str = Field(description="Mark number; '*' and '?' stand in for illegible characters")
    is_new: bool = Field(default=False, alias="isNew", description="Observer applied this mark")
    position: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class TagEntry(BaseModel):
    """A flipper tag as written down by the observer."""

    number: str = Field(description="Tag number; '*' and '?' stand in for illegible characters")
    is_new: bool = Field(default=False, alias="isNew", description="Observer applied this tag")
    position: str | None = None
    color: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class MeasurementEntry(BaseModel):
    standard_length: float | None = Field(default=None, alias="standardLength")
    curvilinear_length: float | None = Field(default=None, alias="curvilinearLength")
    axillary_girth: float | None = Field(default=None, alias="axillaryGirth")
    mass: float | None = None
    tare: float | None = None

    model_config = ConfigDict(populate_by_name=True)


class ObservationPayload(BaseModel):
    """A submitted sighting, before resolution."""

    date: dt.date
    observer: str | None = None
    sex: Sex | None = None
    procedure: str | None = None
    location: str | None = None
    comments: str | None = None
    measurement: MeasurementEntry | None = None
    pup_age: int | None = Field(default=None, alias="pupAge")
    pup_count: int | None = Field(default=None, alias="pupCount")
    marks: list[MarkEntry] = Field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    tags: list[TagEntry] = Field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    model_config = ConfigDict(populate_by_name=True)

    @property
    def season(self) -> int:
        """Marks are reapplied yearly, so the season is the calendar year."""
        return self.date.year


# ── Responses ────────────────────────────────────────────────────────────────


class MarkRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: str
    season: int
    position: str | None
    is_new: bool


class TagRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    number: str
    position: str | None
    color: str | None
    is_new: bool


class MeasurementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    standard_length: float | None
    curvilinear_length: float | None
    axillary_girth: float | None
    mass: float | None
    tare: float | None


class ObservationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    observation_id: int
    observed_on: dt.date
    season: int
    sex: Sex | None
    procedure: str | None
    location: str | None
    comments: str | None
    submitted_by: str | None
    is_approved: bool
    marks: list[MarkRead]
    tags: list[TagRead]
    measurement: MeasurementRead | None


class SealRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    seal_id: int
    sex: Sex | None
    procedure: str | None


class SealHistoryRead(BaseModel):
    """A seal together with every observation linked to it."""

    model_config = ConfigDict(from_attributes=True)

    seal: SealRead
    observations: list[ObservationRead]


class CountRead(BaseModel):
    count: int


class ErrorRead(BaseModel):
    errors: list[str]


class SessionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    username: str
    created_at: dt.datetime
    last_seen: dt.datetime


class LoginPayload(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)
