"""SQLAlchemy implementation of the registry store.

Every method runs on the AsyncSession handed in at construction. Writes are
flushed, not committed: ``transaction()`` commits on success and rolls back
everything since the last commit on failure, so an observation and all of
its derived facts land together.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from seal_registry.models import (
    Mark,
    Measurement,
    Observation,
    Observer,
    PupAge,
    PupCount,
    Seal,
    SealObservation,
    Sex,
    Tag,
)
from seal_registry.resolution.identifiers import normalize_identifier, to_like_pattern

if TYPE_CHECKING:
    from seal_registry.schemas import MarkEntry, MeasurementEntry, ObservationPayload, TagEntry

logger = logging.getLogger(__name__)

_LIKE_ESCAPE = "\\"


def _with_observation_facts(stmt: Select[tuple[Observation]]) -> Select[tuple[Observation]]:
    """Eager-load everything an observation response needs."""
    return stmt.options(
        selectinload(Observation.marks),
        selectinload(Observation.tags),
        selectinload(Observation.measurement),
        selectinload(Observation.pup_age),
        selectinload(Observation.pup_count),
        selectinload(Observation.observer),
    )


class SqlRegistryStore:
    """RegistryStore backed by a relational database.

    Usage:
        async with async_session_factory() as session:
            store = SqlRegistryStore(session)
            seal = await store.lookup_exact_tag("T100")
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
        except BaseException:
            await self._session.rollback()
            raise
        await self._session.commit()

    # ── Registry lookups ──────────────────────────────────────────────────

    async def lookup_exact_mark(self, value: str, season: int | None) -> Seal | None:
        if not value or season is None:
            return None
        stmt = (
            select(Seal)
            .join(Mark, Mark.seal_id == Seal.seal_id)
            .where(Mark.number == value, Mark.season == season)
            .order_by(Mark.mark_id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def lookup_exact_tag(self, value: str) -> Seal | None:
        if not value:
            return None
        stmt = (
            select(Seal)
            .join(Tag, Tag.seal_id == Seal.seal_id)
            .where(Tag.number == value)
            .order_by(Tag.tag_id)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        return result.scalars().first()

    async def lookup_partial_marks(self, fragment: str, season: int | None) -> list[Seal]:
        if not fragment or season is None:
            return []
        pattern = to_like_pattern(fragment, _LIKE_ESCAPE)
        matching = select(Mark.seal_id).where(
            Mark.number.like(pattern, escape=_LIKE_ESCAPE),
            Mark.season == season,
        )
        stmt = select(Seal).where(Seal.seal_id.in_(matching)).order_by(Seal.seal_id)
        result = await self._session.execute(stmt)
        seals = list(result.scalars().all())
        logger.debug("Partial mark %r (season %s) matched %d seals", fragment, season, len(seals))
        return seals

    async def lookup_partial_tags(self, fragment: str) -> list[Seal]:
        if not fragment:
            return []
        pattern = to_like_pattern(fragment, _LIKE_ESCAPE)
        matching = select(Tag.seal_id).where(Tag.number.like(pattern, escape=_LIKE_ESCAPE))
        stmt = select(Seal).where(Seal.seal_id.in_(matching)).order_by(Seal.seal_id)
        result = await self._session.execute(stmt)
        seals = list(result.scalars().all())
        logger.debug("Partial tag %r matched %d seals", fragment, len(seals))
        return seals

    async def lookup_seal_observation_history(self, seal_id: int) -> list[Observation]:
        stmt = _with_observation_facts(
            select(Observation)
            .join(SealObservation, SealObservation.observation_id == Observation.observation_id)
            .where(SealObservation.seal_id == seal_id)
            .order_by(Observation.observed_on, Observation.observation_id)
        ).execution_options(populate_existing=True)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_seal(self, seal_id: int) -> Seal | None:
        return await self._session.get(Seal, seal_id)

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert_observation(
        self,
        payload: ObservationPayload,
        submitter: str | None,
        *,
        observer_id: int | None = None,
    ) -> int:
        observation = Observation(
            observer_id=observer_id,
            submitted_by=submitter,
            observed_on=payload.date,
            season=payload.season,
            sex=payload.sex,
            procedure=payload.procedure,
            location=payload.location,
            comments=payload.comments,
            is_approved=False,
        )
        self._session.add(observation)
        await self._session.flush()
        return observation.observation_id

    async def create_seal(
        self, anchor_observation_id: int, sex: Sex | None, procedure: str | None
    ) -> None:
        self._session.add(Seal(seal_id=anchor_observation_id, sex=sex, procedure=procedure))
        await self._session.flush()

    async def link_observation_to_seal(self, observation_id: int, seal_id: int) -> None:
        self._session.add(SealObservation(observation_id=observation_id, seal_id=seal_id))
        await self._session.flush()

    async def insert_measurement(self, observation_id: int, measurement: MeasurementEntry) -> None:
        self._session.add(
            Measurement(
                observation_id=observation_id,
                standard_length=measurement.standard_length,
                curvilinear_length=measurement.curvilinear_length,
                axillary_girth=measurement.axillary_girth,
                mass=measurement.mass,
                tare=measurement.tare,
            )
        )
        await self._session.flush()

    async def insert_pup_age(self, observation_id: int, age: int) -> None:
        self._session.add(PupAge(observation_id=observation_id, age=age))
        await self._session.flush()

    async def insert_pup_count(self, observation_id: int, count: int) -> None:
        self._session.add(PupCount(observation_id=observation_id, count=count))
        await self._session.flush()

    async def insert_marks(
        self, observation_id: int, marks: Sequence[MarkEntry], season: int, seal_id: int
    ) -> None:
        self._session.add_all(
            Mark(
                observation_id=observation_id,
                seal_id=seal_id,
                number=normalize_identifier(mark.number),
                season=season,
                position=mark.position,
                is_new=mark.is_new,
            )
            for mark in marks
        )
        await self._session.flush()

    async def insert_tags(self, observation_id: int, tags: Sequence[TagEntry], seal_id: int) -> None:
        self._session.add_all(
            Tag(
                observation_id=observation_id,
                seal_id=seal_id,
                number=normalize_identifier(tag.number),
                position=tag.position,
                color=tag.color,
                is_new=tag.is_new,
            )
            for tag in tags
        )
        await self._session.flush()

    # ── Observers ─────────────────────────────────────────────────────────

    async def find_observer(self, name: str) -> Observer | None:
        stmt = select(Observer).where(Observer.name == name)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_observer(self, name: str) -> Observer:
        observer = Observer(name=name)
        self._session.add(observer)
        await self._session.flush()
        logger.info("Registered new observer %r", name)
        return observer

    # ── Review queue ──────────────────────────────────────────────────────

    async def list_pending_observations(self, count: int, page: int) -> list[Observation]:
        """Unapproved observations, oldest first. Pages start at 1."""
        if count <= 0:
            return []
        offset = max(page - 1, 0) * count
        stmt = _with_observation_facts(
            select(Observation)
            .where(Observation.is_approved.is_(False))
            .order_by(Observation.observation_id)
            .offset(offset)
            .limit(count)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_pending_observations(self) -> int:
        stmt = select(func.count()).select_from(Observation).where(Observation.is_approved.is_(False))
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def approve_observation(self, observation_id: int) -> bool:
        observation = await self._session.get(Observation, observation_id)
        if observation is None:
            return False
        observation.is_approved = True
        await self._session.flush()
        return True
