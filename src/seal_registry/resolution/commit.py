"""Observation commit.

Persists an observation and everything derived from it, then links it to
its seal. State progression:

    RECEIVED -> OBSERVER_RESOLVED -> PERSISTED -> SEAL_LINKED -> COMMITTED

REJECTED is reachable from any state before PERSISTED. Rejections happen
before the first write; once writing starts, every write runs inside one
store transaction and a failure rolls all of them back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from seal_registry.resolution.errors import MissingIdentifierRejected, ObservationRejected
from seal_registry.resolution.identifiers import classify_identifiers
from seal_registry.resolution.outcomes import SealMatch
from seal_registry.resolution.resolver import SealResolver

if TYPE_CHECKING:
    from seal_registry.resolution.policy import IdentifierPolicy
    from seal_registry.schemas import ObservationPayload
    from seal_registry.store.base import RegistryStore

logger = logging.getLogger(__name__)


class CommitState(str, Enum):
    """Where an observation commit is in its lifecycle."""

    RECEIVED = "received"
    OBSERVER_RESOLVED = "observer_resolved"
    PERSISTED = "persisted"
    SEAL_LINKED = "seal_linked"
    COMMITTED = "committed"
    REJECTED = "rejected"


@dataclass
class CommitResult:
    """Result of committing one observation."""

    observation_id: int
    seal_id: int
    seal_created: bool
    """True if this observation anchors a new seal."""

    history: SealMatch
    """The seal and its full observation history, including this observation."""

    states: list[CommitState] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]


class ObservationCommitter:
    """Commit observations to the registry.

    Usage:
        async with async_session_factory() as session:
            committer = ObservationCommitter(SqlRegistryStore(session))
            result = await committer.submit(payload, submitter="jdoe")
    """

    def __init__(
        self,
        store: RegistryStore,
        *,
        policy: IdentifierPolicy | None = None,
    ) -> None:
        self._store = store
        self._resolver = SealResolver(store, policy=policy)

    async def submit(self, payload: ObservationPayload, submitter: str | None) -> CommitResult:
        """Persist the observation and link it to an existing or new seal.

        Raises:
            MissingIdentifierRejected: The observation has no marks and no tags.
            CollisionRejected: An identifier listed as new is already registered.
        """
        states = [CommitState.RECEIVED]

        try:
            if not payload.tags and not payload.marks:
                raise MissingIdentifierRejected()
            await self._resolver.guard.check(classify_identifiers(payload))
        except ObservationRejected:
            states.append(CommitState.REJECTED)
            logger.warning("Observation by %s rejected before persistence", submitter)
            raise

        async with self._store.transaction():
            observer_id = await self._resolve_observer(payload.observer)
            states.append(CommitState.OBSERVER_RESOLVED)

            observation_id = await self._store.insert_observation(
                payload, submitter, observer_id=observer_id
            )
            states.append(CommitState.PERSISTED)

            seal = await self._resolver.resolve_commit_anchor(payload)
            if seal is None:
                await self._store.create_seal(observation_id, payload.sex, payload.procedure)
                seal_id = observation_id
                logger.info("Observation %d anchors new seal %d", observation_id, seal_id)
            else:
                seal_id = seal.seal_id
                logger.info("Observation %d resolved to seal %d", observation_id, seal_id)

            await self._insert_derived_facts(observation_id, payload, seal_id)
            states.append(CommitState.SEAL_LINKED)

            await self._store.link_observation_to_seal(observation_id, seal_id)
            sealed = seal or await self._store.get_seal(seal_id)
            if sealed is None:
                msg = f"Seal {seal_id} vanished during commit of observation {observation_id}"
                raise RuntimeError(msg)
            history = await self._resolver.lookup.history(sealed)
            states.append(CommitState.COMMITTED)

        return CommitResult(
            observation_id=observation_id,
            seal_id=seal_id,
            seal_created=seal is None,
            history=history,
            states=states,
        )

    async def _resolve_observer(self, name: str | None) -> int | None:
        """Find the named observer, registering them on first sight."""
        if not name:
            return None
        observer = await self._store.find_observer(name)
        if observer is None:
            observer = await self._store.create_observer(name)
        return observer.observer_id

    async def _insert_derived_facts(
        self, observation_id: int, payload: ObservationPayload, seal_id: int
    ) -> None:
        if payload.measurement is not None:
            await self._store.insert_measurement(observation_id, payload.measurement)
        if payload.pup_age is not None:
            await self._store.insert_pup_age(observation_id, payload.pup_age)
        if payload.pup_count is not None:
            await self._store.insert_pup_count(observation_id, payload.pup_count)
        if payload.marks:
            await self._store.insert_marks(observation_id, payload.marks, payload.season, seal_id)
        if payload.tags:
            await self._store.insert_tags(observation_id, payload.tags, seal_id)
