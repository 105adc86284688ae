"""Store protocol consumed by the resolution and commit services.

Resolution never talks to the database directly. Everything it needs from
persistence goes through RegistryStore, so the same resolver runs against
the SQL store in production and simple stubs in tests.
"""

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractAsyncContextManager
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from seal_registry.models import Observation, Observer, Seal, Sex
    from seal_registry.schemas import MarkEntry, MeasurementEntry, ObservationPayload, TagEntry


class RegistryStore(Protocol):
    """Operations the registry needs from persistence.

    Lookups return seals in store order; callers must not re-sort them.
    Degenerate input (empty value, mark without season) yields None or an
    empty list, never an error.
    """

    def transaction(self) -> AbstractAsyncContextManager[None]:
        """Scope in which all writes commit together or not at all."""
        ...

    # ── Registry lookups ──────────────────────────────────────────────────

    async def lookup_exact_mark(self, value: str, season: int | None) -> Seal | None: ...

    async def lookup_exact_tag(self, value: str) -> Seal | None: ...

    async def lookup_partial_marks(self, fragment: str, season: int | None) -> list[Seal]: ...

    async def lookup_partial_tags(self, fragment: str) -> list[Seal]: ...

    async def lookup_seal_observation_history(self, seal_id: int) -> list[Observation]: ...

    async def get_seal(self, seal_id: int) -> Seal | None: ...

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert_observation(
        self,
        payload: ObservationPayload,
        submitter: str | None,
        *,
        observer_id: int | None = None,
    ) -> int: ...

    async def create_seal(
        self, anchor_observation_id: int, sex: Sex | None, procedure: str | None
    ) -> None: ...

    async def link_observation_to_seal(self, observation_id: int, seal_id: int) -> None: ...

    async def insert_measurement(self, observation_id: int, measurement: MeasurementEntry) -> None: ...

    async def insert_pup_age(self, observation_id: int, age: int) -> None: ...

    async def insert_pup_count(self, observation_id: int, count: int) -> None: ...

    async def insert_marks(
        self, observation_id: int, marks: Sequence[MarkEntry], season: int, seal_id: int
    ) -> None: ...

    async def insert_tags(self, observation_id: int, tags: Sequence[TagEntry], seal_id: int) -> None: ...

    # ── Observers ─────────────────────────────────────────────────────────

    async def find_observer(self, name: str) -> Observer | None: ...

    async def create_observer(self, name: str) -> Observer: ...

    # ── Review queue ──────────────────────────────────────────────────────

    async def list_pending_observations(self, count: int, page: int) -> list[Observation]: ...

    async def count_pending_observations(self) -> int: ...

    async def approve_observation(self, observation_id: int) -> bool: ...
