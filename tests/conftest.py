"""Shared pytest fixtures for SealRegistry tests."""

from __future__ import annotations

from collections.abc import AsyncGenerator, AsyncIterator, Callable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from seal_registry.models import Base, Observer, Seal
from seal_registry.schemas import ObservationPayload
from seal_registry.store.sql import SqlRegistryStore

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# In-memory database shared by every connection of one engine
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with all tables."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(test_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def sql_store(db_session: AsyncSession) -> SqlRegistryStore:
    return SqlRegistryStore(db_session)


# Type aliases for factory fixtures
MakePayload = Callable[..., ObservationPayload]


@pytest.fixture
def make_payload() -> MakePayload:
    """Factory fixture for observation payloads.

    Tags and marks may be given as bare numbers or as entry dicts.
    """

    def _entries(items: list[Any] | None) -> list[dict[str, Any]]:
        return [{"number": item} if isinstance(item, str) else item for item in items or []]

    def _make(
        *,
        tags: list[Any] | None = None,
        marks: list[Any] | None = None,
        date: str = "2020-05-01",
        **fields: Any,
    ) -> ObservationPayload:
        return ObservationPayload.model_validate(
            {"date": date, "tags": _entries(tags), "marks": _entries(marks), **fields}
        )

    return _make


class StubRegistryStore:
    """In-memory RegistryStore recording every lookup and write."""

    def __init__(self) -> None:
        self.exact_tags: dict[str, Seal] = {}
        self.exact_marks: dict[tuple[str, int], Seal] = {}
        self.partial_tags: dict[str, list[Seal]] = {}
        self.partial_marks: dict[tuple[str, int], list[Seal]] = {}
        self.histories: dict[int, list[Any]] = {}
        self.seals: dict[int, Seal] = {}
        self.observers: dict[str, Observer] = {}
        self.lookups: list[tuple[Any, ...]] = []
        self.writes: list[tuple[Any, ...]] = []
        self.committed = False
        self.rolled_back = False
        self._next_id = 100

    def add_seal(self, seal_id: int, *, history: list[Any] | None = None) -> Seal:
        seal = Seal(seal_id=seal_id)
        self.seals[seal_id] = seal
        self.histories[seal_id] = list(history or [f"obs-{seal_id}"])
        return seal

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        try:
            yield
        except BaseException:
            self.rolled_back = True
            raise
        self.committed = True

    async def lookup_exact_mark(self, value: str, season: int | None) -> Seal | None:
        self.lookups.append(("exact_mark", value, season))
        return self.exact_marks.get((value, season)) if season is not None else None

    async def lookup_exact_tag(self, value: str) -> Seal | None:
        self.lookups.append(("exact_tag", value))
        return self.exact_tags.get(value)

    async def lookup_partial_marks(self, fragment: str, season: int | None) -> list[Seal]:
        self.lookups.append(("partial_mark", fragment, season))
        return list(self.partial_marks.get((fragment, season), [])) if season is not None else []

    async def lookup_partial_tags(self, fragment: str) -> list[Seal]:
        self.lookups.append(("partial_tag", fragment))
        return list(self.partial_tags.get(fragment, []))

    async def lookup_seal_observation_history(self, seal_id: int) -> list[Any]:
        return list(self.histories.get(seal_id, []))

    async def get_seal(self, seal_id: int) -> Seal | None:
        return self.seals.get(seal_id)

    async def insert_observation(
        self, payload: ObservationPayload, submitter: str | None, *, observer_id: int | None = None
    ) -> int:
        self._next_id += 1
        self.writes.append(("observation", self._next_id, submitter, observer_id))
        return self._next_id

    async def create_seal(self, anchor_observation_id: int, sex: Any, procedure: str | None) -> None:
        self.writes.append(("seal", anchor_observation_id))
        self.add_seal(anchor_observation_id, history=[])

    async def link_observation_to_seal(self, observation_id: int, seal_id: int) -> None:
        self.writes.append(("link", observation_id, seal_id))
        self.histories.setdefault(seal_id, []).append(f"obs-{observation_id}")

    async def insert_measurement(self, observation_id: int, measurement: Any) -> None:
        self.writes.append(("measurement", observation_id))

    async def insert_pup_age(self, observation_id: int, age: int) -> None:
        self.writes.append(("pup_age", observation_id, age))

    async def insert_pup_count(self, observation_id: int, count: int) -> None:
        self.writes.append(("pup_count", observation_id, count))

    async def insert_marks(
        self, observation_id: int, marks: list[Any], season: int, seal_id: int
    ) -> None:
        self.writes.append(("marks", observation_id, season, seal_id))

    async def insert_tags(self, observation_id: int, tags: list[Any], seal_id: int) -> None:
        self.writes.append(("tags", observation_id, seal_id))

    async def find_observer(self, name: str) -> Observer | None:
        return self.observers.get(name)

    async def create_observer(self, name: str) -> Observer:
        self.writes.append(("observer", name))
        observer = Observer(observer_id=len(self.observers) + 1, name=name)
        self.observers[name] = observer
        return observer

    async def list_pending_observations(self, count: int, page: int) -> list[Any]:
        return []

    async def count_pending_observations(self) -> int:
        return 0

    async def approve_observation(self, observation_id: int) -> bool:
        return False

    def written_kinds(self) -> list[str]:
        return [write[0] for write in self.writes]


@pytest.fixture
def stub_store() -> StubRegistryStore:
    return StubRegistryStore()
