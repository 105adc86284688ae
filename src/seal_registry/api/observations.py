"""Observation routes: dry-run resolution, commit, and the review queue."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from seal_registry.api.deps import CurrentSession, StoreDep, get_current_session
from seal_registry.config import settings
from seal_registry.resolution import (
    AmbiguousMatches,
    ExactMatch,
    ObservationCommitter,
    ResolutionOutcome,
    SealResolver,
)
from seal_registry.schemas import (
    CountRead,
    ErrorRead,
    ObservationPayload,
    ObservationRead,
    SealHistoryRead,
)

router = APIRouter(
    prefix="/observations",
    tags=["observations"],
    dependencies=[Depends(get_current_session)],
    responses={400: {"model": ErrorRead}},
)


def render_outcome(outcome: ResolutionOutcome) -> SealHistoryRead | list[SealHistoryRead] | str:
    """Shape a resolution outcome for the client.

    An exact match is a single seal history, an ambiguous match is a list of
    them, and an unregistered exact identifier is an informational message.
    """
    if isinstance(outcome, ExactMatch):
        return SealHistoryRead.model_validate(outcome.match)
    if isinstance(outcome, AmbiguousMatches):
        return [SealHistoryRead.model_validate(match) for match in outcome.matches]
    return outcome.message


@router.post("/validate")
async def validate_observation(
    payload: ObservationPayload,
    store: StoreDep,
) -> SealHistoryRead | list[SealHistoryRead] | str:
    """Resolve an observation against the registry without storing it."""
    outcome = await SealResolver(store).validate(payload)
    return render_outcome(outcome)


@router.post("")
async def submit_observation(
    payload: ObservationPayload,
    store: StoreDep,
    session: CurrentSession,
) -> SealHistoryRead:
    """Store an observation and return the history of the seal it belongs to."""
    result = await ObservationCommitter(store).submit(payload, submitter=session.username)
    return SealHistoryRead.model_validate(result.history)


@router.get("/pending")
async def list_pending(
    store: StoreDep,
    count: Annotated[int, Query(ge=1, le=500)] = settings.pending_page_size,
    page: Annotated[int, Query(ge=1)] = 1,
) -> list[ObservationRead]:
    """Observations awaiting approval, oldest first."""
    observations = await store.list_pending_observations(count, page)
    return [ObservationRead.model_validate(obs) for obs in observations]


@router.get("/pending/count")
async def pending_count(store: StoreDep) -> CountRead:
    return CountRead(count=await store.count_pending_observations())


@router.post("/{observation_id}/approve", status_code=status.HTTP_204_NO_CONTENT)
async def approve_observation(observation_id: int, store: StoreDep) -> Response:
    async with store.transaction():
        approved = await store.approve_observation(observation_id)
    if not approved:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Observation not found.")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
