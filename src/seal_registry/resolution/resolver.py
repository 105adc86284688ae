"""Seal resolution.

Decision order, evaluated once per request:

1. Complete identifiers present -> exact lookup of the identifier chosen by
   the policy. A hit is an ExactMatch with the seal's full history; a miss
   is NoSealFound, which seeds a new seal on commit.
2. Otherwise partial identifiers present -> pattern lookup of the chosen
   identifier. Every candidate comes back as AmbiguousMatches, in store
   order, for the submitter to disambiguate.
3. Otherwise the observation is rejected with FormatRejected.

The collision guard runs before any of this, so a submitter cannot
register a duplicate by labelling it as new.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seal_registry.models.enums import IdentifierKind
from seal_registry.resolution.errors import FormatRejected
from seal_registry.resolution.guard import CollisionGuard
from seal_registry.resolution.identifiers import classify_identifiers, read_identifiers
from seal_registry.resolution.lookup import RegistryLookup
from seal_registry.resolution.outcomes import (
    AmbiguousMatches,
    ExactMatch,
    NoSealFound,
    ResolutionOutcome,
)
from seal_registry.resolution.policy import FirstIdentifierPolicy, IdentifierPolicy

if TYPE_CHECKING:
    from seal_registry.models import Seal
    from seal_registry.resolution.identifiers import ClassificationResult, Identifier
    from seal_registry.schemas import ObservationPayload
    from seal_registry.store.base import RegistryStore

logger = logging.getLogger(__name__)

NO_SEAL_MESSAGES = {
    IdentifierKind.TAG: "No seals with this tag number found.",
    IdentifierKind.MARK: "No seals with this mark found.",
}


class SealResolver:
    """Decide whether an observation refers to a known seal.

    Usage:
        async with async_session_factory() as session:
            resolver = SealResolver(SqlRegistryStore(session))
            outcome = await resolver.validate(payload)
    """

    def __init__(
        self,
        store: RegistryStore,
        *,
        policy: IdentifierPolicy | None = None,
    ) -> None:
        self._lookup = RegistryLookup(store)
        self._guard = CollisionGuard(self._lookup)
        self._policy = policy or FirstIdentifierPolicy()

    @property
    def lookup(self) -> RegistryLookup:
        return self._lookup

    @property
    def guard(self) -> CollisionGuard:
        return self._guard

    async def validate(self, payload: ObservationPayload) -> ResolutionOutcome:
        """Dry run: classify, guard, and resolve without writing anything.

        Raises:
            CollisionRejected: An identifier listed as new is already registered.
            FormatRejected: No complete or partial identifier could be read.
        """
        classification = classify_identifiers(payload)
        await self._guard.check(classification)
        return await self.resolve(classification)

    async def resolve(self, classification: ClassificationResult) -> ResolutionOutcome:
        if classification.has_complete:
            identifier = self._policy.select(
                classification.complete_tags, classification.complete_marks
            )
            if identifier is not None:
                return await self._resolve_exact(identifier)

        if classification.has_partial:
            identifier = self._policy.select(
                classification.partial_tags, classification.partial_marks
            )
            if identifier is not None:
                return await self._resolve_partial(identifier)

        logger.warning("Rejected observation: no usable mark or tag")
        raise FormatRejected()

    async def resolve_commit_anchor(self, payload: ObservationPayload) -> Seal | None:
        """Find the existing seal a committed observation should link to.

        Uses the raw entries rather than the classification: the policy's
        choice is looked up by exact value whether or not it was legible, and
        a miss means the observation anchors a new seal.
        """
        season = payload.season
        identifier = self._policy.select(
            read_identifiers(payload.tags, IdentifierKind.TAG, season),
            read_identifiers(payload.marks, IdentifierKind.MARK, season),
        )
        if identifier is None:
            return None
        return await self._lookup.exact(identifier)

    async def _resolve_exact(self, identifier: Identifier) -> ResolutionOutcome:
        seal = await self._lookup.exact(identifier)
        if seal is None:
            return NoSealFound(identifier=identifier, message=NO_SEAL_MESSAGES[identifier.kind])
        return ExactMatch(identifier=identifier, match=await self._lookup.history(seal))

    async def _resolve_partial(self, identifier: Identifier) -> AmbiguousMatches:
        seals = await self._lookup.partial(identifier)
        outcome = AmbiguousMatches(identifier=identifier)
        for seal in seals:
            outcome.matches.append(await self._lookup.history(seal))
        logger.debug(
            "Partial %s %r resolved to %d candidate seals",
            identifier.kind.value,
            identifier.value,
            len(outcome.matches),
        )
        return outcome
