"""Registry lookup: resolve identifiers to candidate seals.

Tags and marks share one lookup capability keyed by identifier kind. Marks
are scoped by the identifier's season; tags ignore it.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seal_registry.models.enums import IdentifierKind
from seal_registry.resolution.outcomes import SealMatch

if TYPE_CHECKING:
    from seal_registry.models import Seal
    from seal_registry.resolution.identifiers import Identifier
    from seal_registry.store.base import RegistryStore

logger = logging.getLogger(__name__)


class RegistryLookup:
    """Dispatch identifier lookups to the store by kind."""

    def __init__(self, store: RegistryStore) -> None:
        self._store = store

    async def exact(self, identifier: Identifier) -> Seal | None:
        """Return the seal registered under this exact value, if any."""
        if identifier.kind is IdentifierKind.TAG:
            seal = await self._store.lookup_exact_tag(identifier.value)
        else:
            seal = await self._store.lookup_exact_mark(identifier.value, identifier.season)
        logger.debug(
            "Exact %s lookup %r (season %s): %s",
            identifier.kind.value,
            identifier.value,
            identifier.season,
            seal.seal_id if seal else "no seal",
        )
        return seal

    async def partial(self, identifier: Identifier) -> list[Seal]:
        """Return every seal whose identifiers fit the fragment, in store order."""
        if identifier.kind is IdentifierKind.TAG:
            return await self._store.lookup_partial_tags(identifier.value)
        return await self._store.lookup_partial_marks(identifier.value, identifier.season)

    async def history(self, seal: Seal) -> SealMatch:
        observations = await self._store.lookup_seal_observation_history(seal.seal_id)
        return SealMatch(seal=seal, observations=observations)
