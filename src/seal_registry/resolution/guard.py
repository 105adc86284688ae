"""Collision guard for identifiers claimed as new."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from seal_registry.models.enums import IdentifierKind
from seal_registry.resolution.errors import CollisionRejected

if TYPE_CHECKING:
    from seal_registry.resolution.identifiers import ClassificationResult
    from seal_registry.resolution.lookup import RegistryLookup

logger = logging.getLogger(__name__)

COLLISION_MESSAGES = {
    IdentifierKind.TAG: "A tag that is listed as new already exists in the database.",
    IdentifierKind.MARK: "A mark that is listed as new already exists in the database.",
}


class CollisionGuard:
    """Reject observations that claim an already registered identifier as new.

    Complete tags are checked before complete marks, each in submission
    order, and the first violation wins so error messages are
    deterministic. Partial identifiers cannot collide and are not checked.
    """

    def __init__(self, lookup: RegistryLookup) -> None:
        self._lookup = lookup

    async def check(self, classification: ClassificationResult) -> None:
        """Raise CollisionRejected on the first new identifier already registered."""
        for identifier in [*classification.complete_tags, *classification.complete_marks]:
            if not identifier.is_new:
                continue
            if await self._lookup.exact(identifier) is None:
                continue
            logger.warning(
                "Rejected observation: %s %r (entry %d) is listed as new but already registered",
                identifier.kind.value,
                identifier.value,
                identifier.entry_index,
            )
            raise CollisionRejected(COLLISION_MESSAGES[identifier.kind])
