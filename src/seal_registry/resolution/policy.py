"""Identifier selection policies.

A policy decides which single identifier of an observation drives
resolution. The resolver applies the same policy to complete identifiers,
to partial identifiers, and to the raw entries used to link a committed
observation to its seal.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from seal_registry.resolution.identifiers import Identifier


class IdentifierPolicy(Protocol):
    def select(
        self, tags: Sequence[Identifier], marks: Sequence[Identifier]
    ) -> Identifier | None:
        """Pick the identifier to resolve, or None if there is nothing to pick."""
        ...


class FirstIdentifierPolicy:
    """Resolve on the first tag, falling back to the first mark.

    Tags win over marks whenever both are present because tags are unique
    across seasons. Any identifiers after the first are ignored.
    """

    def select(
        self, tags: Sequence[Identifier], marks: Sequence[Identifier]
    ) -> Identifier | None:
        if tags:
            return tags[0]
        if marks:
            return marks[0]
        return None
