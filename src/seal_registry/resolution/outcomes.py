"""Resolution outcomes returned by the seal resolver.

Outcomes are computed per request and never persisted.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from seal_registry.models import Observation, Seal
    from seal_registry.resolution.identifiers import Identifier


@dataclass
class SealMatch:
    """A seal together with its observation history, oldest first."""

    seal: Seal
    observations: list[Observation]


@dataclass
class ExactMatch:
    """A complete identifier resolved to exactly one registered seal."""

    identifier: Identifier
    match: SealMatch

    @property
    def seal(self) -> Seal:
        return self.match.seal

    @property
    def observations(self) -> list[Observation]:
        return self.match.observations


@dataclass
class NoSealFound:
    """A complete identifier that nothing in the registry carries.

    Not a rejection: committing this observation seeds a new seal.
    """

    identifier: Identifier
    message: str


@dataclass
class AmbiguousMatches:
    """Every seal consistent with a partial identifier, in store order."""

    identifier: Identifier
    matches: list[SealMatch] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]


ResolutionOutcome = ExactMatch | NoSealFound | AmbiguousMatches
