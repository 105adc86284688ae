"""Seal resolution module for SealRegistry.

Submodules:
- identifiers: classify raw marks/tags into complete and partial identifiers
- lookup: resolve identifiers to candidate seals through the store
- guard: reject identifiers claimed as new that are already registered
- policy: choose which identifier drives resolution
- resolver: exact / ambiguous / new-seal decision
- commit: persist an observation and link it to its seal
"""

from seal_registry.resolution.commit import CommitResult, CommitState, ObservationCommitter
from seal_registry.resolution.errors import (
    CollisionRejected,
    FormatRejected,
    MissingIdentifierRejected,
    ObservationRejected,
)
from seal_registry.resolution.guard import CollisionGuard
from seal_registry.resolution.identifiers import (
    ClassificationResult,
    Identifier,
    classify_identifiers,
)
from seal_registry.resolution.lookup import RegistryLookup
from seal_registry.resolution.outcomes import (
    AmbiguousMatches,
    ExactMatch,
    NoSealFound,
    ResolutionOutcome,
    SealMatch,
)
from seal_registry.resolution.policy import FirstIdentifierPolicy, IdentifierPolicy
from seal_registry.resolution.resolver import SealResolver

__all__ = [
    "AmbiguousMatches",
    "ClassificationResult",
    "CollisionGuard",
    "CollisionRejected",
    "CommitResult",
    "CommitState",
    "ExactMatch",
    "FirstIdentifierPolicy",
    "FormatRejected",
    "Identifier",
    "IdentifierPolicy",
    "MissingIdentifierRejected",
    "NoSealFound",
    "ObservationCommitter",
    "ObservationRejected",
    "RegistryLookup",
    "ResolutionOutcome",
    "SealMatch",
    "SealResolver",
    "classify_identifiers",
]
