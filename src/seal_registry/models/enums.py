"""Enumerations for SealRegistry data model."""

from enum import Enum


class Sex(str, Enum):
    """Recorded sex of the observed seal."""

    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class IdentifierKind(str, Enum):
    """Which registry an identifier belongs to.

    Marks are bleach/paint marks that are reapplied every season, so a mark
    number only identifies a seal within one season. Tags are flipper tags and
    are unique across all seasons.
    """

    TAG = "tag"
    MARK = "mark"

    @property
    def season_scoped(self) -> bool:
        return self is IdentifierKind.MARK


class IdentifierCompleteness(str, Enum):
    """How much of an identifier was legible."""

    COMPLETE = "complete"  # Fully legible, exact lookup
    PARTIAL = "partial"  # Contains wildcards, fuzzy lookup
