"""Identifier classification.

Splits the raw marks and tags of an observation into *complete* identifiers
(fully legible, looked up by exact value) and *partial* identifiers
(containing wildcards, looked up by pattern).

Wildcards:
- ``*`` any run of characters (including none)
- ``?`` exactly one character

Classification is an order-preserving filter. Each identifier remembers the
index of the raw entry it came from so callers can pair it back with that
entry (e.g. its ``is_new`` claim) even after unusable entries are dropped.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from seal_registry.models.enums import IdentifierCompleteness, IdentifierKind

if TYPE_CHECKING:
    from seal_registry.schemas import MarkEntry, ObservationPayload, TagEntry

WILDCARDS = frozenset("*?")

_COMPLETE_RE = re.compile(r"[A-Z0-9]+")
_PARTIAL_RE = re.compile(r"[A-Z0-9*?]*[A-Z0-9][A-Z0-9*?]*")


def normalize_identifier(number: str) -> str:
    """Normalize an identifier value as written on a field sheet.

    Examples:
        " t100 " -> "T100"
        "m9"     -> "M9"
    """
    return number.strip().upper()


def completeness_of(value: str) -> IdentifierCompleteness | None:
    """Return how legible a normalized identifier is, or None if unusable."""
    if _COMPLETE_RE.fullmatch(value):
        return IdentifierCompleteness.COMPLETE
    if _PARTIAL_RE.fullmatch(value) and WILDCARDS.intersection(value):
        return IdentifierCompleteness.PARTIAL
    return None


def to_like_pattern(fragment: str, escape: str = "\\") -> str:
    """Translate a wildcard fragment into a SQL LIKE pattern.

    Literal ``%``, ``_`` and the escape character are escaped first so only
    the identifier wildcards widen the match.

    Examples:
        "T2*"  -> "T2%"
        "M?4"  -> "M_4"
    """
    escaped = (
        fragment.replace(escape, escape * 2).replace("%", escape + "%").replace("_", escape + "_")
    )
    return escaped.replace("*", "%").replace("?", "_")


@dataclass(frozen=True)
class Identifier:
    """A mark or tag value, ready for registry lookup.

    Season is set for marks and None for tags, which are not season scoped.
    """

    kind: IdentifierKind
    value: str
    entry_index: int
    """Position of the raw entry this identifier was read from."""

    completeness: IdentifierCompleteness | None = None
    is_new: bool = False
    season: int | None = None

    @property
    def is_complete(self) -> bool:
        return self.completeness is IdentifierCompleteness.COMPLETE


@dataclass
class ClassificationResult:
    """Complete and partial identifiers of one observation, in submission order."""

    season: int
    complete_tags: list[Identifier] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    complete_marks: list[Identifier] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    partial_tags: list[Identifier] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]
    partial_marks: list[Identifier] = field(default_factory=list)  # pyright: ignore[reportUnknownVariableType]

    @property
    def has_complete(self) -> bool:
        return bool(self.complete_tags or self.complete_marks)

    @property
    def has_partial(self) -> bool:
        return bool(self.partial_tags or self.partial_marks)

    @property
    def is_empty(self) -> bool:
        return not (self.has_complete or self.has_partial)


def read_identifiers(
    entries: Sequence[MarkEntry | TagEntry],
    kind: IdentifierKind,
    season: int,
) -> list[Identifier]:
    """Read every raw entry as an identifier, usable or not, keeping order."""
    identifiers: list[Identifier] = []
    for index, entry in enumerate(entries):
        value = normalize_identifier(entry.number)
        identifiers.append(
            Identifier(
                kind=kind,
                value=value,
                entry_index=index,
                completeness=completeness_of(value),
                is_new=entry.is_new,
                season=season if kind.season_scoped else None,
            )
        )
    return identifiers


def classify_identifiers(payload: ObservationPayload) -> ClassificationResult:
    """Partition the payload's marks and tags into complete and partial sets.

    Entries that are neither (empty, punctuation, wildcards only) are
    dropped. An empty result is valid and means "no usable identifiers".
    """
    season = payload.season
    result = ClassificationResult(season=season)

    for ident in read_identifiers(payload.tags, IdentifierKind.TAG, season):
        if ident.completeness is IdentifierCompleteness.COMPLETE:
            result.complete_tags.append(ident)
        elif ident.completeness is IdentifierCompleteness.PARTIAL:
            result.partial_tags.append(ident)

    for ident in read_identifiers(payload.marks, IdentifierKind.MARK, season):
        if ident.completeness is IdentifierCompleteness.COMPLETE:
            result.complete_marks.append(ident)
        elif ident.completeness is IdentifierCompleteness.PARTIAL:
            result.partial_marks.append(ident)

    return result
