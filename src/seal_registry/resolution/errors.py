"""Rejections raised while resolving or committing an observation.

Every rejection carries a list of human-readable messages; the HTTP layer
returns them verbatim with status 400.
"""

from __future__ import annotations


class ObservationRejected(Exception):
    """Base class for observations the registry refuses to resolve or store."""

    default_message = "Observation rejected."

    def __init__(self, *messages: str) -> None:
        self.messages = list(messages) or [self.default_message]
        super().__init__("; ".join(self.messages))


class FormatRejected(ObservationRejected):
    """Neither a complete nor a partial identifier could be read."""

    default_message = "Bad mark or tag format."


class CollisionRejected(ObservationRejected):
    """An identifier claimed as new is already registered."""

    default_message = "An identifier that is listed as new already exists in the database."


class MissingIdentifierRejected(ObservationRejected):
    """A commit was attempted for an observation with no marks and no tags."""

    default_message = "Could not add seal to database. No marks or tags found in observation"
