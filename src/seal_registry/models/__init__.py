"""Database models for SealRegistry."""

from seal_registry.models.base import Base
from seal_registry.models.enums import IdentifierCompleteness, IdentifierKind, Sex
from seal_registry.models.mark import Mark
from seal_registry.models.measurement import Measurement, PupAge, PupCount
from seal_registry.models.observation import Observation, SealObservation
from seal_registry.models.observer import Observer
from seal_registry.models.seal import Seal
from seal_registry.models.tag import Tag

__all__ = [
    "Base",
    "IdentifierCompleteness",
    "IdentifierKind",
    "Mark",
    "Measurement",
    "Observation",
    "Observer",
    "PupAge",
    "PupCount",
    "Seal",
    "SealObservation",
    "Sex",
    "Tag",
]
