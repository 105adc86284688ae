"""Persistence layer for the seal registry.

Submodules:
- base: RegistryStore protocol consumed by resolution and commit
- sql: SQLAlchemy async implementation
"""

from seal_registry.store.base import RegistryStore
from seal_registry.store.sql import SqlRegistryStore

__all__ = ["RegistryStore", "SqlRegistryStore"]
