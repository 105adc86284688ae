"""SealRegistry: seal sightings reconciled against a mark/tag registry."""

__version__ = "0.1.0"
