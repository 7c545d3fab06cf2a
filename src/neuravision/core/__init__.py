"""Core record storage, validation, and configuration.

Modules
-------
config
    Environment-driven settings (Pydantic Settings, ``NEURAVISION_`` prefix).
records
    Insert payload and stored record models for users, community images,
    and saved images.
storage
    The :class:`Storage` contract and the in-memory :class:`MemStorage`.
validation
    Pure payload validation, post-validation normalisation, and query
    parameter parsing.
"""

from neuravision.core.config import NeuravisionConfig, config
from neuravision.core.storage import NOT_FOUND, Found, MemStorage, NotFound, Storage

__all__ = [
    "NeuravisionConfig",
    "config",
    "Storage",
    "MemStorage",
    "Found",
    "NotFound",
    "NOT_FOUND",
]
