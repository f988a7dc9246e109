"""
Error classification for the master-plan store.

Storage faults are absorbed inside the core and logged; payload errors are
raised at the collaborator boundary before a mutation ever reaches the store.
"""

from .storage_faults import (
    StorageFaultError,
    StorageQuotaError,
    CorruptBlobError,
    PersistenceError,
)
from .payload import (
    PayloadError,
    MissingFieldError,
    InvalidPayloadError,
    CoordinateBoundsError,
)

__all__ = [
    # Storage Faults
    "StorageFaultError",
    "StorageQuotaError",
    "CorruptBlobError",
    "PersistenceError",
    # Payload Errors
    "PayloadError",
    "MissingFieldError",
    "InvalidPayloadError",
    "CoordinateBoundsError",
]
