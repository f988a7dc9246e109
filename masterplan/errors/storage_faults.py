"""
Storage fault classifications for the persistence adapter.

None of these is fatal: reads fall back to defaults and writes leave the
store running in memory for the rest of the session.
"""

from typing import Optional, Dict, Any


class StorageFaultError(Exception):
    """Base class for key/value storage faults."""

    def __init__(self, message: str, key: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.key = key
        self.context = context or {}
        self.recoverable = True


class StorageQuotaError(StorageFaultError):
    """A value exceeds the per-value storage quota."""

    def __init__(self, message: str, size_bytes: Optional[int] = None,
                 max_bytes: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.size_bytes = size_bytes
        self.max_bytes = max_bytes


class CorruptBlobError(StorageFaultError):
    """A persisted blob exists but cannot be decoded."""

    def __init__(self, message: str, raw_data: Optional[str] = None,
                 expected_format: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_data = raw_data
        self.expected_format = expected_format


class PersistenceError(StorageFaultError):
    """Database or file system failure while reading or writing."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
