"""
Storage Services Package

Provides the abstract interfaces and the concrete backends the host
uses to persist streaks, badges and the audit log.
"""

from journal_progress.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    ProgressStorageInterface,
    StorageError,
    StorageUnavailableError,
)
from journal_progress.services.storage.json_file import (
    JsonFileProgressStorage,
    JsonLinesAuditStorage,
)
from journal_progress.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryProgressStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ProgressStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageError",
    "StorageUnavailableError",
    # JSON file implementation
    "JsonFileProgressStorage",
    "JsonLinesAuditStorage",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryProgressStorage",
]
