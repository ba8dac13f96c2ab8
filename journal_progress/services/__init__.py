"""Services package."""

from journal_progress.services.storage import (
    AuditStorageInterface,
    DuplicateError,
    InMemoryAuditStorage,
    InMemoryProgressStorage,
    JsonFileProgressStorage,
    JsonLinesAuditStorage,
    NotFoundError,
    ProgressStorageInterface,
    StorageError,
    StorageUnavailableError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAuditStorage",
    "InMemoryProgressStorage",
    "JsonFileProgressStorage",
    "JsonLinesAuditStorage",
    "NotFoundError",
    "ProgressStorageInterface",
    "StorageError",
    "StorageUnavailableError",
]
