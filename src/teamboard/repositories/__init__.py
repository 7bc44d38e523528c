"""Repository layer for data access."""

from .local import LocalStateFile
from .memory import InMemoryRecordStore
from .protocol import TABLES, Record, RecordStoreProtocol
from .rest import (
    RecordStoreAuthError,
    RecordStoreError,
    RecordStoreNotFoundError,
    RestRecordStore,
)

__all__ = [
    "TABLES",
    "InMemoryRecordStore",
    "LocalStateFile",
    "Record",
    "RecordStoreAuthError",
    "RecordStoreError",
    "RecordStoreNotFoundError",
    "RecordStoreProtocol",
    "RestRecordStore",
]
