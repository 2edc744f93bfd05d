"""
dbworker data-access layer

SQLite-friendly SQLAlchemy record stores with per-operation transactions,
optimistic concurrency and a uniform error channel, plus bulk loading of
delimited text files.
"""

from .config import DatabaseConfig
from .database import init_database
from .errors import (
    StoreErrorKind,
    StoreError,
    ConnectionInitError,
    ConcurrencyConflictError,
    GenericStoreError,
    BulkLoadError,
)
from .repositories import RecordStore, TxState, FailurePolicy

__all__ = [
    'DatabaseConfig',
    'init_database',
    'StoreErrorKind',
    'StoreError',
    'ConnectionInitError',
    'ConcurrencyConflictError',
    'GenericStoreError',
    'BulkLoadError',
    'RecordStore',
    'TxState',
    'FailurePolicy',
]
