"""Record store implementations for database access."""

from .record_store import RecordStore, TxState, FailurePolicy, is_concurrency_conflict

__all__ = [
    'RecordStore',
    'TxState',
    'FailurePolicy',
    'is_concurrency_conflict',
]
