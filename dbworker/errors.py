"""Error types raised by record stores and bulk loaders."""

from enum import Enum
from pathlib import Path
from typing import Optional, Union


class StoreErrorKind(Enum):
    """Closed set of store failure kinds."""

    CONNECTION_INIT = "connection_init"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    GENERIC = "generic"


class StoreError(Exception):
    """Wrapped store failure carrying the failing operation and its cause message."""

    kind = StoreErrorKind.GENERIC

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class ConnectionInitError(StoreError):
    """The backing connection could not be established. The store is unusable."""

    kind = StoreErrorKind.CONNECTION_INIT


class ConcurrencyConflictError(StoreError):
    """The record changed since it was last read. Re-read and retry."""

    kind = StoreErrorKind.CONCURRENCY_CONFLICT


class GenericStoreError(StoreError):
    """Any other backing-store fault."""

    kind = StoreErrorKind.GENERIC


class BulkLoadError(Exception):
    """A delimited text file could not be turned into entities."""

    def __init__(
        self,
        path: Union[str, Path],
        message: str,
        line_number: Optional[int] = None
    ):
        location = f"{path}:{line_number}" if line_number is not None else str(path)
        super().__init__(f"{location}: {message}")
        self.path = Path(path)
        self.line_number = line_number
        self.message = message
