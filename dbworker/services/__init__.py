"""Services for loading files and sequencing store operations."""

from .parsers import LineParser, LocalityParser, DepartmentParser
from .bulk_loader import BulkLoader
from .db_worker import DbWorker

__all__ = [
    'LineParser',
    'LocalityParser',
    'DepartmentParser',
    'BulkLoader',
    'DbWorker',
]
