"""SQLAlchemy ORM models."""

from .base import Base
from .person import Person
from .locality import Locality
from .department import Department

__all__ = [
    'Base',
    'Person',
    'Locality',
    'Department',
]
