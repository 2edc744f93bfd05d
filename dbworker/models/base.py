"""Base model classes."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Every model maps an integer ``version`` column as its ``version_id_col``
    so that stale writes are rejected with ``StaleDataError``.
    """
    pass
