"""Person model."""

from datetime import date
from typing import Optional, Any, Dict

from sqlalchemy import String, Integer, Boolean, Date, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Person(Base):
    """A person, the name-bearing entity kind."""

    __tablename__ = 'persons'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    birth_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index('idx_persons_name', 'name'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert person to dictionary."""
        return {
            'id': self.id,
            'name': self.name,
            'first_name': self.first_name,
            'birth_date': self.birth_date.isoformat() if self.birth_date else None,
            'active': self.active,
            'version': self.version,
        }

    def __repr__(self) -> str:
        return f"Person(id={self.id!r}, name={self.name!r}, first_name={self.first_name!r})"
