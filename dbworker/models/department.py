"""Department model."""

from typing import Any, Dict

from sqlalchemy import String, Integer
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Department(Base):
    """An administrative department."""

    __tablename__ = 'departments'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    abbreviation: Mapped[str] = mapped_column(String(10), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    def to_dict(self) -> Dict[str, Any]:
        """Convert department to dictionary."""
        return {
            'id': self.id,
            'abbreviation': self.abbreviation,
            'name': self.name,
            'version': self.version,
        }

    def __repr__(self) -> str:
        return f"Department(id={self.id!r}, abbreviation={self.abbreviation!r})"
