"""Locality model."""

from typing import Any, Dict

from sqlalchemy import String, Integer, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base


class Locality(Base):
    """A locality identified by its postal code and canton."""

    __tablename__ = 'localities'

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    zip_code: Mapped[int] = mapped_column(Integer, nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    canton: Mapped[str] = mapped_column(String(2), nullable=False)

    version: Mapped[int] = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index('idx_localities_zip_code', 'zip_code'),
    )

    def to_dict(self) -> Dict[str, Any]:
        """Convert locality to dictionary."""
        return {
            'id': self.id,
            'zip_code': self.zip_code,
            'name': self.name,
            'canton': self.canton,
            'version': self.version,
        }

    def __repr__(self) -> str:
        return f"Locality(id={self.id!r}, zip_code={self.zip_code!r}, name={self.name!r})"
