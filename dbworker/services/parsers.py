"""Line parsers turning delimited text lines into entities."""

import logging
from typing import TypeVar, Generic, List, Optional

from ..models.department import Department
from ..models.locality import Locality

logger = logging.getLogger(__name__)

E = TypeVar('E')


class LineParser(Generic[E]):
    """Base parser for one delimited line per entity.

    Subclasses set ``field_count`` and implement ``build``. A line that does
    not yield an entity is skipped (``parse_line`` returns None) unless the
    parser is strict, in which case ``ValueError`` is raised.
    """

    field_count: int

    def __init__(self, separator: str, strict: bool = False):
        if not separator:
            raise ValueError("separator must not be empty")
        self.separator = separator
        self.strict = strict

    def parse_line(self, line: str) -> Optional[E]:
        """Parse a single line (without its line terminator)."""
        fields = [field.strip() for field in line.split(self.separator)]
        try:
            if len(fields) != self.field_count:
                raise ValueError(
                    f"expected {self.field_count} fields separated by {self.separator!r}, got {len(fields)}"
                )
            return self.build(fields)
        except ValueError:
            if self.strict:
                raise
            logger.debug("Skipping malformed line %r", line)
            return None

    def build(self, fields: List[str]) -> E:
        """Build an entity from the split fields. Raise ValueError if invalid."""
        raise NotImplementedError

    @staticmethod
    def _required(value: str, name: str) -> str:
        if not value:
            raise ValueError(f"{name} is empty")
        return value


class LocalityParser(LineParser[Locality]):
    """Parses ``zip_code<sep>name<sep>canton`` lines (tab-separated by default)."""

    field_count = 3

    def __init__(self, separator: str = "\t", strict: bool = False):
        super().__init__(separator, strict)

    def build(self, fields: List[str]) -> Locality:
        zip_code, name, canton = fields
        canton = self._required(canton, 'canton').upper()
        if len(canton) != 2:
            raise ValueError(f"canton must have 2 letters, got {canton!r}")
        return Locality(
            zip_code=int(zip_code),
            name=self._required(name, 'name'),
            canton=canton
        )


class DepartmentParser(LineParser[Department]):
    """Parses ``abbreviation<sep>name`` lines (semicolon-separated by default)."""

    field_count = 2

    def __init__(self, separator: str = ";", strict: bool = False):
        super().__init__(separator, strict)

    def build(self, fields: List[str]) -> Department:
        abbreviation, name = fields
        return Department(
            abbreviation=self._required(abbreviation, 'abbreviation'),
            name=self._required(name, 'name')
        )
