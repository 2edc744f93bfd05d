"""Bulk loader reading delimited text files into entity lists."""

import logging
from pathlib import Path
from typing import TypeVar, Generic, List, Union

from ..errors import BulkLoadError
from .parsers import LineParser

logger = logging.getLogger(__name__)

E = TypeVar('E')


class BulkLoader(Generic[E]):
    """Reads one entity per line through a configured parser.

    The loader never touches a store; callers hand the result to
    ``RecordStore.save_all``.
    """

    def __init__(self, parser: LineParser[E]):
        self.parser = parser

    def load(self, path: Union[str, Path], encoding: str = "utf-8") -> List[E]:
        """Read a text file into a list of entities.

        Args:
            path: File to read
            encoding: Text encoding of the file

        Returns:
            Entities in file order; blank and skipped lines produce nothing

        Raises:
            BulkLoadError: If the file cannot be read or decoded, or the parser
                rejects a line
        """
        path = Path(path)
        entities: List[E] = []

        try:
            with open(path, 'r', encoding=encoding, newline='') as f:
                for line_number, line in enumerate(f, start=1):
                    line = line.rstrip('\r\n')
                    if not line.strip():
                        continue
                    try:
                        entity = self.parser.parse_line(line)
                    except ValueError as e:
                        raise BulkLoadError(path, str(e), line_number) from e
                    if entity is not None:
                        entities.append(entity)
        except LookupError as e:
            raise BulkLoadError(path, f"Unknown encoding: {encoding}") from e
        except UnicodeDecodeError as e:
            raise BulkLoadError(path, f"Cannot decode as {encoding}: {e}") from e
        except OSError as e:
            raise BulkLoadError(path, f"Cannot read file: {e}") from e

        logger.info("Loaded %d entities from %s", len(entities), path)
        return entities
