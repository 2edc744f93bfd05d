"""Business layer sequencing store and loader calls."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..models.department import Department
from ..models.locality import Locality
from ..models.person import Person
from ..repositories.record_store import RecordStore, FailurePolicy
from .bulk_loader import BulkLoader
from .parsers import LocalityParser, DepartmentParser

logger = logging.getLogger(__name__)


class DbWorker:
    """Facade over one store per entity kind and one loader per file kind."""

    def __init__(
        self,
        profile: Optional[str] = None,
        failure_policy: Optional[FailurePolicy] = None
    ):
        self.person_store: RecordStore[Person, int] = RecordStore(
            Person, profile, order_by=("name", "first_name"), failure_policy=failure_policy
        )
        try:
            self.locality_store: RecordStore[Locality, int] = RecordStore(
                Locality, profile, failure_policy=failure_policy
            )
            self.department_store: RecordStore[Department, int] = RecordStore(
                Department, profile, failure_policy=failure_policy
            )
        except Exception:
            self.close()
            raise

        self.locality_loader = BulkLoader(LocalityParser("\t"))
        self.department_loader = BulkLoader(DepartmentParser(";"))

    def close(self) -> None:
        """Disconnect every store."""
        for store in self._stores():
            if store.is_connected():
                store.disconnect()

    def is_connected(self) -> bool:
        """Check if any store is still connected."""
        return any(store.is_connected() for store in self._stores())

    # Persons

    def list_persons(self) -> List[Person]:
        return self.person_store.list_all()

    def count_persons(self) -> int:
        return self.person_store.count()

    def add_person(self, person: Person) -> None:
        self.person_store.create(person)

    def read_person(self, person: Person) -> Optional[Person]:
        return self.person_store.read(person.id)

    def update_person(self, person: Person) -> Person:
        return self.person_store.update(person)

    def delete_person(self, person: Person) -> None:
        self.person_store.delete(person.id)

    def find_person_by_name(self, name: str) -> Person:
        return self.person_store.search("name", name)

    # Localities

    def list_localities(self) -> List[Locality]:
        return self.locality_store.list_all()

    def count_localities(self) -> int:
        return self.locality_store.count()

    def load_and_save_localities(self, path: Union[str, Path], encoding: str = "utf-8") -> int:
        """Load a tab-separated localities file and save it in one transaction.

        Returns:
            Number of saved localities, or -1 if the file held none
        """
        localities = self.locality_loader.load(path, encoding)
        return self._save_loaded(self.locality_store, localities)

    # Departments

    def list_departments(self) -> List[Department]:
        return self.department_store.list_all()

    def count_departments(self) -> int:
        return self.department_store.count()

    def load_and_save_departments(self, path: Union[str, Path], encoding: str = "utf-8") -> int:
        """Load a semicolon-separated departments file and save it in one transaction.

        Returns:
            Number of saved departments, or -1 if the file held none
        """
        departments = self.department_loader.load(path, encoding)
        return self._save_loaded(self.department_store, departments)

    def _save_loaded(self, store: RecordStore, entities: list) -> int:
        if not entities:
            logger.info("Nothing to save into %s store", store.entity_type)
            return -1
        return store.save_all(entities)

    def _stores(self) -> List[RecordStore]:
        return [
            store
            for store in (
                getattr(self, 'person_store', None),
                getattr(self, 'locality_store', None),
                getattr(self, 'department_store', None),
            )
            if store is not None
        ]
