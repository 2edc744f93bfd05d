"""Shared fixtures: a temporary SQLite database with the schema created."""

import pytest

from .database import init_database
from .models import Person, Locality, Department
from .repositories.record_store import RecordStore, FailurePolicy


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep tests independent of the caller's configuration."""
    for name in (
        "DBWORKER_DB_PATH",
        "DBWORKER_SQL_ECHO",
        "DBWORKER_FAILURE_POLICY",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture()
def db_url(tmp_path):
    url = f"sqlite:///{tmp_path / 'test.db'}"
    init_database(url)
    return url


@pytest.fixture()
def person_store(db_url):
    store = RecordStore(Person, db_url, order_by=("name", "first_name"))
    yield store
    if store.is_connected():
        store.disconnect()


@pytest.fixture()
def locality_store(db_url):
    store = RecordStore(Locality, db_url)
    yield store
    if store.is_connected():
        store.disconnect()


@pytest.fixture()
def department_store(db_url):
    store = RecordStore(Department, db_url)
    yield store
    if store.is_connected():
        store.disconnect()


@pytest.fixture()
def legacy_person_store(db_url):
    store = RecordStore(Person, db_url, failure_policy=FailurePolicy.LEGACY)
    yield store
    if store.is_connected():
        store.disconnect()
