"""Generic transactional record store bound to one entity type."""

import logging
from contextlib import contextmanager
from enum import Enum
from typing import TypeVar, Generic, List, Optional, Type, Any, Iterable, Iterator, Sequence, Tuple

from sqlalchemy import select, delete, func, inspect as sa_inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..config import DatabaseConfig
from ..database import create_store_engine, create_store_session
from ..errors import (
    StoreError,
    ConnectionInitError,
    ConcurrencyConflictError,
    GenericStoreError,
)
from ..models.base import Base

logger = logging.getLogger(__name__)

E = TypeVar('E', bound=Base)
PK = TypeVar('PK')


class TxState(Enum):
    """Transaction state of a store."""

    IDLE = "idle"
    ACTIVE = "active"


class FailurePolicy(Enum):
    """How create() and clear_all() report failures.

    PROPAGATE raises like every other operation. LEGACY rolls back, logs and
    returns a default result, matching the behaviour of the system this
    layer replaces.
    """

    PROPAGATE = "propagate"
    LEGACY = "legacy"

    @classmethod
    def from_config(cls) -> "FailurePolicy":
        """Get the policy configured in the environment."""
        name = DatabaseConfig.get_failure_policy_name()
        try:
            return cls(name)
        except ValueError:
            allowed = ", ".join(policy.value for policy in cls)
            raise ValueError(
                f"Invalid DBWORKER_FAILURE_POLICY '{name}' (expected one of: {allowed})"
            ) from None


def is_concurrency_conflict(exc: BaseException) -> bool:
    """Check whether a StaleDataError is the exception or anywhere in its chain."""
    seen = set()
    pending: List[Optional[BaseException]] = [exc]
    while pending:
        current = pending.pop()
        if current is None or id(current) in seen:
            continue
        seen.add(id(current))
        if isinstance(current, (StaleDataError, ConcurrencyConflictError)):
            return True
        pending.append(current.__cause__)
        pending.append(current.__context__)
    return False


class RecordStore(Generic[E, PK]):
    """Transactional CRUD, count, search and list over a single entity type.

    Each store owns one engine and one session. Every mutating call runs in
    its own transaction, which is committed or rolled back before the call
    returns. Entities handed back to callers are detached from the session.

    Not thread-safe: confine a store to one worker.
    """

    def __init__(
        self,
        model_class: Type[E],
        profile: Optional[str] = None,
        order_by: Optional[Sequence[str]] = None,
        failure_policy: Optional[FailurePolicy] = None
    ):
        """Bind the store to an entity type and open its connection.

        Args:
            model_class: Mapped entity class the store works on
            profile: Connection profile name or database URL (default profile if None)
            order_by: Property names list_all() sorts by (primary key order if None)
            failure_policy: Failure policy (from configuration if None)

        Raises:
            ConnectionInitError: If the connection cannot be established
            ValueError: If order_by names an unmapped property
        """
        self.model_class = model_class
        self.entity_type = model_class.__name__
        self.failure_policy = failure_policy or FailurePolicy.from_config()
        self._order_by = self._resolve_order_by(order_by)
        self._tx_state = TxState.IDLE
        self._engine: Optional[Engine] = None
        self._session: Optional[Session] = None

        operation = self._operation("connect")
        try:
            db_url = DatabaseConfig.get_db_url(profile)
            self._engine = create_store_engine(db_url)
            with self._engine.connect():
                pass
            self._session = create_store_session(self._engine)
        except (KeyError, ImportError, SQLAlchemyError) as exc:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
            raise ConnectionInitError(operation, str(exc)) from exc

        logger.info("Opened %s store on %s", self.entity_type, self._engine.url)

    def __enter__(self) -> "RecordStore[E, PK]":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if self.is_connected():
            self.disconnect()

    @property
    def tx_state(self) -> TxState:
        """Current transaction state."""
        return self._tx_state

    # ------------------------------------------------------------------
    # Mutating operations
    # ------------------------------------------------------------------

    def create(self, entity: E) -> None:
        """Persist a new entity in its own transaction.

        The generated primary key is set on ``entity`` once committed. Entities
        that are already persistent (e.g. returned by ``read``) are rejected.
        """
        operation = self._operation("create")
        try:
            if sa_inspect(entity).key is not None:
                raise GenericStoreError(operation, f"{entity!r} is already persistent")
            with self._transaction(operation) as session:
                session.add(entity)
        except (SQLAlchemyError, StoreError) as exc:
            self._fail(operation, exc, swallowable=True)

    def update(self, entity: E) -> E:
        """Merge an entity into the store in its own transaction.

        Returns:
            The merged entity carrying the new version

        Raises:
            ConcurrencyConflictError: If the stored version differs from the entity's,
                or the record was deleted since the entity was read
            GenericStoreError: On any other failure
        """
        operation = self._operation("update")
        try:
            with self._transaction(operation) as session:
                if self._was_deleted(session, entity):
                    raise ConcurrencyConflictError(
                        operation, f"{self.entity_type} {entity!r} was deleted by another writer"
                    )
                merged = session.merge(entity)
            return merged
        except (SQLAlchemyError, StoreError) as exc:
            self._fail(operation, exc)

    def delete(self, pk: PK) -> None:
        """Delete the entity with the given primary key; no-op if absent."""
        entity = self.read(pk)
        if entity is None:
            logger.debug("%s %r not found, nothing to delete", self.entity_type, pk)
            return

        operation = self._operation("delete")
        try:
            with self._transaction(operation) as session:
                session.delete(entity)
        except (SQLAlchemyError, StoreError) as exc:
            self._fail(operation, exc)

    def clear_all(self) -> int:
        """Delete every record of the entity type in one transaction.

        Returns:
            Number of records removed
        """
        operation = self._operation("clear_all")
        removed = 0
        try:
            with self._transaction(operation) as session:
                result = session.execute(delete(self.model_class))
                removed = result.rowcount
        except (SQLAlchemyError, StoreError) as exc:
            self._fail(operation, exc, swallowable=True)
            return 0

        logger.info("Removed %d %s record(s)", removed, self.entity_type)
        return removed

    def save_all(self, entities: Iterable[E]) -> int:
        """Persist a batch of new entities in one all-or-nothing transaction.

        Returns:
            Number of entities saved
        """
        operation = self._operation("save_all")
        batch = list(entities)
        try:
            with self._transaction(operation) as session:
                session.add_all(batch)
        except (SQLAlchemyError, StoreError) as exc:
            self._fail(operation, exc)

        logger.info("Saved %d %s record(s)", len(batch), self.entity_type)
        return len(batch)

    # ------------------------------------------------------------------
    # Read-only operations
    # ------------------------------------------------------------------

    def read(self, pk: PK) -> Optional[E]:
        """Fetch an entity by primary key, refreshed from the store, or None."""
        operation = self._operation("read")
        try:
            with self._read_scope(operation) as session:
                entity = session.get(self.model_class, pk)
                if entity is not None:
                    session.refresh(entity)
                return entity
        except SQLAlchemyError as exc:
            raise GenericStoreError(operation, str(exc)) from exc

    def count(self) -> int:
        """Count all records of the entity type."""
        operation = self._operation("count")
        query = select(func.count()).select_from(self.model_class)
        try:
            with self._read_scope(operation) as session:
                return session.execute(query).scalar_one()
        except SQLAlchemyError as exc:
            raise GenericStoreError(operation, str(exc)) from exc

    def search(self, prop: str, value: Any) -> E:
        """Get the single entity whose property equals value.

        Raises:
            GenericStoreError: If the property is not mapped, or if no entity or
                more than one entity matches
        """
        operation = self._operation("search")
        column = self._column(operation, prop)
        query = select(self.model_class).where(column == value)
        try:
            with self._read_scope(operation) as session:
                return session.execute(query).scalar_one()
        except SQLAlchemyError as exc:
            raise GenericStoreError(operation, str(exc)) from exc

    def list_all(self) -> List[E]:
        """Get all records of the entity type in the store's ordering."""
        operation = self._operation("list_all")
        query = select(self.model_class).order_by(*self._order_by)
        try:
            with self._read_scope(operation) as session:
                return list(session.execute(query).scalars().all())
        except SQLAlchemyError as exc:
            raise GenericStoreError(operation, str(exc)) from exc

    # ------------------------------------------------------------------
    # Connection lifecycle
    # ------------------------------------------------------------------

    def disconnect(self) -> None:
        """Close the session and the engine. The store cannot be reopened."""
        if self._session is not None:
            self._session.close()
        if self._engine is not None:
            self._engine.dispose()
        self._session = None
        self._engine = None
        self._tx_state = TxState.IDLE
        logger.info("Closed %s store", self.entity_type)

    def is_connected(self) -> bool:
        """Check if the store still holds an open session."""
        return self._session is not None and self._engine is not None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _operation(self, name: str) -> str:
        return f"{type(self).__name__}[{self.entity_type}].{name}"

    def _require_session(self, operation: str) -> Session:
        if self._session is None:
            raise GenericStoreError(operation, "store is disconnected")
        if self._tx_state is TxState.ACTIVE:
            raise GenericStoreError(operation, "a transaction is already active on this store")
        return self._session

    @contextmanager
    def _transaction(self, operation: str) -> Iterator[Session]:
        """Run a block in a new transaction, committed on success.

        The store is back to IDLE with an empty session on every exit path.
        """
        session = self._require_session(operation)
        session.begin()
        self._tx_state = TxState.ACTIVE
        try:
            yield session
            session.commit()
        except BaseException:
            if session.in_transaction():
                logger.warning("Rolling back %s", operation)
                session.rollback()
            raise
        finally:
            session.expunge_all()
            self._tx_state = TxState.IDLE

    @contextmanager
    def _read_scope(self, operation: str) -> Iterator[Session]:
        """Run a read-only block; results are detached before the implicit
        transaction is released."""
        session = self._require_session(operation)
        try:
            yield session
        finally:
            session.expunge_all()
            if session.in_transaction():
                session.rollback()

    def _fail(self, operation: str, exc: BaseException, swallowable: bool = False) -> None:
        """Raise the wrapped form of exc, or log it under the legacy policy."""
        if isinstance(exc, StoreError):
            error = exc
        elif is_concurrency_conflict(exc):
            error = ConcurrencyConflictError(operation, f"StaleDataError: {exc}")
        else:
            error = GenericStoreError(operation, str(exc))

        if swallowable and self.failure_policy is FailurePolicy.LEGACY:
            logger.warning("Ignoring failed %s: %s", operation, error.message)
            return

        if error is exc:
            raise error
        raise error from exc

    def _was_deleted(self, session: Session, entity: E) -> bool:
        """Check if a previously loaded entity no longer has a stored row."""
        mapper = sa_inspect(self.model_class)
        pk = mapper.primary_key_from_instance(entity)
        if any(value is None for value in pk):
            return False
        if mapper.version_id_col is not None:
            version_key = mapper.get_property_by_column(mapper.version_id_col).key
            if getattr(entity, version_key, None) is None:
                return False
        return session.get(self.model_class, tuple(pk)) is None

    def _column(self, operation: str, prop: str) -> Any:
        if prop not in sa_inspect(self.model_class).column_attrs:
            raise GenericStoreError(operation, f"{self.entity_type} has no property '{prop}'")
        return getattr(self.model_class, prop)

    def _resolve_order_by(self, order_by: Optional[Sequence[str]]) -> Tuple[Any, ...]:
        mapper = sa_inspect(self.model_class)
        if not order_by:
            return tuple(mapper.primary_key)
        unknown = [name for name in order_by if name not in mapper.column_attrs]
        if unknown:
            raise ValueError(f"{self.entity_type} cannot be ordered by {', '.join(unknown)}")
        return tuple(getattr(self.model_class, name) for name in order_by)
