"""Record store adapter for meal registrations.

Thin contract over the transactional SQL store. Every engine talks to the
registration tables through this class only:

- reads: get / get_many / query / count / paged_query
- writes: batch_write (read, plan and apply in one all-or-nothing unit of
  work, last-write-wins) and transaction (read-then-write with StaleData-capable
  abort)
- session_scope: a raw unit of work for maintenance services that must touch
  several tables atomically

Reads return immutable pydantic snapshots, never live ORM objects.
"""

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union
from uuid import UUID
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.orm.exc import StaleDataError as OrmStaleDataError

from app.exceptions import (
    AppError,
    ConflictError,
    ServiceValidationError,
    StaleDataError,
    StoreUnavailableError,
)
from domain.enums import WriteKind
from domain.models import Registration
from domain.schemas import (
    Actor,
    ArchivedRegistrationRecord,
    KeyTuple,
    RegistrationFilter,
    RegistrationRecord,
)
from repositories.pagination import decode_cursor, encode_cursor
from repositories.registration_repository import (
    ArchivedRegistrationRepository,
    RegistrationRepository,
)

logger = logging.getLogger("mealcount.store")

T = TypeVar("T")

# Rows loaded in the current unit of work, by registration id. Holding them
# keeps the instances (and the version they were read at) in the session.
HeldRows = Dict[UUID, Registration]


# ------------------ Write operations ------------------
@dataclass(frozen=True)
class WriteOp:
    """One element of a batched write.

    Batched writes do not check versions. UPDATE falls back to creating ``key``
    when the row is gone, DELETE of a missing row is a no-op. ARCHIVE moves a row
    the plan read; it is skipped if the row was deleted in the meantime.
    """

    kind: WriteKind
    key: Optional[KeyTuple] = None
    registration_id: Optional[UUID] = None
    count: Optional[int] = None

    @classmethod
    def create(cls, key: KeyTuple, count: int) -> "WriteOp":
        return cls(WriteKind.CREATE, key=key, count=count)

    @classmethod
    def update(cls, registration_id: UUID, key: KeyTuple, count: int) -> "WriteOp":
        return cls(WriteKind.UPDATE, key=key, registration_id=registration_id, count=count)

    @classmethod
    def delete(cls, registration_id: UUID) -> "WriteOp":
        return cls(WriteKind.DELETE, registration_id=registration_id)

    @classmethod
    def archive(cls, registration_id: UUID) -> "WriteOp":
        """Move a live registration into the archive"""
        return cls(WriteKind.ARCHIVE, registration_id=registration_id)


# ------------------ Transaction handles ------------------
class TxReader:
    """Reads inside a unit of work; rows are locked until commit where supported."""

    def __init__(self, repo: RegistrationRepository, rows: HeldRows):
        self._repo = repo
        self._rows = rows

    def _hold(self, row: Registration) -> RegistrationRecord:
        self._rows[row.registration_id] = row
        return RegistrationRecord.model_validate(row)

    def get(self, key: KeyTuple) -> Optional[RegistrationRecord]:
        row = self._repo.get_by_key(key, with_lock=True)
        return self._hold(row) if row is not None else None

    def get_many(self, keys: Iterable[KeyTuple]) -> List[RegistrationRecord]:
        return [self._hold(row) for row in self._repo.get_by_keys(keys, with_lock=True)]

    def query(self, filters: Optional[RegistrationFilter] = None) -> List[RegistrationRecord]:
        return [self._hold(row) for row in self._repo.find(filters, with_lock=True)]


class TxWriter:
    """Versioned writes inside a transaction, attributed to one actor.

    Updates and deletes act on the instances the reader loaded, so the store
    rejects them (StaleDataError) if the row changed after it was read.
    """

    def __init__(self, repo: RegistrationRepository, rows: HeldRows, actor: Actor):
        self._repo = repo
        self._rows = rows
        self._actor = actor

    def create(self, key: KeyTuple, count: int) -> RegistrationRecord:
        row = self._repo.create_registration(key, count, self._actor)
        self._rows[row.registration_id] = row
        return RegistrationRecord.model_validate(row)

    def update(self, registration_id: UUID, count: int) -> RegistrationRecord:
        row = self._require(registration_id)
        return RegistrationRecord.model_validate(self._repo.set_count(row, count, self._actor))

    def delete(self, registration_id: UUID) -> None:
        self._repo.delete(self._require(registration_id))
        del self._rows[registration_id]

    def _require(self, registration_id: UUID) -> Registration:
        row = self._rows.get(registration_id)
        if row is None:
            raise ValueError(f"registration {registration_id} was not read in this transaction")
        return row


# ------------------ Store ------------------
class RecordStore:
    """Registration store over a SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Unit of work: commits on success, rolls back on any error.

        Store failures are translated into the service error taxonomy.
        """
        session = self._session_factory()
        try:
            with session.begin():
                yield session
        except AppError:
            raise
        except OrmStaleDataError as exc:
            logger.info("Optimistic version check failed in store: %s", exc)
            raise StaleDataError() from exc
        except IntegrityError as exc:
            logger.warning("Write rejected by store constraint: %s", exc.orig)
            raise ConflictError(
                "Write conflicts with an existing record",
                details={"reason": str(exc.orig)},
            ) from exc
        except SQLAlchemyError as exc:
            logger.error("Store call failed: %s", exc)
            raise StoreUnavailableError(details={"reason": exc.__class__.__name__}) from exc
        finally:
            session.close()

    # ---- reads ----
    def get(self, key: KeyTuple) -> Optional[RegistrationRecord]:
        with self.session_scope() as session:
            row = RegistrationRepository(session).get_by_key(key)
            return RegistrationRecord.model_validate(row) if row is not None else None

    def get_many(self, keys: Iterable[KeyTuple]) -> List[RegistrationRecord]:
        with self.session_scope() as session:
            rows = RegistrationRepository(session).get_by_keys(keys)
            return [RegistrationRecord.model_validate(r) for r in rows]

    def query(
        self, filters: Optional[RegistrationFilter] = None, archived: bool = False
    ) -> Union[List[RegistrationRecord], List[ArchivedRegistrationRecord]]:
        """Full, unpaginated read ordered by date descending"""
        with self.session_scope() as session:
            if archived:
                rows = ArchivedRegistrationRepository(session).find(filters)
                return [ArchivedRegistrationRecord.model_validate(r) for r in rows]
            rows = RegistrationRepository(session).find(filters)
            return [RegistrationRecord.model_validate(r) for r in rows]

    def count(self, filters: Optional[RegistrationFilter] = None) -> int:
        with self.session_scope() as session:
            return RegistrationRepository(session).count(filters)

    def paged_query(
        self,
        filters: Optional[RegistrationFilter],
        page_size: int,
        cursor: Optional[str] = None,
    ) -> Tuple[List[RegistrationRecord], Optional[str]]:
        """One page plus the cursor of the next one (None once exhausted)"""
        after = None
        if cursor:
            raw_date, raw_id = decode_cursor(cursor, 2)
            try:
                after = (date.fromisoformat(raw_date), UUID(raw_id))
            except ValueError:
                raise ServiceValidationError("Invalid pagination cursor", details={"cursor": cursor})

        with self.session_scope() as session:
            rows = RegistrationRepository(session).find_page(filters, page_size, after)
            records = [RegistrationRecord.model_validate(r) for r in rows]

        next_cursor = None
        if len(records) == page_size:
            last = records[-1]
            next_cursor = encode_cursor(last.date.isoformat(), last.registration_id)
        return records, next_cursor

    # ---- writes ----
    def batch_write(
        self, plan: Callable[[TxReader], List[WriteOp]], actor: Actor
    ) -> List[WriteOp]:
        """Read, plan and apply in one all-or-nothing unit of work.

        ``plan`` reads the current state through the reader and returns the
        operations to apply. Returns the operations that took effect.
        """
        with self.session_scope() as session:
            live = RegistrationRepository(session)
            archive = ArchivedRegistrationRepository(session)
            rows: HeldRows = {}
            ops = plan(TxReader(live, rows))
            applied = [op for op in ops if self._apply(op, live, archive, rows, actor)]
        logger.debug("batch_write planned=%d applied=%d", len(ops), len(applied))
        return applied

    def transaction(self, fn: Callable[[TxReader, TxWriter], T], actor: Actor) -> T:
        """Run fn(reader, writer) in one read-write transaction.

        Any StaleDataError raised by fn aborts without writes. A row changed
        by another writer after it was read, or a unique-key violation at
        commit from a concurrent create, is reported as stale data as well.
        """
        try:
            with self.session_scope() as session:
                repo = RegistrationRepository(session)
                rows: HeldRows = {}
                return fn(TxReader(repo, rows), TxWriter(repo, rows, actor))
        except ConflictError as exc:
            raise StaleDataError(details=exc.details) from exc

    @staticmethod
    def _apply(
        op: WriteOp,
        live: RegistrationRepository,
        archive: ArchivedRegistrationRepository,
        rows: HeldRows,
        actor: Actor,
    ) -> bool:
        if op.kind == WriteKind.CREATE:
            live.create_registration(op.key, op.count, actor)
            return True

        if op.kind == WriteKind.UPDATE:
            if not live.overwrite_count(op.registration_id, op.count, actor):
                # deleted since it was read: the desired count still wins
                live.create_registration(op.key, op.count, actor)
            return True

        if op.kind == WriteKind.DELETE:
            return live.remove(op.registration_id)

        row = rows.get(op.registration_id)
        if row is None or not live.remove(op.registration_id):
            return False
        archive.archive_copy(row)
        return True
