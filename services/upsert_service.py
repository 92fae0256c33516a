from typing import Dict, List, Optional

from adapters.record_store import RecordStore, TxReader, WriteOp
from app.exceptions import ServiceValidationError
from domain.enums import AuditAction, WriteKind
from domain.schemas import Actor, KeyTuple, RegistrationIn, UpsertResult, key_of
from services.audit_service import AuditLogService
from services.base import BaseService
from services.data_version import DataVersionChannel


def index_by_key(registrations: List[RegistrationIn]) -> Dict[KeyTuple, RegistrationIn]:
    """Map desired registrations by composite key, rejecting duplicates"""
    desired: Dict[KeyTuple, RegistrationIn] = {}
    for reg in registrations:
        key = key_of(reg)
        if key in desired:
            raise ServiceValidationError(
                "Duplicate registration key in one request",
                details={
                    "date": reg.date.isoformat(),
                    "class_name": reg.class_name,
                    "meal_type": reg.meal_type.value,
                },
            )
        desired[key] = reg
    return desired


class UpsertService(BaseService):
    """Create / update / delete-on-zero with no conflict checking.

    Used for fresh registrations that the conflict preview found
    non-overlapping. Across actors this path is last-write-wins.
    """

    def __init__(
        self,
        store: RecordStore,
        versions: DataVersionChannel,
        audit_log: Optional[AuditLogService] = None,
    ):
        super().__init__("mealcount.upsert")
        self.store = store
        self.versions = versions
        self.audit_log = audit_log or AuditLogService(store)

    def upsert(self, actor: Actor, registrations: List[RegistrationIn]) -> UpsertResult:
        """
        Apply desired headcounts against the current state.

        For each key: existing & count>0 -> update and restamp (skipped when
        the count is equal and the caller already registered it),
        existing & count==0 -> delete, missing & count>0 -> create,
        missing & count==0 -> nothing. Current state is read in the same
        unit of work as the writes, which go out as one atomic batch.

        Args:
            actor: Caller, recorded as registered_by
            registrations: Desired (key, count) values

        Returns:
            UpsertResult with created/updated/deleted/unchanged counts

        Raises:
            ServiceValidationError: On duplicate keys in the request
            StoreUnavailableError: On store failure (nothing applied)
        """
        desired = index_by_key(registrations)

        def plan(reader: TxReader) -> List[WriteOp]:
            current = {key_of(rec): rec for rec in reader.get_many(desired.keys())}
            ops: List[WriteOp] = []
            for key, reg in desired.items():
                existing = current.get(key)
                if existing is None:
                    if reg.count > 0:
                        ops.append(WriteOp.create(key, reg.count))
                elif reg.count == 0:
                    ops.append(WriteOp.delete(existing.registration_id))
                elif reg.count != existing.count or existing.registered_by_id != actor.id:
                    ops.append(WriteOp.update(existing.registration_id, key, reg.count))
            return ops

        ops = self.store.batch_write(plan, actor)
        result = UpsertResult(
            created=sum(1 for op in ops if op.kind == WriteKind.CREATE),
            updated=sum(1 for op in ops if op.kind == WriteKind.UPDATE),
            deleted=sum(1 for op in ops if op.kind == WriteKind.DELETE),
        )
        result.unchanged = len(desired) - result.writes

        if not ops:
            self.log_info("upsert_noop", actor_id=actor.id, keys=len(desired))
            return result

        self.log_info(
            "upsert_applied",
            actor_id=actor.id,
            created=result.created,
            updated=result.updated,
            deleted=result.deleted,
            unchanged=result.unchanged,
        )

        self.audit_log.record(
            actor,
            AuditAction.CREATE_REGISTRATION,
            {
                "registrations": [
                    reg.model_dump() for reg in registrations if reg.count > 0
                ]
            },
        )
        self.versions.bump()
        return result
