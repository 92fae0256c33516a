from typing import Dict, List, Optional

from adapters.record_store import RecordStore, TxReader, TxWriter
from app.exceptions import ServiceValidationError, StaleDataError
from domain.enums import AuditAction
from domain.schemas import (
    Actor,
    ChangeEntry,
    KeyTuple,
    RegistrationIn,
    RegistrationRecord,
    UpdateResult,
    key_of,
)
from services.audit_service import AuditLogService
from services.base import BaseService
from services.data_version import DataVersionChannel
from services.upsert_service import index_by_key


def _stale(key: KeyTuple, expected: Optional[RegistrationRecord], live: Optional[RegistrationRecord]):
    day, class_name, meal_type = key
    return StaleDataError(
        details={
            "date": day.isoformat(),
            "class_name": class_name,
            "meal_type": meal_type.value,
            "expected_version": expected.version if expected else None,
            "live_version": live.version if live else None,
        }
    )


class OptimisticUpdateService(BaseService):
    """Apply a user's edit only if nobody changed the rows since they were read.

    ``originals`` is the snapshot the edit was based on. Every snapshot row is
    re-read under lock and compared by (registration_id, version); any
    mismatch aborts the whole edit with StaleDataError.
    """

    def __init__(
        self,
        store: RecordStore,
        versions: DataVersionChannel,
        audit_log: Optional[AuditLogService] = None,
    ):
        super().__init__("mealcount.optimistic")
        self.store = store
        self.versions = versions
        self.audit_log = audit_log or AuditLogService(store)

    def update(
        self,
        actor: Actor,
        registrations: List[RegistrationIn],
        originals: List[RegistrationRecord],
    ) -> UpdateResult:
        """
        Apply desired headcounts against a previously read snapshot.

        Args:
            actor: Caller, recorded as registered_by
            registrations: Desired (key, count) values
            originals: Records as the caller last saw them

        Returns:
            UpdateResult with the applied changelog (empty when nothing differed)

        Raises:
            ServiceValidationError: On duplicate keys in either list
            StaleDataError: If any snapshot row changed, vanished or appeared
            StoreUnavailableError: On store failure
        """
        desired = index_by_key(registrations)
        snapshot: Dict[KeyTuple, RegistrationRecord] = {}
        for original in originals:
            key = key_of(original)
            if key in snapshot:
                raise ServiceValidationError(
                    "Duplicate key in originals",
                    details={"registration_id": str(original.registration_id)},
                )
            snapshot[key] = original

        ordered_keys = list(desired) + [k for k in snapshot if k not in desired]

        def apply(reader: TxReader, writer: TxWriter) -> List[ChangeEntry]:
            for key in ordered_keys:
                expected = snapshot.get(key)
                live = reader.get(key)
                if expected is None:
                    if live is not None:
                        raise _stale(key, None, live)
                elif live is None or (live.registration_id, live.version) != (
                    expected.registration_id,
                    expected.version,
                ):
                    raise _stale(key, expected, live)

            changes: List[ChangeEntry] = []
            for key in ordered_keys:
                expected = snapshot.get(key)
                wanted = desired[key].count if key in desired else 0
                old = expected.count if expected else 0

                if wanted > 0 and wanted != old:
                    if expected is None:
                        writer.create(key, wanted)
                    else:
                        writer.update(expected.registration_id, wanted)
                elif wanted == 0 and expected is not None:
                    writer.delete(expected.registration_id)
                else:
                    continue

                day, class_name, meal_type = key
                changes.append(
                    ChangeEntry(
                        date=day,
                        class_name=class_name,
                        meal_type=meal_type,
                        old_value=old,
                        new_value=wanted,
                    )
                )
            return changes

        try:
            changes = self.store.transaction(apply, actor)
        except StaleDataError as exc:
            self.log_warning("optimistic_update_stale", actor_id=actor.id, details=exc.details)
            raise

        result = UpdateResult(changes=changes)
        if not changes:
            self.log_info("optimistic_update_noop", actor_id=actor.id, keys=len(ordered_keys))
            return result

        self.log_info("optimistic_update_applied", actor_id=actor.id, changes=len(changes))
        representative = registrations[0] if registrations else originals[0]
        self.audit_log.record(
            actor,
            AuditAction.UPDATE_REGISTRATION,
            {
                "class_name": representative.class_name,
                "date": representative.date,
                "changes": [
                    {
                        "date": c.date,
                        "meal_type": c.meal_type,
                        "old_value": c.old_value,
                        "new_value": c.new_value,
                    }
                    for c in changes
                ],
            },
        )
        self.versions.bump()
        return result
