from datetime import date
from typing import List, Optional

from adapters.record_store import RecordStore
from domain.enums import AuditAction
from domain.schemas import Actor, ClassDateRef, DeleteResult, RegistrationRecord
from repositories.registration_repository import RegistrationRepository
from services.audit_service import AuditLogService
from services.base import BaseService
from services.data_version import DataVersionChannel


class RegistrationService(BaseService):
    """Whole-day removal of a class's registrations"""

    def __init__(
        self,
        store: RecordStore,
        versions: DataVersionChannel,
        audit_log: Optional[AuditLogService] = None,
    ):
        super().__init__("mealcount.registrations")
        self.store = store
        self.versions = versions
        self.audit_log = audit_log or AuditLogService(store)

    def delete_for_class_date(self, actor: Actor, class_name: str, day: date) -> DeleteResult:
        """Delete every meal registered for one class on one day"""
        return self.delete_many(actor, [ClassDateRef(class_name=class_name, date=day)])

    def delete_many(self, actor: Actor, items: List[ClassDateRef]) -> DeleteResult:
        """
        Delete every registration of the given (class, date) pairs atomically.

        Returns:
            DeleteResult with the number of removed records (0 when nothing matched)
        """
        pairs = [(item.class_name.strip(), item.date) for item in items]
        with self.store.session_scope() as session:
            repo = RegistrationRepository(session)
            rows = repo.find_by_class_dates(pairs)
            removed = [RegistrationRecord.model_validate(row) for row in rows]
            for row in rows:
                repo.delete(row)

        if not removed:
            self.log_info("registration_delete_noop", actor_id=actor.id, pairs=len(pairs))
            return DeleteResult(deleted=0)

        self.log_info("registrations_deleted", actor_id=actor.id, deleted=len(removed))
        self.audit_log.record(
            actor,
            AuditAction.DELETE_REGISTRATION,
            {
                "items": [{"class_name": c, "date": d} for c, d in sorted(set(pairs))],
                "registrations": [
                    {
                        "date": rec.date,
                        "class_name": rec.class_name,
                        "meal_type": rec.meal_type,
                        "count": rec.count,
                    }
                    for rec in removed
                ],
            },
        )
        self.versions.bump()
        return DeleteResult(deleted=len(removed))
