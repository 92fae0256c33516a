import re
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from adapters.record_store import RecordStore
from app.config import settings
from app.exceptions import NotFoundError, ServiceValidationError, StaleDataError
from domain.enums import AuditAction
from domain.models import ClassInfo
from domain.schemas import Actor, ClassCreate, ClassResponse, ClassUpdate
from repositories.class_repository import ClassRepository
from repositories.registration_repository import RegistrationRepository
from services.audit_service import AuditLogService
from services.base import BaseService
from services.data_version import DataVersionChannel

# Age groups listed before any other class name
GROUP_ORDER = {"Nhà trẻ": 1, "Bé": 2, "Nhỡ": 3, "Lớn": 4}

_NAME_PATTERN = re.compile(r"^(\D+)\s*(\d*)$")


def natural_sort_key(name: str) -> Tuple[int, int]:
    """Sort key: known group prefix first, then the trailing class number"""
    match = _NAME_PATTERN.match(name)
    prefix = match.group(1).strip() if match else name
    number = int(match.group(2)) if match and match.group(2) else 0
    return GROUP_ORDER.get(prefix, 99), number


class ClassService(BaseService):
    """Class management; renames and deletions cascade to live registrations"""

    def __init__(
        self,
        store: RecordStore,
        versions: DataVersionChannel,
        audit_log: Optional[AuditLogService] = None,
    ):
        super().__init__("mealcount.classes")
        self.store = store
        self.versions = versions
        self.audit_log = audit_log or AuditLogService(store)

    def list_classes(self) -> List[ClassResponse]:
        with self.store.session_scope() as session:
            rows = ClassRepository(session).list_all()
            classes = [ClassResponse.model_validate(row) for row in rows]
        return sorted(classes, key=lambda c: natural_sort_key(c.name))

    def add_class(self, actor: Actor, data: ClassCreate) -> ClassResponse:
        name = self._clean_name(data.name)
        with self.store.session_scope() as session:
            repo = ClassRepository(session)
            if repo.name_taken(name):
                raise ServiceValidationError(f"Class '{name}' already exists", details={"name": name})
            row = repo.create(ClassInfo(name=name, student_count=data.student_count))
            created = ClassResponse.model_validate(row)

        self.log_info("class_created", class_id=created.class_id, name=name)
        self.audit_log.record(
            actor,
            AuditAction.CREATE_CLASS,
            {"name": name, "student_count": data.student_count},
        )
        self.versions.bump()
        return created

    def update_class(
        self,
        actor: Actor,
        class_id: UUID,
        data: ClassUpdate,
        expected_version: Optional[int] = None,
    ) -> ClassResponse:
        """
        Update a class; a rename moves every live registration to the new name.

        The class change and the registration rename commit together.

        Raises:
            NotFoundError: If the class does not exist
            ServiceValidationError: If the new name is blank or already used
            StaleDataError: If expected_version no longer matches
        """
        name = self._clean_name(data.name)
        if expected_version is None:
            expected_version = data.expected_version

        with self.store.session_scope() as session:
            repo = ClassRepository(session)
            row = repo.get_by_id(class_id, with_lock=True)
            if row is None:
                raise NotFoundError(f"Class {class_id} not found")
            if expected_version is not None and row.version != expected_version:
                raise StaleDataError(
                    details={
                        "class_id": str(class_id),
                        "expected_version": expected_version,
                        "live_version": row.version,
                    }
                )
            if repo.name_taken(name, exclude_id=class_id):
                raise ServiceValidationError(f"Class '{name}' already exists", details={"name": name})

            old_name = row.name
            renamed = 0
            if old_name != name:
                registrations = RegistrationRepository(session)
                for registration in registrations.find_by_class_name(old_name):
                    registrations.update(registration, class_name=name)
                    renamed += 1

            repo.update(row, name=name, student_count=data.student_count)
            updated = ClassResponse.model_validate(row)

        self.log_info(
            "class_updated", class_id=class_id, old_name=old_name, new_name=name, renamed=renamed
        )
        self.audit_log.record(
            actor,
            AuditAction.UPDATE_CLASS,
            {
                "class_id": class_id,
                "old_name": old_name,
                "new_name": name,
                "new_student_count": data.student_count,
            },
        )
        self.versions.bump()
        return updated

    def delete_class(self, actor: Actor, class_id: UUID) -> int:
        """Delete a class and all its live registrations; returns how many were removed"""
        with self.store.session_scope() as session:
            repo = ClassRepository(session)
            row = repo.get_by_id(class_id, with_lock=True)
            if row is None:
                raise NotFoundError(f"Class {class_id} not found")
            name = row.name

            registrations = RegistrationRepository(session)
            removed = 0
            for registration in registrations.find_by_class_name(name):
                registrations.delete(registration)
                removed += 1
            repo.delete(row)

        self.log_info("class_deleted", class_id=class_id, name=name, registrations_removed=removed)
        self.audit_log.record(actor, AuditAction.DELETE_CLASS, {"class_id": class_id, "name": name})
        self.versions.bump()
        return removed

    def ensure_default_classes(self, defaults: Optional[Dict[str, int]] = None) -> int:
        """Seed the default classes into an empty table; returns how many were added"""
        defaults = settings.default_classes if defaults is None else defaults
        with self.store.session_scope() as session:
            repo = ClassRepository(session)
            if repo.count_all() > 0:
                return 0
            for name, student_count in defaults.items():
                repo.create(ClassInfo(name=name, student_count=student_count))

        self.log_info("default_classes_seeded", count=len(defaults))
        return len(defaults)

    @staticmethod
    def _clean_name(name: str) -> str:
        name = name.strip()
        if not name:
            raise ServiceValidationError("Class name must not be blank")
        return name
