"""
API dependencies for dependency injection
"""

from typing import Generator, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session

from adapters.record_store import RecordStore
from app.exceptions import UnauthorizedError
from domain.models import SessionLocal, get_db_session
from domain.schemas import Actor
from services import (
    AnnouncementService,
    ArchiveService,
    AuditLogService,
    ClassService,
    ConflictPreviewService,
    DataVersionChannel,
    OptimisticUpdateService,
    QueryService,
    RegistrationService,
    UpsertService,
    UserService,
)


def get_db() -> Generator[Session, None, None]:
    """Plain database session, used by the health check"""
    yield from get_db_session()


def get_record_store() -> RecordStore:
    """Record store bound to the application session factory"""
    return RecordStore(SessionLocal)


def get_data_version(request: Request) -> DataVersionChannel:
    return request.app.state.data_version


def get_current_actor(
    x_actor_id: Optional[str] = Header(None),
    x_actor_name: Optional[str] = Header(None),
) -> Actor:
    """Identify the caller from the X-Actor-Id / X-Actor-Name headers"""
    if not x_actor_id or not x_actor_id.strip():
        raise UnauthorizedError("Missing X-Actor-Id header")
    return Actor(id=x_actor_id.strip(), display_name=(x_actor_name or "").strip())


# ---- service providers ----
def get_audit_service(store: RecordStore = Depends(get_record_store)) -> AuditLogService:
    return AuditLogService(store)


def get_upsert_service(
    store: RecordStore = Depends(get_record_store),
    versions: DataVersionChannel = Depends(get_data_version),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> UpsertService:
    return UpsertService(store, versions, audit_log)


def get_preview_service(store: RecordStore = Depends(get_record_store)) -> ConflictPreviewService:
    return ConflictPreviewService(store)


def get_optimistic_update_service(
    store: RecordStore = Depends(get_record_store),
    versions: DataVersionChannel = Depends(get_data_version),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> OptimisticUpdateService:
    return OptimisticUpdateService(store, versions, audit_log)


def get_query_service(store: RecordStore = Depends(get_record_store)) -> QueryService:
    return QueryService(store)


def get_archive_service(
    store: RecordStore = Depends(get_record_store),
    versions: DataVersionChannel = Depends(get_data_version),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> ArchiveService:
    return ArchiveService(store, versions, audit_log)


def get_registration_service(
    store: RecordStore = Depends(get_record_store),
    versions: DataVersionChannel = Depends(get_data_version),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> RegistrationService:
    return RegistrationService(store, versions, audit_log)


def get_class_service(
    store: RecordStore = Depends(get_record_store),
    versions: DataVersionChannel = Depends(get_data_version),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> ClassService:
    return ClassService(store, versions, audit_log)


def get_user_service(
    store: RecordStore = Depends(get_record_store),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> UserService:
    return UserService(store, audit_log)


def get_announcement_service(
    store: RecordStore = Depends(get_record_store),
    audit_log: AuditLogService = Depends(get_audit_service),
) -> AnnouncementService:
    return AnnouncementService(store, audit_log)
