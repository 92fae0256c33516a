"""Services package - Business logic layer"""

from services.data_version import DataVersionChannel
from services.audit_service import AuditLogService
from services.upsert_service import UpsertService
from services.conflict_preview_service import ConflictPreviewService
from services.optimistic_update_service import OptimisticUpdateService
from services.query_service import QueryService
from services.archive_service import ArchiveService
from services.registration_service import RegistrationService
from services.class_service import ClassService
from services.user_service import UserService
from services.announcement_service import AnnouncementService

__all__ = [
    "DataVersionChannel",
    "AuditLogService",
    "UpsertService",
    "ConflictPreviewService",
    "OptimisticUpdateService",
    "QueryService",
    "ArchiveService",
    "RegistrationService",
    "ClassService",
    "UserService",
    "AnnouncementService",
]
