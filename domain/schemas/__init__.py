"""
Domain schemas package - Pydantic models for validation.
"""

from domain.schemas.actor_schemas import Actor
from domain.schemas.registration_schemas import (
    KeyTuple,
    key_of,
    RegistrationKey,
    RegistrationIn,
    RegistrationRecord,
    ArchivedRegistrationRecord,
    UpsertRequest,
    UpsertResult,
    ConflictPreviewRequest,
    ConflictDiff,
    ConflictPreviewResult,
    OptimisticUpdateRequest,
    ChangeEntry,
    UpdateResult,
    RegistrationFilter,
    RegistrationPage,
    ArchiveRequest,
    ArchiveResult,
    ClassDateRef,
    BulkDeleteRequest,
    DeleteResult,
)
from domain.schemas.audit_schemas import (
    AuditLogEntry,
    AuditLogPage,
    AuditDeleteRequest,
    AuditDeleteResult,
)
from domain.schemas.class_schemas import ClassCreate, ClassUpdate, ClassResponse
from domain.schemas.user_schemas import UserCreate, UserUpdate, UserResponse
from domain.schemas.announcement_schemas import (
    AnnouncementCreate,
    AnnouncementUpdate,
    AnnouncementResponse,
    MarkReadRequest,
    UnreadCountResponse,
)

__all__ = [
    "Actor",
    # Registration schemas
    "KeyTuple",
    "key_of",
    "RegistrationKey",
    "RegistrationIn",
    "RegistrationRecord",
    "ArchivedRegistrationRecord",
    "UpsertRequest",
    "UpsertResult",
    "ConflictPreviewRequest",
    "ConflictDiff",
    "ConflictPreviewResult",
    "OptimisticUpdateRequest",
    "ChangeEntry",
    "UpdateResult",
    "RegistrationFilter",
    "RegistrationPage",
    "ArchiveRequest",
    "ArchiveResult",
    "ClassDateRef",
    "BulkDeleteRequest",
    "DeleteResult",
    # Audit schemas
    "AuditLogEntry",
    "AuditLogPage",
    "AuditDeleteRequest",
    "AuditDeleteResult",
    # Class schemas
    "ClassCreate",
    "ClassUpdate",
    "ClassResponse",
    # User schemas
    "UserCreate",
    "UserUpdate",
    "UserResponse",
    # Announcement schemas
    "AnnouncementCreate",
    "AnnouncementUpdate",
    "AnnouncementResponse",
    "MarkReadRequest",
    "UnreadCountResponse",
]
