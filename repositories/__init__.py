"""
Repositories package - Data access layer.
"""

from repositories.base import BaseRepository
from repositories.registration_repository import (
    RegistrationRepository,
    ArchivedRegistrationRepository,
)
from repositories.audit_log_repository import AuditLogRepository
from repositories.class_repository import ClassRepository
from repositories.user_repository import UserRepository
from repositories.announcement_repository import AnnouncementRepository

__all__ = [
    "BaseRepository",
    "RegistrationRepository",
    "ArchivedRegistrationRepository",
    "AuditLogRepository",
    "ClassRepository",
    "UserRepository",
    "AnnouncementRepository",
]
