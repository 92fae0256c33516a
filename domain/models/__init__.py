"""
Domain models package - SQLAlchemy ORM models.
"""

from domain.models.database import (
    Base,
    engine,
    SessionLocal,
    build_engine,
    build_session_factory,
    init_database,
    get_db_session,
)
from domain.models.registration import Registration, ArchivedRegistration
from domain.models.class_info import ClassInfo
from domain.models.audit import AuditLog
from domain.models.user import AppUser
from domain.models.announcement import Announcement

__all__ = [
    # Database
    "Base",
    "engine",
    "SessionLocal",
    "build_engine",
    "build_session_factory",
    "init_database",
    "get_db_session",
    # Registration models
    "Registration",
    "ArchivedRegistration",
    # Reference data
    "ClassInfo",
    "AppUser",
    "Announcement",
    # Audit
    "AuditLog",
]
