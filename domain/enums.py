"""
Domain enums for MealCount application.
Contains all enumeration types used across the domain models.
"""

import enum


class MealType(str, enum.Enum):
    """Meal kinds a class can register headcounts for"""

    KIDS_BREAKFAST = "kids_breakfast"
    KIDS_LUNCH = "kids_lunch"
    TEACHERS_LUNCH = "teachers_lunch"


class Role(str, enum.Enum):
    """User roles"""

    ADMIN = "admin"
    BOARD = "board"
    ACCOUNTING = "accounting"
    TEACHER = "teacher"


class AuditAction(str, enum.Enum):
    """Closed set of audited mutations"""

    CREATE_REGISTRATION = "CREATE_REGISTRATION"
    UPDATE_REGISTRATION = "UPDATE_REGISTRATION"
    DELETE_REGISTRATION = "DELETE_REGISTRATION"
    CREATE_CLASS = "CREATE_CLASS"
    UPDATE_CLASS = "UPDATE_CLASS"
    DELETE_CLASS = "DELETE_CLASS"
    CREATE_USER = "CREATE_USER"
    UPDATE_USER = "UPDATE_USER"
    DELETE_USER = "DELETE_USER"
    CREATE_ANNOUNCEMENT = "CREATE_ANNOUNCEMENT"
    UPDATE_ANNOUNCEMENT = "UPDATE_ANNOUNCEMENT"
    DELETE_ANNOUNCEMENT = "DELETE_ANNOUNCEMENT"
    ARCHIVE_DATA = "ARCHIVE_DATA"


class WriteKind(str, enum.Enum):
    """Operation kinds accepted by a batched store write"""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    ARCHIVE = "archive"
