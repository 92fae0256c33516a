"""API routes package"""

from . import registrations, archive, audit_logs, classes, users, announcements, health

__all__ = [
    "registrations",
    "archive",
    "audit_logs",
    "classes",
    "users",
    "announcements",
    "health",
]
