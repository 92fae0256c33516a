"""
Tests for announcements and per-actor read tracking.
"""

import uuid

import pytest

from app.exceptions import NotFoundError
from domain.enums import AuditAction
from domain.schemas import AnnouncementCreate, AnnouncementUpdate
from services import AnnouncementService
from test_fixtures import ADMIN, TEACHER_A, TEACHER_B


@pytest.fixture
def announcements(store, audit_log):
    return AnnouncementService(store, audit_log)


def test_author_has_read_own_announcement(announcements):
    created = announcements.add_announcement(
        ADMIN, AnnouncementCreate(title="Thực đơn", content="Tuần sau đổi thực đơn")
    )

    assert created.read_by == [ADMIN.id]
    assert announcements.unread_count(ADMIN) == 0
    assert announcements.unread_count(TEACHER_A) == 1


def test_mark_read_is_set_union(announcements):
    first = announcements.add_announcement(ADMIN, AnnouncementCreate(title="A", content="a"))
    second = announcements.add_announcement(ADMIN, AnnouncementCreate(title="B", content="b"))

    assert announcements.mark_read(TEACHER_A, [first.announcement_id]) == 1
    assert announcements.mark_read(TEACHER_A, [first.announcement_id, second.announcement_id]) == 1
    assert announcements.unread_count(TEACHER_A) == 0
    assert announcements.unread_count(TEACHER_B) == 2


def test_list_newest_first_and_update(announcements, audit_log):
    older = announcements.add_announcement(ADMIN, AnnouncementCreate(title="Old", content="x"))
    newer = announcements.add_announcement(ADMIN, AnnouncementCreate(title="New", content="y"))

    assert [a.announcement_id for a in announcements.list_announcements()] == [
        newer.announcement_id,
        older.announcement_id,
    ]

    updated = announcements.update_announcement(
        ADMIN, older.announcement_id, AnnouncementUpdate(title="Old (edited)")
    )
    assert updated.title == "Old (edited)"
    assert updated.content == "x"
    assert audit_log.list_entries(page_size=1).entries[0].action == AuditAction.UPDATE_ANNOUNCEMENT


def test_delete_unknown_announcement(announcements):
    with pytest.raises(NotFoundError):
        announcements.delete_announcement(ADMIN, uuid.uuid4())
