"""
Tests for user management.
"""

import pytest

from app.exceptions import NotFoundError, ServiceValidationError
from domain.enums import AuditAction, Role
from domain.schemas import UserCreate, UserUpdate
from services import UserService
from test_fixtures import ADMIN, unique_email


@pytest.fixture
def users(store, audit_log):
    return UserService(store, audit_log)


def test_add_user(users, audit_log):
    """
    Verifies:
    - user is created with role and class
    - CREATE_USER audit entry
    """
    email = unique_email("lan")
    user = users.add_user(
        ADMIN,
        UserCreate(email=email, display_name="Nguyễn Thị Lan", role=Role.TEACHER, assigned_class="Lá"),
    )

    assert user.email == email
    assert user.role == Role.TEACHER
    assert users.get_user(user.user_id).assigned_class == "Lá"
    assert audit_log.list_entries(page_size=1).entries[0].action == AuditAction.CREATE_USER


def test_duplicate_email_ignoring_case(users):
    email = unique_email("minh")
    users.add_user(ADMIN, UserCreate(email=email, display_name="Minh", role=Role.BOARD))

    with pytest.raises(ServiceValidationError):
        users.add_user(ADMIN, UserCreate(email=email.upper(), display_name="Minh 2", role=Role.BOARD))


def test_teacher_requires_class(users):
    with pytest.raises(ServiceValidationError):
        users.add_user(ADMIN, UserCreate(email=unique_email(), display_name="No Class"))


def test_update_user_partial(users):
    user = users.add_user(
        ADMIN, UserCreate(email=unique_email(), display_name="Hà", role=Role.ACCOUNTING)
    )

    updated = users.update_user(ADMIN, user.user_id, UserUpdate(display_name="Phạm Thu Hà"))

    assert updated.display_name == "Phạm Thu Hà"
    assert updated.role == Role.ACCOUNTING


def test_update_user_to_teacher_needs_class(users):
    user = users.add_user(ADMIN, UserCreate(email=unique_email(), display_name="A", role=Role.BOARD))

    with pytest.raises(ServiceValidationError):
        users.update_user(ADMIN, user.user_id, UserUpdate(role=Role.TEACHER))


def test_delete_user(users):
    user = users.add_user(ADMIN, UserCreate(email=unique_email(), display_name="B", role=Role.ADMIN))

    users.delete_user(ADMIN, user.user_id)

    with pytest.raises(NotFoundError):
        users.get_user(user.user_id)
    with pytest.raises(NotFoundError):
        users.delete_user(ADMIN, user.user_id)
