"""
Tests for whole-day removal of a class's registrations.
"""

import pytest

from domain.enums import AuditAction, MealType
from domain.schemas import ClassDateRef
from services import RegistrationService, UpsertService
from test_fixtures import MARCH_1, MARCH_2, TEACHER_A, live_counts, make_registration


@pytest.fixture
def removal(store, versions, audit_log):
    return RegistrationService(store, versions, audit_log)


@pytest.fixture
def seeded(store, versions):
    UpsertService(store, versions).upsert(
        TEACHER_A,
        [
            make_registration(20, day=MARCH_1, meal_type=MealType.KIDS_LUNCH),
            make_registration(19, day=MARCH_1, meal_type=MealType.KIDS_BREAKFAST),
            make_registration(18, day=MARCH_2),
            make_registration(25, day=MARCH_1, class_name="Chồi"),
        ],
    )
    return store


def test_delete_for_class_date_removes_all_meals(removal, seeded):
    """
    Verifies:
    - every meal type of the class/day is removed
    - other days and classes stay
    """
    result = removal.delete_for_class_date(TEACHER_A, "Lá", MARCH_1)

    assert result.deleted == 2
    remaining = live_counts(seeded)
    assert set(remaining) == {
        (MARCH_2, "Lá", MealType.KIDS_LUNCH),
        (MARCH_1, "Chồi", MealType.KIDS_LUNCH),
    }


def test_delete_many_is_audited_once(removal, seeded, audit_log, versions):
    version = versions.current()

    result = removal.delete_many(
        TEACHER_A,
        [
            ClassDateRef(class_name="Lá", date=MARCH_2),
            ClassDateRef(class_name="Chồi", date=MARCH_1),
        ],
    )

    assert result.deleted == 2
    latest = audit_log.list_entries(page_size=1).entries[0]
    assert latest.action == AuditAction.DELETE_REGISTRATION
    assert len(latest.details["registrations"]) == 2
    assert versions.current() == version + 1


def test_delete_without_matches_is_noop(removal, seeded, versions):
    version = versions.current()

    result = removal.delete_for_class_date(TEACHER_A, "Mầm", MARCH_1)

    assert result.deleted == 0
    assert versions.current() == version
