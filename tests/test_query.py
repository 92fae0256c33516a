"""
Tests for the query engine: filters, ordering and keyset pagination.
"""

from datetime import date, timedelta

import pytest

from app.exceptions import ServiceValidationError
from domain.enums import MealType
from domain.schemas import RegistrationFilter
from repositories.pagination import encode_cursor
from services import QueryService, UpsertService
from test_fixtures import TEACHER_A, make_registration

CLASSES = ["Lá", "Chồi", "Mầm"]
FIRST_DAY = date(2024, 3, 1)
DAYS = 5


@pytest.fixture
def query(store):
    return QueryService(store, max_page_size=100)


@pytest.fixture
def populated(store, versions):
    batch = [
        make_registration(
            10 + offset, day=FIRST_DAY + timedelta(days=offset), class_name=name, meal_type=meal
        )
        for offset in range(DAYS)
        for name in CLASSES
        for meal in MealType
    ]
    UpsertService(store, versions).upsert(TEACHER_A, batch)
    return len(batch)


# =============================================================================
# PAGINATION
# =============================================================================


@pytest.mark.parametrize("page_size", [1, 7, 9, 45, 50])
def test_pagination_returns_every_record_once(query, populated, page_size):
    """
    Verifies:
    - following next_cursor visits each record exactly once
    - the walk terminates with a null cursor
    - total_count matches the number of records
    """
    seen = []
    cursor = None
    pages = 0
    while True:
        page = query.get_registrations(page_size=page_size, cursor=cursor)
        pages += 1
        assert page.total_count == populated
        seen.extend(r.registration_id for r in page.registrations)
        cursor = page.next_cursor
        if cursor is None:
            break
        assert pages <= populated + 1

    assert len(seen) == populated
    assert len(set(seen)) == populated


def test_results_ordered_newest_date_first(query, populated):
    """
    Verifies:
    - dates are non-increasing across a full read
    """
    page = query.get_registrations(fetch_all=True)
    dates = [r.date for r in page.registrations]
    assert dates == sorted(dates, reverse=True)


def test_short_page_has_no_cursor(query, populated):
    """
    Verifies:
    - a page smaller than page_size ends the walk
    """
    page = query.get_registrations(page_size=populated + 5)
    assert len(page.registrations) == populated
    assert page.next_cursor is None


def test_skip_count_reports_zero(query, populated):
    page = query.get_registrations(page_size=5, skip_count=True)
    assert page.total_count == 0
    assert len(page.registrations) == 5


def test_fetch_all_total_is_number_returned(query, populated):
    page = query.get_registrations(
        RegistrationFilter(class_names=["Lá"]), fetch_all=True
    )
    assert page.total_count == len(page.registrations) == DAYS * len(MealType)
    assert page.next_cursor is None


# =============================================================================
# FILTERS
# =============================================================================


def test_date_range_is_inclusive(query, populated):
    """
    Verifies:
    - both bounds of the range are included
    """
    filters = RegistrationFilter(date_from=date(2024, 3, 2), date_to=date(2024, 3, 3))
    page = query.get_registrations(filters, fetch_all=True)

    assert {r.date for r in page.registrations} == {date(2024, 3, 2), date(2024, 3, 3)}
    assert page.total_count == 2 * len(CLASSES) * len(MealType)


def test_filters_compose(query, populated):
    """
    Verifies:
    - explicit dates and class allow-list narrow the result together
    """
    filters = RegistrationFilter(dates=[date(2024, 3, 5)], class_names=["Mầm", "Chồi"])
    page = query.get_registrations(filters, page_size=100)

    assert page.total_count == 2 * len(MealType)
    assert {r.class_name for r in page.registrations} == {"Mầm", "Chồi"}


def test_empty_range_is_not_an_error(query, populated):
    filters = RegistrationFilter(date_from=date(2023, 1, 1), date_to=date(2023, 1, 31))
    page = query.get_registrations(filters, page_size=10)
    assert page.registrations == []
    assert page.total_count == 0
    assert page.next_cursor is None


# =============================================================================
# VALIDATION
# =============================================================================


def test_inverted_range_rejected(query):
    filters = RegistrationFilter(date_from=date(2024, 3, 5), date_to=date(2024, 3, 1))
    with pytest.raises(ServiceValidationError):
        query.get_registrations(filters, page_size=10)


@pytest.mark.parametrize(
    "cursor",
    [
        "not-a-cursor!!",
        encode_cursor("2024-03-01"),
        encode_cursor("yesterday", "8c1b1a56-1d3f-4f0c-9a55-3c6d0b1f2e11"),
        encode_cursor("2024-03-01", "not-a-uuid"),
    ],
)
def test_garbled_cursor_rejected(query, populated, cursor):
    with pytest.raises(ServiceValidationError):
        query.get_registrations(page_size=5, cursor=cursor)


def test_page_size_required_unless_fetch_all(query):
    with pytest.raises(ServiceValidationError):
        query.get_registrations()


def test_page_size_capped(query):
    with pytest.raises(ServiceValidationError):
        query.get_registrations(page_size=101)
