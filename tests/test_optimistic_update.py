"""
Tests for the optimistic update engine.

Covers:
- no-lost-update between two actors editing the same snapshot, including a
  rival commit landing between the in-transaction read and the write
- stale detection for changed, deleted and newly created records
- changelog contents, deletes on zero, omitted keys treated as zero
- audit entry and bump only when something changed
"""

import pytest

from adapters.record_store import TxReader
from app.exceptions import StaleDataError
from domain.enums import AuditAction, MealType
from services import ConflictPreviewService, OptimisticUpdateService, UpsertService
from test_fixtures import (
    MARCH_1,
    TEACHER_A,
    TEACHER_B,
    find_record,
    live_counts,
    make_registration,
)


@pytest.fixture
def upsert(store, versions, audit_log):
    return UpsertService(store, versions, audit_log)


@pytest.fixture
def optimistic(store, versions, audit_log):
    return OptimisticUpdateService(store, versions, audit_log)


@pytest.fixture
def snapshot(upsert, store):
    upsert.upsert(
        TEACHER_A,
        [
            make_registration(20, meal_type=MealType.KIDS_LUNCH),
            make_registration(3, meal_type=MealType.TEACHERS_LUNCH),
        ],
    )
    return store.query()


# =============================================================================
# NO LOST UPDATE
# =============================================================================


def test_second_writer_on_same_snapshot_is_rejected(optimistic, snapshot, store):
    """
    Verifies:
    - A and B read the same snapshot
    - B commits first; A's commit fails with StaleDataError
    - B's value survives
    """
    b_result = optimistic.update(
        TEACHER_B, [make_registration(22, meal_type=MealType.KIDS_LUNCH)], snapshot
    )
    assert len(b_result.changes) == 1

    with pytest.raises(StaleDataError):
        optimistic.update(
            TEACHER_A, [make_registration(25, meal_type=MealType.KIDS_LUNCH)], snapshot
        )

    assert find_record(store).count == 22


def test_stale_update_leaves_no_partial_writes(optimistic, snapshot, upsert, store, versions):
    """
    Verifies:
    - when one of several originals changed, none of the edit is applied
    - the data version is not bumped by the failed call
    """
    upsert.upsert(TEACHER_B, [make_registration(4, meal_type=MealType.TEACHERS_LUNCH)])
    before = live_counts(store)
    version = versions.current()

    with pytest.raises(StaleDataError):
        optimistic.update(
            TEACHER_A,
            [
                make_registration(30, meal_type=MealType.KIDS_LUNCH),
                make_registration(5, meal_type=MealType.TEACHERS_LUNCH),
            ],
            snapshot,
        )

    assert live_counts(store) == before
    assert versions.current() == version


def test_deleted_original_is_stale(optimistic, snapshot, upsert):
    """
    Verifies:
    - a record deleted after the snapshot counts as changed
    """
    upsert.upsert(TEACHER_B, [make_registration(0, meal_type=MealType.KIDS_LUNCH)])

    with pytest.raises(StaleDataError):
        optimistic.update(
            TEACHER_A, [make_registration(21, meal_type=MealType.KIDS_LUNCH)], snapshot
        )


def test_recreated_record_is_stale(optimistic, snapshot, upsert):
    """
    Verifies:
    - delete then re-create with the original count is still detected,
      because the record identity changed
    """
    upsert.upsert(TEACHER_B, [make_registration(0, meal_type=MealType.KIDS_LUNCH)])
    upsert.upsert(TEACHER_B, [make_registration(20, meal_type=MealType.KIDS_LUNCH)])

    with pytest.raises(StaleDataError):
        optimistic.update(
            TEACHER_A, [make_registration(21, meal_type=MealType.KIDS_LUNCH)], snapshot
        )


def test_key_created_concurrently_is_stale(optimistic, snapshot, upsert, store):
    """
    Verifies:
    - a desired key absent from the snapshot but created meanwhile aborts the edit
    """
    upsert.upsert(TEACHER_B, [make_registration(15, meal_type=MealType.KIDS_BREAKFAST)])

    with pytest.raises(StaleDataError):
        optimistic.update(
            TEACHER_A,
            [make_registration(16, meal_type=MealType.KIDS_BREAKFAST)],
            snapshot,
        )

    assert find_record(store, meal_type=MealType.KIDS_BREAKFAST).count == 15


# =============================================================================
# WRITES COMMITTED INSIDE THE TRANSACTION WINDOW
# =============================================================================


@pytest.fixture
def rival_writes_after_read(monkeypatch):
    """
    Make a rival commit right after the first in-transaction read.

    Returns a setter taking the callable the rival runs.
    """
    real_get = TxReader.get
    pending = []

    def get_then_rival_commit(self, key):
        record = real_get(self, key)
        if pending:
            pending.pop()()
        return record

    monkeypatch.setattr(TxReader, "get", get_then_rival_commit)
    return pending.append


def test_rival_update_between_read_and_write_is_stale(
    shared_stores, versions, rival_writes_after_read
):
    """
    Verifies:
    - A validated version 1; B commits version 2 before A writes
    - A's write is rejected by the store's version check, not applied over B
    - B's value survives
    """
    ours, rival = shared_stores
    UpsertService(ours, versions).upsert(TEACHER_A, [make_registration(20)])
    originals = ours.query()

    rival_writes_after_read(
        lambda: UpsertService(rival, versions).upsert(TEACHER_B, [make_registration(22)])
    )

    with pytest.raises(StaleDataError):
        OptimisticUpdateService(ours, versions).update(
            TEACHER_A, [make_registration(25)], originals
        )

    record = find_record(ours)
    assert record.count == 22
    assert record.registered_by_id == TEACHER_B.id
    assert record.version == 2


def test_rival_update_before_our_delete_is_stale(
    shared_stores, versions, rival_writes_after_read
):
    """
    Verifies:
    - deleting a row that changed after it was read is rejected too
    """
    ours, rival = shared_stores
    UpsertService(ours, versions).upsert(TEACHER_A, [make_registration(20)])
    originals = ours.query()

    rival_writes_after_read(
        lambda: UpsertService(rival, versions).upsert(TEACHER_B, [make_registration(23)])
    )

    with pytest.raises(StaleDataError):
        OptimisticUpdateService(ours, versions).update(TEACHER_A, [make_registration(0)], originals)

    assert find_record(ours).count == 23


def test_rival_delete_between_read_and_write_is_stale(
    shared_stores, versions, rival_writes_after_read
):
    ours, rival = shared_stores
    UpsertService(ours, versions).upsert(TEACHER_A, [make_registration(20)])
    originals = ours.query()

    rival_writes_after_read(
        lambda: UpsertService(rival, versions).upsert(TEACHER_B, [make_registration(0)])
    )

    with pytest.raises(StaleDataError):
        OptimisticUpdateService(ours, versions).update(
            TEACHER_A, [make_registration(25)], originals
        )

    assert find_record(ours) is None


# =============================================================================
# CHANGELOG
# =============================================================================


def test_changelog_covers_update_create_and_delete(optimistic, snapshot, store):
    """
    Verifies:
    - changed count -> update, new key -> create, zero -> delete
    - changelog lists old/new per key (0 for absent)
    """
    result = optimistic.update(
        TEACHER_A,
        [
            make_registration(21, meal_type=MealType.KIDS_LUNCH),
            make_registration(0, meal_type=MealType.TEACHERS_LUNCH),
            make_registration(19, meal_type=MealType.KIDS_BREAKFAST),
        ],
        snapshot,
    )

    changes = {c.meal_type: (c.old_value, c.new_value) for c in result.changes}
    assert changes == {
        MealType.KIDS_LUNCH: (20, 21),
        MealType.TEACHERS_LUNCH: (3, 0),
        MealType.KIDS_BREAKFAST: (0, 19),
    }
    assert live_counts(store) == {
        (MARCH_1, "Lá", MealType.KIDS_LUNCH): 21,
        (MARCH_1, "Lá", MealType.KIDS_BREAKFAST): 19,
    }


def test_original_missing_from_desired_is_deleted(optimistic, snapshot, store):
    """
    Verifies:
    - a key present only in originals is treated as desired count 0
    """
    result = optimistic.update(
        TEACHER_A, [make_registration(20, meal_type=MealType.KIDS_LUNCH)], snapshot
    )

    assert [(c.meal_type, c.new_value) for c in result.changes] == [
        (MealType.TEACHERS_LUNCH, 0)
    ]
    assert find_record(store, meal_type=MealType.TEACHERS_LUNCH) is None


def test_unchanged_edit_is_noop(optimistic, snapshot, audit_log, versions):
    """
    Verifies:
    - identical values produce an empty changelog
    - no audit entry and no bump
    """
    entries_before = len(audit_log.list_entries(page_size=50).entries)
    version = versions.current()

    result = optimistic.update(
        TEACHER_A,
        [
            make_registration(20, meal_type=MealType.KIDS_LUNCH),
            make_registration(3, meal_type=MealType.TEACHERS_LUNCH),
        ],
        snapshot,
    )

    assert result.changes == []
    assert len(audit_log.list_entries(page_size=50).entries) == entries_before
    assert versions.current() == version


def test_update_is_audited_with_changelog(optimistic, snapshot, audit_log):
    """
    Verifies:
    - one UPDATE_REGISTRATION entry with class, date and changes
    """
    optimistic.update(
        TEACHER_B,
        [
            make_registration(25, meal_type=MealType.KIDS_LUNCH),
            make_registration(3, meal_type=MealType.TEACHERS_LUNCH),
        ],
        snapshot,
    )

    latest = audit_log.list_entries(page_size=1).entries[0]
    assert latest.action == AuditAction.UPDATE_REGISTRATION
    assert latest.actor_id == TEACHER_B.id
    assert latest.details["class_name"] == "Lá"
    assert latest.details["date"] == MARCH_1.isoformat()
    assert latest.details["changes"] == [
        {"date": "2024-03-01", "meal_type": "kids_lunch", "old_value": 20, "new_value": 25}
    ]


def test_preview_then_confirm_flow(store, versions, upsert, optimistic, snapshot):
    """
    Verifies:
    - the records returned by the preview work as originals for the update
    """
    candidates = [make_registration(24, meal_type=MealType.KIDS_LUNCH)]
    preview = ConflictPreviewService(store).preview(candidates)
    assert preview.has_conflicts

    result = optimistic.update(TEACHER_A, candidates, preview.existing)

    assert [(c.old_value, c.new_value) for c in result.changes] == [(20, 24)]
    assert find_record(store).count == 24
