from typing import List, Optional

from adapters.record_store import RecordStore
from domain.schemas import (
    ConflictDiff,
    ConflictPreviewResult,
    RegistrationIn,
    RegistrationKey,
    key_of,
)
from services.base import BaseService
from services.upsert_service import index_by_key


class ConflictPreviewService(BaseService):
    """Read-only check of which candidates would overwrite live headcounts.

    An empty result means the caller may use the upsert path. Otherwise the
    caller shows the diff, and on confirmation sends the same candidates with
    ``result.existing`` as originals to the optimistic update.
    """

    def __init__(self, store: RecordStore):
        super().__init__("mealcount.preview")
        self.store = store

    def preview(
        self,
        candidates: List[RegistrationIn],
        keys: Optional[List[RegistrationKey]] = None,
    ) -> ConflictPreviewResult:
        desired = index_by_key(candidates)
        checked = {key_of(k) for k in keys} if keys is not None else set(desired)
        checked &= set(desired)

        live = self.store.get_many(checked)
        existing = sorted(
            (rec for rec in live if rec.count > 0),
            key=lambda rec: (rec.date, rec.class_name, rec.meal_type.value),
        )
        diffs = [
            ConflictDiff(
                date=rec.date,
                class_name=rec.class_name,
                meal_type=rec.meal_type,
                old_value=rec.count,
                new_value=desired[key_of(rec)].count,
            )
            for rec in existing
        ]

        self.log_info("conflict_preview", checked=len(checked), conflicts=len(existing))
        return ConflictPreviewResult(existing=existing, diffs=diffs)
