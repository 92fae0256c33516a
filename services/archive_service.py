import calendar
from datetime import date
from typing import List, Optional

from adapters.record_store import RecordStore, TxReader, WriteOp
from app.exceptions import ServiceValidationError
from domain.enums import AuditAction
from domain.schemas import Actor, ArchiveResult, RegistrationFilter
from services.audit_service import AuditLogService
from services.base import BaseService
from services.data_version import DataVersionChannel


class ArchiveService(BaseService):
    """Moves a whole month of live registrations into the archive table"""

    def __init__(
        self,
        store: RecordStore,
        versions: DataVersionChannel,
        audit_log: Optional[AuditLogService] = None,
    ):
        super().__init__("mealcount.archive")
        self.store = store
        self.versions = versions
        self.audit_log = audit_log or AuditLogService(store)

    def archive_month(self, actor: Actor, year: int, month: int) -> ArchiveResult:
        """
        Archive every live registration dated in the given month.

        The month is read and moved in one atomic unit of work: either the
        whole month is moved or nothing is. Rows deleted by someone else in
        the meantime are skipped.

        Raises:
            ServiceValidationError: On out-of-range year or month
            StoreUnavailableError: On store failure (nothing moved)
        """
        if not 2000 <= year <= 2100:
            raise ServiceValidationError("year must be between 2000 and 2100", details={"year": year})
        if not 1 <= month <= 12:
            raise ServiceValidationError("month must be between 1 and 12", details={"month": month})

        last_day = calendar.monthrange(year, month)[1]
        filters = RegistrationFilter(date_from=date(year, month, 1), date_to=date(year, month, last_day))

        def plan(reader: TxReader) -> List[WriteOp]:
            return [WriteOp.archive(record.registration_id) for record in reader.query(filters)]

        moved = len(self.store.batch_write(plan, actor))
        if not moved:
            self.log_info("archive_noop", year=year, month=month)
            return ArchiveResult(year=year, month=month, archived=0)

        self.log_info("archive_applied", year=year, month=month, archived=moved)
        self.audit_log.record(
            actor,
            AuditAction.ARCHIVE_DATA,
            {"year": year, "month": month, "count": moved},
        )
        self.versions.bump()
        return ArchiveResult(year=year, month=month, archived=moved)
