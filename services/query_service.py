from typing import List, Optional

from adapters.record_store import RecordStore
from app.config import settings
from app.exceptions import ServiceValidationError
from domain.schemas import ArchivedRegistrationRecord, RegistrationFilter, RegistrationPage
from services.base import BaseService


class QueryService(BaseService):
    """Filtered reads of live and archived registrations"""

    def __init__(self, store: RecordStore, max_page_size: Optional[int] = None):
        super().__init__("mealcount.query")
        self.store = store
        self.max_page_size = max_page_size or settings.max_page_size

    def get_registrations(
        self,
        filters: Optional[RegistrationFilter] = None,
        page_size: Optional[int] = None,
        cursor: Optional[str] = None,
        fetch_all: bool = False,
        skip_count: bool = False,
    ) -> RegistrationPage:
        """
        Read live registrations, newest date first.

        Args:
            filters: Date range / explicit dates / class allow-list
            page_size: Records per page (required unless fetch_all)
            cursor: Cursor returned by the previous page
            fetch_all: Return every matching record in one call
            skip_count: Skip the separate total count in paged mode

        Returns:
            RegistrationPage; next_cursor is None when there are no more pages

        Raises:
            ServiceValidationError: On inverted date ranges, bad page sizes or cursors
        """
        filters = filters or RegistrationFilter()
        self._validate_filters(filters)

        if fetch_all:
            records = self.store.query(filters)
            self.log_info("query_all", returned=len(records))
            return RegistrationPage(registrations=records, next_cursor=None, total_count=len(records))

        if page_size is None:
            raise ServiceValidationError("page_size is required unless fetch_all is set")
        if page_size < 1 or page_size > self.max_page_size:
            raise ServiceValidationError(
                f"page_size must be between 1 and {self.max_page_size}",
                details={"page_size": page_size},
            )

        records, next_cursor = self.store.paged_query(filters, page_size, cursor)
        total = 0 if skip_count else self.store.count(filters)
        self.log_info(
            "query_page",
            returned=len(records),
            total=total,
            has_more=next_cursor is not None,
        )
        return RegistrationPage(registrations=records, next_cursor=next_cursor, total_count=total)

    def get_archived_registrations(
        self, filters: Optional[RegistrationFilter] = None
    ) -> List[ArchivedRegistrationRecord]:
        filters = filters or RegistrationFilter()
        self._validate_filters(filters)
        return self.store.query(filters, archived=True)

    @staticmethod
    def _validate_filters(filters: RegistrationFilter) -> None:
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            raise ServiceValidationError(
                "date_from must not be after date_to",
                details={
                    "date_from": filters.date_from.isoformat(),
                    "date_to": filters.date_to.isoformat(),
                },
            )
