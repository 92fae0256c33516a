"""
Registration Repository - Data access layer for live and archived headcounts
"""

from typing import Iterable, List, Optional, Tuple
from uuid import UUID
from datetime import date
from sqlalchemy.orm import Session, Query
from sqlalchemy import and_, or_, func

from repositories.base import BaseRepository
from domain.models import Registration, ArchivedRegistration
from domain.models.database import utcnow
from domain.schemas import Actor, KeyTuple, RegistrationFilter, key_of


def apply_filters(query: Query, model, filters: Optional[RegistrationFilter]) -> Query:
    """Add the date range / date list / class allow-list predicates to a query"""
    if filters is None:
        return query
    if filters.date_from:
        query = query.filter(model.date >= filters.date_from)
    if filters.date_to:
        query = query.filter(model.date <= filters.date_to)
    if filters.dates:
        query = query.filter(model.date.in_(filters.dates))
    if filters.class_names:
        query = query.filter(model.class_name.in_(filters.class_names))
    return query


class RegistrationRepository(BaseRepository[Registration]):
    """Repository for live registration data access"""

    def __init__(self, db: Session):
        super().__init__(db, Registration)

    def get_by_key(self, key: KeyTuple, with_lock: bool = False) -> Optional[Registration]:
        """Get the registration stored under a composite key"""
        reg_date, class_name, meal_type = key
        query = self.db.query(Registration).filter(
            and_(
                Registration.date == reg_date,
                Registration.class_name == class_name,
                Registration.meal_type == meal_type,
            )
        )
        if with_lock:
            query = query.with_for_update()
        return query.first()

    def get_by_keys(self, keys: Iterable[KeyTuple], with_lock: bool = False) -> List[Registration]:
        """Get every stored registration whose key is in keys"""
        wanted = set(keys)
        if not wanted:
            return []
        query = self.db.query(Registration).filter(
            Registration.date.in_(sorted({k[0] for k in wanted})),
            Registration.class_name.in_(sorted({k[1] for k in wanted})),
        )
        if with_lock:
            query = query.with_for_update()
        rows = query.all()
        return [row for row in rows if key_of(row) in wanted]

    def find(
        self, filters: Optional[RegistrationFilter] = None, with_lock: bool = False
    ) -> List[Registration]:
        """All matching registrations, newest date first"""
        query = apply_filters(self.db.query(Registration), Registration, filters)
        if with_lock:
            query = query.with_for_update()
        return query.order_by(
            Registration.date.desc(), Registration.registration_id.desc()
        ).all()

    def count(self, filters: Optional[RegistrationFilter] = None) -> int:
        """Exact number of matching registrations"""
        query = apply_filters(
            self.db.query(func.count(Registration.registration_id)), Registration, filters
        )
        return query.scalar() or 0

    def find_page(
        self,
        filters: Optional[RegistrationFilter],
        page_size: int,
        after: Optional[Tuple[date, UUID]] = None,
    ) -> List[Registration]:
        """One page in (date desc, id desc) order, starting after the given sort key"""
        query = apply_filters(self.db.query(Registration), Registration, filters)
        if after is not None:
            after_date, after_id = after
            query = query.filter(
                or_(
                    Registration.date < after_date,
                    and_(
                        Registration.date == after_date,
                        Registration.registration_id < after_id,
                    ),
                )
            )
        return (
            query.order_by(Registration.date.desc(), Registration.registration_id.desc())
            .limit(page_size)
            .all()
        )

    def find_by_class_dates(self, pairs: Iterable[Tuple[str, date]]) -> List[Registration]:
        """Every registration belonging to one of the (class_name, date) pairs"""
        conditions = [
            and_(Registration.class_name == class_name, Registration.date == reg_date)
            for class_name, reg_date in set(pairs)
        ]
        if not conditions:
            return []
        return self.db.query(Registration).filter(or_(*conditions)).all()

    def find_by_class_name(self, class_name: str) -> List[Registration]:
        return (
            self.db.query(Registration)
            .filter(Registration.class_name == class_name)
            .all()
        )

    def create_registration(self, key: KeyTuple, count: int, actor: Actor) -> Registration:
        """Create a registration; the store assigns id, version and timestamp"""
        reg_date, class_name, meal_type = key
        registration = Registration(
            date=reg_date,
            class_name=class_name,
            meal_type=meal_type,
            count=count,
            registered_by=actor.display_name,
            registered_by_id=actor.id,
        )
        return self.create(registration)

    def set_count(self, registration: Registration, count: int, actor: Actor) -> Registration:
        """Overwrite the headcount; bumps version and updated_at"""
        return self.update(
            registration,
            count=count,
            registered_by=actor.display_name,
            registered_by_id=actor.id,
        )

    def overwrite_count(self, registration_id: UUID, count: int, actor: Actor) -> bool:
        """Set the headcount whatever the stored version; False if the row is gone"""
        matched = (
            self.db.query(Registration)
            .filter(Registration.registration_id == registration_id)
            .update(
                {
                    Registration.count: count,
                    Registration.version: Registration.version + 1,
                    Registration.registered_by: actor.display_name,
                    Registration.registered_by_id: actor.id,
                    Registration.updated_at: utcnow(),
                },
                synchronize_session=False,
            )
        )
        return matched == 1

    def remove(self, registration_id: UUID) -> bool:
        """Delete by id whatever the stored version; False if already gone"""
        matched = (
            self.db.query(Registration)
            .filter(Registration.registration_id == registration_id)
            .delete(synchronize_session=False)
        )
        return matched == 1


class ArchivedRegistrationRepository(BaseRepository[ArchivedRegistration]):
    """Repository for the read-only archive"""

    def __init__(self, db: Session):
        super().__init__(db, ArchivedRegistration)

    def find(self, filters: Optional[RegistrationFilter] = None) -> List[ArchivedRegistration]:
        query = apply_filters(
            self.db.query(ArchivedRegistration), ArchivedRegistration, filters
        )
        return query.order_by(
            ArchivedRegistration.date.desc(),
            ArchivedRegistration.archived_registration_id.desc(),
        ).all()

    def archive_copy(self, registration: Registration) -> ArchivedRegistration:
        """Stage an archived copy of a live registration"""
        archived = ArchivedRegistration(
            source_registration_id=registration.registration_id,
            date=registration.date,
            class_name=registration.class_name,
            meal_type=registration.meal_type,
            count=registration.count,
            version=registration.version,
            registered_by=registration.registered_by,
            registered_by_id=registration.registered_by_id,
            updated_at=registration.updated_at,
        )
        return self.create(archived)
