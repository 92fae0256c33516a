from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Tuple
from datetime import date as Date, datetime
from uuid import UUID

from domain.enums import MealType

# (date, class_name, meal_type) - identity of one registration
KeyTuple = Tuple[Date, str, MealType]


def key_of(item) -> KeyTuple:
    """Composite key of any object exposing date, class_name and meal_type"""
    return (item.date, item.class_name, MealType(item.meal_type))


class RegistrationKey(BaseModel):
    """Composite identity of a registration"""

    date: Date
    class_name: str = Field(..., min_length=1, max_length=100)
    meal_type: MealType

    model_config = {"frozen": True}

    @field_validator("class_name")
    @classmethod
    def strip_class_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("class_name must not be blank")
        return v


class RegistrationIn(RegistrationKey):
    """Desired headcount for one key; 0 means the key should not exist"""

    count: int = Field(..., ge=0, description="Headcount; 0 removes the registration")


class RegistrationRecord(BaseModel):
    """Snapshot of a stored registration, including its modification stamp"""

    registration_id: UUID
    date: Date
    class_name: str
    meal_type: MealType
    count: int
    version: int = Field(..., description="Store-assigned stamp compared on update")
    updated_at: Optional[datetime] = None
    registered_by: Optional[str] = None
    registered_by_id: Optional[str] = None

    model_config = {"from_attributes": True, "frozen": True}


class ArchivedRegistrationRecord(BaseModel):
    """Registration as it was when moved to the archive"""

    archived_registration_id: UUID
    source_registration_id: UUID
    date: Date
    class_name: str
    meal_type: MealType
    count: int
    version: int
    updated_at: Optional[datetime] = None
    registered_by: Optional[str] = None
    registered_by_id: Optional[str] = None
    archived_at: datetime

    model_config = {"from_attributes": True}


class UpsertRequest(BaseModel):
    registrations: List[RegistrationIn] = Field(..., min_length=1)


class UpsertResult(BaseModel):
    """Per-call outcome of the upsert engine"""

    created: int = 0
    updated: int = 0
    deleted: int = 0
    unchanged: int = 0

    @property
    def writes(self) -> int:
        return self.created + self.updated + self.deleted


class ConflictPreviewRequest(BaseModel):
    candidates: List[RegistrationIn] = Field(..., min_length=1)
    keys: Optional[List[RegistrationKey]] = Field(
        None, description="Keys to check; defaults to the candidate keys"
    )


class ConflictDiff(BaseModel):
    """Live value that a candidate would overwrite"""

    date: Date
    class_name: str
    meal_type: MealType
    old_value: int
    new_value: int


class ConflictPreviewResult(BaseModel):
    existing: List[RegistrationRecord] = Field(default_factory=list)
    diffs: List[ConflictDiff] = Field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.existing)


class OptimisticUpdateRequest(BaseModel):
    registrations: List[RegistrationIn] = Field(default_factory=list)
    originals: List[RegistrationRecord] = Field(default_factory=list)


class ChangeEntry(BaseModel):
    """One applied change: old/new headcount for a key (0 = absent)"""

    date: Date
    class_name: str
    meal_type: MealType
    old_value: int
    new_value: int


class UpdateResult(BaseModel):
    changes: List[ChangeEntry] = Field(default_factory=list)


class RegistrationFilter(BaseModel):
    """Predicates for registration queries; all optional and combinable"""

    date_from: Optional[Date] = None
    date_to: Optional[Date] = None
    dates: Optional[List[Date]] = None
    class_names: Optional[List[str]] = None


class RegistrationPage(BaseModel):
    registrations: List[RegistrationRecord]
    next_cursor: Optional[str] = None
    total_count: int = 0


class ArchiveRequest(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)


class ArchiveResult(BaseModel):
    year: int
    month: int
    archived: int


class ClassDateRef(BaseModel):
    """All registrations of one class on one day"""

    class_name: str = Field(..., min_length=1)
    date: Date


class BulkDeleteRequest(BaseModel):
    items: List[ClassDateRef] = Field(..., min_length=1)


class DeleteResult(BaseModel):
    deleted: int
