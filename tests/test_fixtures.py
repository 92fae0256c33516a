"""
Shared test helpers for the MealCount test suite.

Pytest fixtures (engine, store, versions, client) live in conftest.py; this
module holds the actors, header builders and object factories reused across
test files.
"""

import uuid
from datetime import date
from typing import Optional

from domain.enums import MealType
from domain.schemas import Actor, RegistrationIn, key_of


# Realistic default actors
TEACHER_A = Actor(id="teacher-a", display_name="Nguyễn Thị Lan")
TEACHER_B = Actor(id="teacher-b", display_name="Trần Văn Minh")
ADMIN = Actor(id="admin-1", display_name="Phạm Thu Hà")

MARCH_1 = date(2024, 3, 1)
MARCH_2 = date(2024, 3, 2)


def unique_email(prefix: str = "test") -> str:
    """Generate unique email address using UUID to avoid conflicts"""
    return f"{prefix}-{uuid.uuid4()}@example.com"


def actor_headers(actor: Actor = TEACHER_A) -> dict:
    """Request headers identifying the caller"""
    return {"X-Actor-Id": actor.id, "X-Actor-Name": actor.display_name}


def make_registration(
    count: int,
    day: date = MARCH_1,
    class_name: str = "Lá",
    meal_type: MealType = MealType.KIDS_LUNCH,
) -> RegistrationIn:
    """
    Create a desired registration.

    Example:
        >>> make_registration(25).class_name
        'Lá'
    """
    return RegistrationIn(date=day, class_name=class_name, meal_type=meal_type, count=count)


def registration_json(
    count: int,
    day: date = MARCH_1,
    class_name: str = "Lá",
    meal_type: MealType = MealType.KIDS_LUNCH,
) -> dict:
    """Same as make_registration, as a JSON request item"""
    return {
        "date": day.isoformat(),
        "class_name": class_name,
        "meal_type": meal_type.value,
        "count": count,
    }


def live_counts(store, filters=None) -> dict:
    """Map key -> count of everything currently in the live collection"""
    return {key_of(rec): rec.count for rec in store.query(filters)}


def find_record(store, day: date = MARCH_1, class_name: str = "Lá",
                meal_type: MealType = MealType.KIDS_LUNCH) -> Optional[object]:
    return store.get((day, class_name, meal_type))
