from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.orm import Session

from core.helper import get_current_time_in_timezone
from models.Course import Course
from settings import TZ


def initial_courses(db: Session, is_commit: bool = True):
    now = get_current_time_in_timezone(TZ)
    courses = [
        Course(
            title="Drehscheibenkurs für Anfänger",
            description="Einführung in das Drehen an der Töpferscheibe.",
            price=Decimal("89.00"),
            duration_minutes=180,
            max_participants=6,
        ),
        Course(
            title="Handaufbau Workshop",
            description="Gefäße und Objekte in Aufbautechnik.",
            price=Decimal("69.00"),
            duration_minutes=150,
            max_participants=8,
        ),
        Course(
            title="Glasur Workshop",
            description="Glasieren der eigenen Stücke aus vorherigen Kursen.",
            price=Decimal("39.00"),
            duration_minutes=120,
            max_participants=8,
        ),
    ]

    for course in courses:
        stmt = select(Course).where(Course.title == course.title)
        existing = db.execute(stmt).scalar()
        if not existing:
            course.is_active = True
            course.created_at = now
            db.add(course)
        else:
            existing.description = course.description
            existing.price = course.price
            existing.duration_minutes = course.duration_minutes
            existing.max_participants = course.max_participants

    if is_commit:
        db.commit()
