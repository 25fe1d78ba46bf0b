from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from models.Course import Course


def get_active_courses(db: Session) -> List[Course]:
    stmt = select(Course).where(Course.is_active).order_by(Course.title.asc())
    return list(db.execute(stmt).scalars().all())


def get_course_by_id(db: Session, course_id: str) -> Optional[Course]:
    query = select(Course).where(Course.id == course_id)
    return db.execute(query).scalars().first()


def get_course_by_title(db: Session, title: str) -> Optional[Course]:
    query = select(Course).where(Course.title == title)
    return db.execute(query).scalars().first()
