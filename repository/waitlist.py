from datetime import date, datetime
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.Waitlist import Waitlist, WaitlistStatus


def get_waitlist_by_id(db: Session, waitlist_id: str) -> Optional[Waitlist]:
    stmt = select(Waitlist).where(Waitlist.id == waitlist_id)
    return db.execute(stmt).scalar()


def get_pending_entry(
    db: Session, course_id: str, customer_email: str
) -> Optional[Waitlist]:
    stmt = select(Waitlist).where(
        Waitlist.course_id == course_id,
        func.lower(Waitlist.customer_email) == customer_email.strip().lower(),
        Waitlist.status == WaitlistStatus.PENDING.value,
    )
    return db.execute(stmt).scalars().first()


def create_waitlist_entry(
    db: Session,
    course_id: str,
    customer_name: str,
    customer_email: str,
    created_at: datetime,
    participants: int = 1,
    participant_names: Optional[str] = None,
    auto_book: bool = False,
    preferred_date: Optional[date] = None,
    user_id: Optional[str] = None,
    is_commit: bool = True,
) -> Waitlist:
    entry = Waitlist(
        course_id=course_id,
        user_id=user_id,
        customer_name=customer_name.strip(),
        customer_email=customer_email.strip().lower(),
        participants=participants,
        participant_names=participant_names,
        auto_book=auto_book,
        preferred_date=preferred_date,
        status=WaitlistStatus.PENDING.value,
        created_at=created_at,
    )
    db.add(entry)
    db.flush()
    if is_commit:
        db.commit()
        db.refresh(entry)
    return entry


def update_waitlist_status(
    db: Session, entry: Waitlist, status: WaitlistStatus, is_commit: bool = True
) -> Waitlist:
    entry.status = status.value
    if is_commit:
        db.commit()
        db.refresh(entry)
    return entry
