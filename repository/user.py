from datetime import datetime
from typing import Optional
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from models.User import User


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    stmt = select(User).where(func.lower(User.email) == email.strip().lower())
    data = db.execute(stmt).scalar()
    return data


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    stmt = select(User).where(User.username == username)
    return db.execute(stmt).scalar()


def get_user_by_id(db: Session, id: str) -> Optional[User]:
    stmt = select(User).where(User.id == id)
    return db.execute(stmt).scalar()


def create_user(
    db: Session,
    email: str,
    password: Optional[str] = None,
    username: Optional[str] = None,
    full_name: Optional[str] = None,
    is_active: bool = False,
    is_admin: bool = False,
    created_at: Optional[datetime] = None,
    is_commit: bool = True,
) -> User:
    user = User(
        email=email.strip().lower(),
        username=username,
        password=password,
        full_name=full_name,
        is_active=is_active,
        is_admin=is_admin,
        created_at=created_at,
        updated_at=created_at,
    )
    db.add(user)
    db.flush()
    if is_commit:
        db.commit()
        db.refresh(user)
    return user
