from sqlalchemy import create_engine
from sqlalchemy.orm import (
    sessionmaker,
    DeclarativeBase,
    scoped_session,
    Session as SqlalchemySession,
)
from sqlalchemy.pool import StaticPool


from settings import DATABASE_URL


if DATABASE_URL.startswith("sqlite"):
    # single shared connection so an in-memory database survives across sessions
    engine = create_engine(
        DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
else:
    engine = create_engine(
        DATABASE_URL,
        pool_size=20,
        max_overflow=0,
        pool_timeout=300,
    )
db = sessionmaker(engine, future=True)
factory_session = scoped_session(db)


def get_db_sync():
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_db_sync_for_test(db: SqlalchemySession):
    def inner():
        yield db

    return inner


class Base(DeclarativeBase):
    pass


# define all model for alembic migration
from models.User import User  # NOQA
from models.Token import Token  # NOQA
from models.RefreshToken import RefreshToken  # NOQA
from models.Course import Course  # NOQA
from models.Voucher import Voucher  # NOQA
from models.VoucherReconciliation import VoucherReconciliation  # NOQA
from models.Waitlist import Waitlist  # NOQA
from models.NewsletterSubscriber import NewsletterSubscriber  # NOQA
