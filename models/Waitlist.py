from enum import StrEnum
import uuid
from sqlalchemy import (
    UUID,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import mapped_column, Mapped, relationship
from models import Base


class WaitlistStatus(StrEnum):
    PENDING = "pending"
    NOTIFIED = "notified"
    CANCELLED = "cancelled"


class Waitlist(Base):
    __tablename__ = "waitlist"
    __table_args__ = (
        # one pending entry per course and email
        Index(
            "uq_waitlist_pending_course_email",
            "course_id",
            "customer_email",
            unique=True,
            postgresql_where=text("status = 'pending'"),
            sqlite_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    course_id: Mapped[str] = mapped_column(
        "course_id",
        UUID(as_uuid=True),
        ForeignKey("course.id"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(
        "user_id", UUID(as_uuid=True), ForeignKey("user.id"), nullable=True, index=True
    )
    customer_name: Mapped[str] = mapped_column("customer_name", String, nullable=False)
    customer_email: Mapped[str] = mapped_column(
        "customer_email", String, nullable=False
    )
    participants: Mapped[int] = mapped_column(
        "participants", Integer, nullable=False, default=1
    )
    participant_names: Mapped[str] = mapped_column(
        "participant_names", Text, nullable=True
    )
    auto_book: Mapped[bool] = mapped_column("auto_book", Boolean, default=False)
    preferred_date = mapped_column("preferred_date", Date, nullable=True)
    status: Mapped[str] = mapped_column(
        "status", String, nullable=False, default=WaitlistStatus.PENDING
    )
    created_at = mapped_column("created_at", DateTime(timezone=True), nullable=False)

    # Relationship
    course = relationship("Course", back_populates="waitlist_entries")
    user = relationship("User", backref="waitlist_entries")
