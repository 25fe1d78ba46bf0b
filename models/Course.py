import uuid
from sqlalchemy import UUID, DateTime, Integer, Numeric, String, Boolean, Text
from sqlalchemy.orm import mapped_column, Mapped, relationship
from models import Base


class Course(Base):
    __tablename__ = "course"

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column("title", String, nullable=False)
    description: Mapped[str] = mapped_column("description", Text, nullable=True)
    price = mapped_column("price", Numeric(10, 2), nullable=False)
    duration_minutes: Mapped[int] = mapped_column(
        "duration_minutes", Integer, nullable=True
    )
    max_participants: Mapped[int] = mapped_column(
        "max_participants", Integer, nullable=True
    )
    is_active: Mapped[bool] = mapped_column("is_active", Boolean, default=True)
    created_at = mapped_column("created_at", DateTime(timezone=True), nullable=True)

    waitlist_entries = relationship("Waitlist", back_populates="course")
