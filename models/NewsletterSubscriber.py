import uuid
from sqlalchemy import UUID, DateTime, String
from sqlalchemy.orm import mapped_column, Mapped
from models import Base


class NewsletterSubscriber(Base):
    __tablename__ = "newsletter_subscriber"

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(
        "email", String, unique=True, nullable=False, index=True
    )
    subscribed_at = mapped_column(
        "subscribed_at", DateTime(timezone=True), nullable=False
    )
    unsubscribed_at = mapped_column(
        "unsubscribed_at", DateTime(timezone=True), nullable=True
    )
