import uuid
from models import Base
from sqlalchemy import UUID, DateTime, String, Boolean
from sqlalchemy.orm import mapped_column, Mapped, relationship


class User(Base):
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    email: Mapped[str] = mapped_column(
        "email", String, unique=True, nullable=False, index=True
    )
    username: Mapped[str] = mapped_column("username", String, nullable=True)
    password: Mapped[str] = mapped_column("password", String, nullable=True)
    full_name: Mapped[str] = mapped_column("full_name", String, nullable=True)
    is_active: Mapped[bool] = mapped_column(
        "is_active", Boolean, nullable=True, default=False
    )
    is_admin: Mapped[bool] = mapped_column(
        "is_admin", Boolean, nullable=False, default=False
    )
    created_at = mapped_column("created_at", DateTime(timezone=True))
    updated_at = mapped_column("updated_at", DateTime(timezone=True))

    # One to Many
    tokens = relationship("Token", back_populates="user")
    refresh_tokens = relationship("RefreshToken", back_populates="user")
    vouchers = relationship("Voucher", back_populates="user")

    @property
    def display_name(self) -> str:
        """Name used in mails, falls back to the local part of the email."""
        if self.full_name:
            return self.full_name
        if self.email:
            return self.email.split("@")[0] or "Kunde"
        return "Kunde"
