from datetime import datetime
from enum import StrEnum
import uuid
from typing import Optional

from pytz import timezone
from sqlalchemy import UUID, DateTime, ForeignKey, Numeric, String
from sqlalchemy.orm import mapped_column, Mapped, relationship

from models import Base
from settings import TZ

VOUCHER_CODE_PREFIX = "SPONK-"
VOUCHER_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
VOUCHER_CODE_LENGTH = 8


class VoucherStatus(StrEnum):
    PENDING = "pending"
    ACTIVE = "active"
    USED = "used"
    EXPIRED = "expired"


class VoucherPaymentMethod(StrEnum):
    PAYPAL = "paypal"
    BANK_TRANSFER = "bank_transfer"


class Voucher(Base):
    __tablename__ = "voucher"

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    user_id: Mapped[str] = mapped_column(
        "user_id", UUID(as_uuid=True), ForeignKey("user.id"), nullable=False, index=True
    )
    code: Mapped[str] = mapped_column("code", String, unique=True, nullable=False)
    value = mapped_column("value", Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(
        "status", String, nullable=False, default=VoucherStatus.PENDING
    )
    paypal_order_id: Mapped[Optional[str]] = mapped_column(
        "paypal_order_id", String, nullable=True, unique=True
    )
    valid_until = mapped_column("valid_until", DateTime(timezone=True), nullable=False)
    created_at = mapped_column("created_at", DateTime(timezone=True), nullable=False)

    # Relationship
    user = relationship("User", back_populates="vouchers")

    @property
    def payment_method(self) -> str:
        if self.paypal_order_id:
            return VoucherPaymentMethod.PAYPAL.value
        return VoucherPaymentMethod.BANK_TRANSFER.value

    def effective_status(self, now: Optional[datetime] = None) -> str:
        """Stored status, except an active voucher past its validity reads as expired."""
        if self.status != VoucherStatus.ACTIVE:
            return self.status
        now = now or datetime.now(timezone(TZ))
        valid_until = self.valid_until
        if valid_until.tzinfo is None:
            valid_until = timezone(TZ).localize(valid_until)
        if valid_until < now:
            return VoucherStatus.EXPIRED.value
        return self.status
