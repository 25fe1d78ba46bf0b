from enum import StrEnum
import uuid
from sqlalchemy import UUID, DateTime, Numeric, String, Text
from sqlalchemy.orm import mapped_column, Mapped
from models import Base


class ReconciliationStatus(StrEnum):
    OPEN = "open"
    RESOLVED = "resolved"


class VoucherReconciliation(Base):
    """A captured payment whose voucher row could not be written."""

    __tablename__ = "voucher_reconciliation"

    id: Mapped[str] = mapped_column(
        "id", UUID(as_uuid=True), primary_key=True, index=True, default=uuid.uuid4
    )
    # no foreign keys, the row must be writable whatever broke the voucher insert
    user_id: Mapped[str] = mapped_column("user_id", String, nullable=True)
    voucher_code: Mapped[str] = mapped_column("voucher_code", String, nullable=False)
    value = mapped_column("value", Numeric(10, 2), nullable=False)
    paypal_order_id: Mapped[str] = mapped_column(
        "paypal_order_id", String, nullable=True, index=True
    )
    valid_until = mapped_column("valid_until", DateTime(timezone=True), nullable=False)
    error: Mapped[str] = mapped_column("error", Text, nullable=True)
    status: Mapped[str] = mapped_column(
        "status", String, nullable=False, default=ReconciliationStatus.OPEN
    )
    created_at = mapped_column("created_at", DateTime(timezone=True), nullable=False)
    resolved_at = mapped_column("resolved_at", DateTime(timezone=True), nullable=True)
