from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.orm import Session

from models.VoucherReconciliation import ReconciliationStatus, VoucherReconciliation


def create_reconciliation(
    db: Session,
    voucher_code: str,
    value: Decimal,
    valid_until: datetime,
    created_at: datetime,
    user_id: Optional[str] = None,
    paypal_order_id: Optional[str] = None,
    error: Optional[str] = None,
    is_commit: bool = True,
) -> VoucherReconciliation:
    reconciliation = VoucherReconciliation(
        user_id=str(user_id) if user_id else None,
        voucher_code=voucher_code,
        value=value,
        paypal_order_id=paypal_order_id,
        valid_until=valid_until,
        error=error,
        status=ReconciliationStatus.OPEN.value,
        created_at=created_at,
    )
    db.add(reconciliation)
    db.flush()
    if is_commit:
        db.commit()
        db.refresh(reconciliation)
    return reconciliation


def get_open_reconciliations(db: Session) -> List[VoucherReconciliation]:
    stmt = (
        select(VoucherReconciliation)
        .where(VoucherReconciliation.status == ReconciliationStatus.OPEN.value)
        .order_by(VoucherReconciliation.created_at.asc())
    )
    return list(db.execute(stmt).scalars().all())


def resolve_reconciliation(
    db: Session,
    reconciliation: VoucherReconciliation,
    resolved_at: datetime,
    is_commit: bool = True,
) -> VoucherReconciliation:
    reconciliation.status = ReconciliationStatus.RESOLVED.value
    reconciliation.resolved_at = resolved_at
    if is_commit:
        db.commit()
        db.refresh(reconciliation)
    return reconciliation
