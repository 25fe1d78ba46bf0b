from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from sqlalchemy import select, func
from sqlalchemy.orm import Session
from models.Voucher import Voucher, VoucherStatus


def get_voucher_by_id(db: Session, id: str) -> Optional[Voucher]:
    query = select(Voucher).where(Voucher.id == id)
    voucher = db.execute(query).scalar()
    return voucher


def get_voucher_by_code(db: Session, code: str) -> Optional[Voucher]:
    stmt = select(Voucher).where(func.upper(Voucher.code) == code.strip().upper())
    voucher = db.execute(stmt).scalar()
    return voucher


def get_voucher_by_paypal_order_id(
    db: Session, paypal_order_id: str
) -> Optional[Voucher]:
    stmt = select(Voucher).where(Voucher.paypal_order_id == paypal_order_id)
    return db.execute(stmt).scalar()


def get_vouchers_by_user_id(db: Session, user_id: str) -> List[Voucher]:
    stmt = (
        select(Voucher)
        .where(Voucher.user_id == user_id)
        .order_by(Voucher.created_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


def create_voucher(
    db: Session,
    user_id: str,
    code: str,
    value: Decimal,
    valid_until: datetime,
    created_at: datetime,
    status: VoucherStatus = VoucherStatus.PENDING,
    paypal_order_id: Optional[str] = None,
    is_commit: bool = True,
) -> Voucher:
    voucher = Voucher(
        user_id=user_id,
        code=code,
        value=value,
        status=status.value if isinstance(status, VoucherStatus) else status,
        paypal_order_id=paypal_order_id,
        valid_until=valid_until,
        created_at=created_at,
    )
    db.add(voucher)
    db.flush()
    if is_commit:
        db.commit()
        db.refresh(voucher)
    return voucher


def update_voucher_status(
    db: Session, voucher: Voucher, status: VoucherStatus, is_commit: bool = True
) -> Voucher:
    voucher.status = status.value if isinstance(status, VoucherStatus) else status
    if is_commit:
        db.commit()
        db.refresh(voucher)
    return voucher
