"""Voucher purchase workflow.

PayPal purchase: order id (+ user) received -> access token -> capture ->
voucher persisted as active -> reported. Bank transfer: voucher persisted as
pending, activated by hand once the money arrives.

A capture that succeeded at PayPal but could not be written locally is
recorded as a VoucherReconciliation row and surfaced as PersistenceError with
the generated code, never silently dropped.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
import traceback
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from core.email import send_voucher_confirmation_email
from core.exceptions import OrderOwnershipError, PersistenceError, ValidationError
from core.helper import add_months, generate_voucher_code, get_current_time_in_timezone
from core.log import logger
from core.paypal_service import PayPalService
from models.User import User
from models.Voucher import Voucher, VoucherStatus
from repository import (
    user as userRepo,
    voucher as voucherRepo,
    voucher_reconciliation as reconciliationRepo,
)
from settings import TZ, VOUCHER_CODE_MAX_ATTEMPTS, VOUCHER_VALIDITY_MONTHS


@dataclass
class VoucherPurchaseResult:
    voucher: Voucher
    is_new: bool = True


def voucher_validity(now: datetime) -> datetime:
    return add_months(now, VOUCHER_VALIDITY_MONTHS)


def allocate_voucher_code(db: Session) -> str:
    """Fresh code not yet present in the store, after at most VOUCHER_CODE_MAX_ATTEMPTS draws.

    The unique constraint on voucher.code still guards the insert itself.
    """
    for attempt in range(1, VOUCHER_CODE_MAX_ATTEMPTS + 1):
        code = generate_voucher_code()
        if voucherRepo.get_voucher_by_code(db=db, code=code) is None:
            return code
        logger.warning(f"Voucher code collision on attempt {attempt}, drawing again")
    raise PersistenceError(
        "Voucher creation failed",
        details=f"No free voucher code after {VOUCHER_CODE_MAX_ATTEMPTS} attempts",
    )


def persist_voucher(
    db: Session,
    user_id: uuid.UUID,
    value: Decimal,
    status: VoucherStatus,
    now: datetime,
    paypal_order_id: Optional[str] = None,
) -> Voucher:
    valid_until = voucher_validity(now)
    try:
        code = allocate_voucher_code(db=db)
    except PersistenceError as e:
        # still hand out a code so a captured payment can be reconciled
        e.voucher_code = generate_voucher_code()
        e.paypal_order_id = paypal_order_id
        e.amount = value
        e.valid_until = valid_until
        logger.error(f"Failed to allocate voucher code for user {user_id}: {e.details}")
        raise
    logger.info(
        f"Saving voucher {code} for user {user_id}: value={value} status={status} "
        f"paypal_order_id={paypal_order_id} valid_until={valid_until.isoformat()}"
    )
    try:
        return voucherRepo.create_voucher(
            db=db,
            user_id=user_id,
            code=code,
            value=value,
            status=status,
            paypal_order_id=paypal_order_id,
            valid_until=valid_until,
            created_at=now,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save voucher {code} to database: {e}")
        logger.debug(traceback.format_exc())
        raise PersistenceError(
            "Voucher creation failed",
            details=str(getattr(e, "orig", None) or e),
            voucher_code=code,
            paypal_order_id=paypal_order_id,
            amount=value,
            valid_until=valid_until,
        ) from e


def record_reconciliation(
    db: Session, error: PersistenceError, user_id: Optional[uuid.UUID], now: datetime
) -> Optional[str]:
    """Best-effort reconciliation row for a captured payment without voucher."""
    try:
        reconciliation = reconciliationRepo.create_reconciliation(
            db=db,
            user_id=user_id,
            voucher_code=error.voucher_code,
            value=error.amount,
            paypal_order_id=error.paypal_order_id,
            valid_until=error.valid_until,
            error=str(error.details or error.message),
            created_at=now,
        )
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(
            f"Could not record reconciliation for PayPal order {error.paypal_order_id} "
            f"(voucher code {error.voucher_code}): {e}"
        )
        return None
    logger.warning(
        f"Payment captured but voucher not stored, reconciliation {reconciliation.id} opened "
        f"for PayPal order {error.paypal_order_id}"
    )
    return str(reconciliation.id)


def resolve_user(
    db: Session, user_id: Optional[uuid.UUID], current_user: Optional[User]
) -> User:
    """Explicit user id from the request, else the authenticated user."""
    if user_id is None:
        if current_user is None:
            raise ValidationError("User ID is required")
        return current_user
    if current_user is not None and current_user.id == user_id:
        return current_user
    user = userRepo.get_user_by_id(db=db, id=user_id)
    if user is None:
        raise ValidationError("User not found")
    return user


async def notify_customer(
    user: User, voucher: Voucher, order_number: Optional[str] = None
) -> None:
    """Confirmation mail, a delivery failure never fails the purchase."""
    if not user.email:
        logger.warning(f"Could not get user email for voucher {voucher.code} confirmation")
        return
    try:
        await send_voucher_confirmation_email(
            recipient=user.email,
            customer_name=user.display_name,
            voucher_code=voucher.code,
            amount=voucher.value,
            payment_method=voucher.payment_method,
            status=voucher.status,
            valid_until=voucher.valid_until,
            order_number=order_number,
        )
        logger.info(f"Voucher confirmation email sent for {voucher.code}")
    except Exception as e:
        logger.error(f"Failed to send voucher confirmation email for {voucher.code}: {e}")


async def capture_voucher_purchase(
    db: Session,
    paypal: PayPalService,
    order_id: Optional[str],
    user_id: Optional[uuid.UUID] = None,
    current_user: Optional[User] = None,
) -> VoucherPurchaseResult:
    """
    Capture an approved PayPal order and turn it into an active voucher.

    Args:
        db: database session
        paypal: payment provider adapter
        order_id: PayPal order id
        user_id: owner of the voucher, defaults to current_user
        current_user: authenticated user of the request, if any

    Returns:
        VoucherPurchaseResult, is_new is False when the order was captured before

    Raises:
        ValidationError: order id or user missing, nothing sent to PayPal
        OrderOwnershipError: order already captured as another user's voucher
        ConfigurationError, UpstreamError: provider side failures
        PaymentNotCompletedError: capture status is not COMPLETED, nothing written
        PersistenceError: payment captured but the voucher row could not be written
    """
    if not order_id:
        raise ValidationError("Order ID is required")
    user = resolve_user(db=db, user_id=user_id, current_user=current_user)

    existing = voucherRepo.get_voucher_by_paypal_order_id(db=db, paypal_order_id=order_id)
    if existing is not None:
        if existing.user_id != user.id:
            logger.warning(
                f"PayPal order {order_id} already captured for another user, "
                f"rejected for user {user.id}"
            )
            raise OrderOwnershipError("Order already captured")
        logger.info(
            f"PayPal order {order_id} already captured as voucher {existing.code}"
        )
        return VoucherPurchaseResult(voucher=existing, is_new=False)

    capture = await paypal.capture_order(order_id=order_id)

    now = get_current_time_in_timezone(TZ)
    try:
        voucher = persist_voucher(
            db=db,
            user_id=user.id,
            value=capture.amount,
            status=VoucherStatus.ACTIVE,
            paypal_order_id=capture.order_id,
            now=now,
        )
    except PersistenceError as e:
        e.reconciliation_id = record_reconciliation(
            db=db, error=e, user_id=user.id, now=now
        )
        raise

    logger.info(f"Voucher {voucher.code} saved for PayPal order {capture.order_id}")
    await notify_customer(user=user, voucher=voucher, order_number=capture.order_id)
    return VoucherPurchaseResult(voucher=voucher, is_new=True)


async def create_bank_transfer_voucher(
    db: Session,
    current_user: User,
    amount: Optional[Decimal],
    user_id: Optional[uuid.UUID],
) -> Voucher:
    """
    Pending voucher paid by bank transfer, no PayPal order involved.

    Raises:
        ValidationError: amount not positive or user id missing
        PermissionError: user id does not belong to the authenticated user
        PersistenceError: the voucher row could not be written
    """
    if amount is None or not amount.is_finite() or amount <= 0:
        raise ValidationError("Invalid amount")
    if user_id is None:
        raise ValidationError("User ID is required")
    if current_user.id != user_id:
        raise PermissionError("Unauthorized")

    now = get_current_time_in_timezone(TZ)
    voucher = persist_voucher(
        db=db,
        user_id=current_user.id,
        value=amount,
        status=VoucherStatus.PENDING,
        paypal_order_id=None,
        now=now,
    )
    logger.info(f"Bank transfer voucher {voucher.code} created for user {current_user.id}")
    await notify_customer(user=current_user, voucher=voucher)
    return voucher


def reconcile_voucher(db: Session, reconciliation, now: datetime) -> Voucher:
    """Insert the voucher a captured payment never got, then close the reconciliation.

    A voucher already present for the PayPal order closes the reconciliation
    without a second insert. A failed write is rolled back and raised as
    PersistenceError, the reconciliation stays open.
    """
    reconciliation_id = str(reconciliation.id)
    code = reconciliation.voucher_code
    order_id = reconciliation.paypal_order_id

    voucher = None
    if order_id:
        voucher = voucherRepo.get_voucher_by_paypal_order_id(db=db, paypal_order_id=order_id)
    if voucher is None:
        voucher = voucherRepo.get_voucher_by_code(db=db, code=code)
        if voucher is not None and voucher.paypal_order_id != order_id:
            raise ValidationError(
                f"Voucher code {code} of reconciliation {reconciliation_id} "
                f"belongs to another voucher, resolve it by hand"
            )
    if voucher is None and not reconciliation.user_id:
        raise ValidationError(
            f"Reconciliation {reconciliation_id} has no user, resolve it by hand"
        )

    try:
        if voucher is None:
            voucher = voucherRepo.create_voucher(
                db=db,
                user_id=uuid.UUID(reconciliation.user_id),
                code=code,
                value=reconciliation.value,
                status=VoucherStatus.ACTIVE,
                paypal_order_id=order_id,
                valid_until=reconciliation.valid_until,
                created_at=now,
                is_commit=False,
            )
            logger.info(f"Voucher {code} restored for PayPal order {order_id}")
        reconciliationRepo.resolve_reconciliation(
            db=db, reconciliation=reconciliation, resolved_at=now, is_commit=False
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to resolve reconciliation {reconciliation_id}: {e}")
        raise PersistenceError(
            "Voucher reconciliation failed",
            details=str(getattr(e, "orig", None) or e),
            voucher_code=code,
            paypal_order_id=order_id,
            reconciliation_id=reconciliation_id,
        ) from e
    return voucher
