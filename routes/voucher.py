import traceback
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.exceptions import VoucherFlowError
from core.log import logger
from core.responses import (
    Created,
    Forbidden,
    InternalServerError,
    NotFound,
    Ok,
    Unauthorized,
    VoucherFlowFailure,
    common_response,
)
from core.security import get_current_user
from core.voucher_service import create_bank_transfer_voucher
from models import get_db_sync
from models.User import User
from repository import voucher as voucherRepo
from schemas.common import (
    BadRequestResponse,
    ForbiddenResponse,
    InternalServerErrorResponse,
    NotFoundResponse,
    UnauthorizedResponse,
)
from schemas.voucher import (
    BankTransferVoucherRequest,
    BankTransferVoucherResponse,
    VoucherListResponse,
    VoucherResponseItem,
)

router = APIRouter(prefix="/api/vouchers", tags=["Voucher"])


@router.get(
    "/",
    responses={
        "200": {"model": VoucherListResponse},
        "401": {"model": UnauthorizedResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
def list_vouchers(
    db: Session = Depends(get_db_sync),
    user: User = Depends(get_current_user),
):
    if user is None:
        return common_response(Unauthorized())

    vouchers = voucherRepo.get_vouchers_by_user_id(db=db, user_id=user.id)
    response = VoucherListResponse(
        results=[VoucherResponseItem.from_model(voucher) for voucher in vouchers]
    )
    return common_response(Ok(data=response.model_dump(mode="json")))


@router.post(
    "/create-bank-transfer",
    responses={
        "201": {"model": BankTransferVoucherResponse},
        "400": {"model": BadRequestResponse},
        "401": {"model": UnauthorizedResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def create_bank_transfer(
    request: BankTransferVoucherRequest,
    db: Session = Depends(get_db_sync),
    user: User = Depends(get_current_user),
):
    if user is None:
        return common_response(Unauthorized())

    try:
        voucher = await create_bank_transfer_voucher(
            db=db, current_user=user, amount=request.amount, user_id=request.user_id
        )
    except PermissionError as e:
        return common_response(Unauthorized(message=str(e)))
    except VoucherFlowError as e:
        return common_response(VoucherFlowFailure(error=e))
    except Exception as e:
        db.rollback()
        traceback.print_exc()
        logger.error(f"Bank transfer voucher error: {e}")
        return common_response(InternalServerError(error="Internal server error"))

    response = BankTransferVoucherResponse(
        voucher_code=voucher.code,
        amount=float(voucher.value),
        valid_until=voucher.valid_until,
        payment_method=voucher.payment_method,
        voucher=VoucherResponseItem.from_model(voucher),
    )
    return common_response(Created(data=response.model_dump(mode="json")))


@router.get(
    "/{voucher_id}",
    responses={
        "200": {"model": VoucherResponseItem},
        "401": {"model": UnauthorizedResponse},
        "403": {"model": ForbiddenResponse},
        "404": {"model": NotFoundResponse},
    },
)
def get_voucher(
    voucher_id: UUID,
    db: Session = Depends(get_db_sync),
    user: User = Depends(get_current_user),
):
    if user is None:
        return common_response(Unauthorized())

    voucher = voucherRepo.get_voucher_by_id(db=db, id=voucher_id)
    if voucher is None:
        return common_response(NotFound(message="Voucher not found"))

    if voucher.user_id != user.id and not user.is_admin:
        return common_response(Forbidden())

    return common_response(
        Ok(data=VoucherResponseItem.from_model(voucher).model_dump(mode="json"))
    )
