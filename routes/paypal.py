import traceback
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from core.exceptions import PersistenceError, VoucherFlowError
from core.log import logger
from core.paypal_service import PayPalService, get_paypal_service
from core.responses import (
    InternalServerError,
    Ok,
    VoucherFlowFailure,
    common_response,
)
from core.security import get_current_user
from core.voucher_service import capture_voucher_purchase
from models import get_db_sync
from models.User import User
from schemas.common import (
    BadRequestResponse,
    ConflictResponse,
    InternalServerErrorResponse,
    ValidationErrorResponse,
)
from schemas.paypal import (
    CaptureOrderRequest,
    CaptureOrderResponse,
    CreateOrderRequest,
    CreateOrderResponse,
    PersistenceFailureResponse,
)
from schemas.voucher import VoucherResponseItem
from settings import FRONTEND_BASE_URL

router = APIRouter(prefix="/api/paypal", tags=["PayPal"])


def frontend_redirect(path: str, params: Optional[dict] = None) -> RedirectResponse:
    url = f"{FRONTEND_BASE_URL.rstrip('/')}{path}"
    if params:
        url = f"{url}?{urlencode(params)}"
    return RedirectResponse(url=url)


@router.post(
    "/create-order",
    responses={
        "200": {"model": CreateOrderResponse},
        "400": {"model": BadRequestResponse},
        "422": {"model": ValidationErrorResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def create_order(
    request: CreateOrderRequest,
    paypal: PayPalService = Depends(get_paypal_service),
):
    try:
        order = await paypal.create_order(amount=request.amount)
        return common_response(
            Ok(
                data=CreateOrderResponse(
                    order_id=order.order_id,
                    approve_link=order.approve_link,
                    links=order.links,
                ).model_dump(mode="json", by_alias=True)
            )
        )
    except VoucherFlowError as e:
        return common_response(VoucherFlowFailure(error=e))
    except Exception as e:
        traceback.print_exc()
        logger.error(f"PayPal create order error: {e}")
        return common_response(InternalServerError(error="Internal server error"))


@router.post(
    "/capture-order",
    responses={
        "200": {"model": CaptureOrderResponse},
        "400": {"model": BadRequestResponse},
        "409": {"model": ConflictResponse},
        "422": {"model": ValidationErrorResponse},
        "500": {"model": PersistenceFailureResponse},
    },
)
async def capture_order(
    request: CaptureOrderRequest,
    db: Session = Depends(get_db_sync),
    user: Optional[User] = Depends(get_current_user),
    paypal: PayPalService = Depends(get_paypal_service),
):
    try:
        result = await capture_voucher_purchase(
            db=db,
            paypal=paypal,
            order_id=request.order_id,
            user_id=request.user_id,
            current_user=user,
        )
        voucher = result.voucher
        return common_response(
            Ok(
                data=CaptureOrderResponse(
                    voucher_code=voucher.code,
                    amount=float(voucher.value),
                    order_number=voucher.paypal_order_id,
                    valid_until=voucher.valid_until,
                    voucher=VoucherResponseItem.from_model(voucher),
                ).model_dump(mode="json")
            )
        )
    except VoucherFlowError as e:
        return common_response(VoucherFlowFailure(error=e))
    except Exception as e:
        db.rollback()
        traceback.print_exc()
        logger.error(f"PayPal capture order error: {e}")
        return common_response(InternalServerError(error="Internal server error"))


@router.get("/success")
async def payment_success(
    token: Optional[str] = None,
    PayerID: Optional[str] = None,
    db: Session = Depends(get_db_sync),
    user: Optional[User] = Depends(get_current_user),
    paypal: PayPalService = Depends(get_paypal_service),
):
    if not token:
        return frontend_redirect("/", {"error": "missing_token"})

    logger.info(f"PayPal payment approved! Order ID: {token} Payer ID: {PayerID}")

    if user is None:
        logger.error(f"No authenticated user for PayPal order {token}")
        return frontend_redirect("/", {"error": "user_not_found"})

    try:
        result = await capture_voucher_purchase(
            db=db, paypal=paypal, order_id=token, current_user=user
        )
    except PersistenceError as e:
        logger.error(
            f"Payment captured but voucher not created: order={e.paypal_order_id} code={e.voucher_code}"
        )
        return frontend_redirect(
            "/vouchers",
            {"payment": "warning", "message": "voucher_creation_pending"},
        )
    except VoucherFlowError as e:
        logger.error(f"Failed to capture payment for order {token}: {e.message}")
        return frontend_redirect(
            "/vouchers",
            {
                "payment": "error",
                "error": e.message,
                "details": "" if e.details is None else str(e.details),
            },
        )
    except Exception as e:
        db.rollback()
        traceback.print_exc()
        logger.error(f"PayPal success callback error: {e}")
        return frontend_redirect("/", {"error": "callback_failed"})

    voucher = result.voucher
    return frontend_redirect(
        "/voucher-success",
        {
            "payment": "success",
            "code": voucher.code,
            "amount": f"{voucher.value:.2f}",
            "order": voucher.paypal_order_id or token,
        },
    )


@router.get("/cancel")
async def payment_cancel(token: Optional[str] = None):
    logger.warning(f"PayPal payment cancelled. Order ID: {token}")
    return frontend_redirect("/vouchers", {"payment": "cancelled"})
