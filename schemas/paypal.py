from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from schemas.voucher import VoucherResponseItem


class CreateOrderRequest(BaseModel):
    amount: Optional[Decimal] = None


class CreateOrderResponse(BaseModel):
    order_id: str = Field(..., serialization_alias="orderID")
    approve_link: Optional[str] = None
    links: List[Dict[str, Any]] = []


class CaptureOrderRequest(BaseModel):
    order_id: Optional[str] = Field(None, alias="orderID")
    user_id: Optional[UUID] = Field(None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class CaptureOrderResponse(BaseModel):
    success: bool = True
    voucher_code: str
    amount: float
    order_number: Optional[str] = None
    valid_until: datetime
    voucher: VoucherResponseItem


class PersistenceFailureResponse(BaseModel):
    message: str
    details: Optional[Any] = None
    voucher_code: Optional[str] = None
    paypal_order_id: Optional[str] = None
    amount: Optional[float] = None
    valid_until: Optional[datetime] = None
    reconciliation_id: Optional[str] = None
