from datetime import datetime
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from models.Voucher import Voucher


class VoucherResponseItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    value: Decimal
    status: str
    effective_status: str
    payment_method: str
    paypal_order_id: Optional[str] = None
    valid_until: datetime
    created_at: datetime

    @field_serializer("value")
    def serialize_value(self, value: Decimal) -> float:
        return float(value)

    @classmethod
    def from_model(cls, voucher: Voucher) -> "VoucherResponseItem":
        return cls(
            id=voucher.id,
            code=voucher.code,
            value=voucher.value,
            status=voucher.status,
            effective_status=voucher.effective_status(),
            payment_method=voucher.payment_method,
            paypal_order_id=voucher.paypal_order_id,
            valid_until=voucher.valid_until,
            created_at=voucher.created_at,
        )


class VoucherListResponse(BaseModel):
    results: List[VoucherResponseItem]


class BankTransferVoucherRequest(BaseModel):
    amount: Optional[Decimal] = None
    user_id: Optional[UUID] = Field(None, alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class BankTransferVoucherResponse(BaseModel):
    success: bool = True
    voucher_code: str
    amount: float
    valid_until: datetime
    payment_method: str
    voucher: VoucherResponseItem
