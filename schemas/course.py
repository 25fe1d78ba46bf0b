from typing import List, Optional
from uuid import UUID
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, field_serializer


class CourseResponseItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: Optional[str] = None
    price: Decimal
    duration_minutes: Optional[int] = None
    max_participants: Optional[int] = None

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class CourseListResponse(BaseModel):
    results: List[CourseResponseItem]
