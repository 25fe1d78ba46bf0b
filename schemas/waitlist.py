from datetime import date, datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class WaitlistAddRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_id: Optional[UUID] = Field(None, alias="courseId")
    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_email: Optional[str] = Field(None, alias="customerEmail")
    participants: int = 1
    participant_names: List[str] = Field([], alias="participantNames")
    auto_book: bool = Field(False, alias="autoBook")
    preferred_date: Optional[date] = Field(None, alias="preferredDate")


class WaitlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    course_id: UUID
    user_id: Optional[UUID] = None
    customer_name: str
    customer_email: str
    participants: int
    participant_names: Optional[str] = None
    auto_book: bool
    preferred_date: Optional[date] = None
    status: str
    created_at: datetime


class WaitlistAddResponse(BaseModel):
    success: bool = True
    message: str
    waitlist_entry: WaitlistEntryResponse
