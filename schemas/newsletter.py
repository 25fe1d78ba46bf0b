from typing import Optional
from pydantic import BaseModel


class NewsletterRequest(BaseModel):
    email: Optional[str] = None


class NewsletterResponse(BaseModel):
    success: bool = True
    message: str
