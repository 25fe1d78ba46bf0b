from typing import Optional
from pydantic import BaseModel


class LoginEmailRequest(BaseModel):
    email: str
    password: str


class LoginSuccessResponse(BaseModel):
    id: str
    email: str
    is_active: bool
    token: str
    refresh_token: str


class MeResponse(BaseModel):
    id: str
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    is_admin: bool = False


class LogoutSuccessResponse(BaseModel):
    message: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    full_name: Optional[str] = None
