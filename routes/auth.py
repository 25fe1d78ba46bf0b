from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Response
from fastapi.security import OAuth2PasswordRequestForm
from pytz import timezone
from sqlalchemy.orm import Session

from core.responses import (
    BadRequest,
    Created,
    Ok,
    Unauthorized,
    common_response,
)
from core.security import (
    generate_hash_password,
    generate_token_from_user,
    get_token_from_request,
    get_user_from_token,
    invalidate_token,
    validated_password,
)
from models import get_db_sync
from repository import user as userRepo
from schemas.auth import (
    LoginEmailRequest,
    LoginSuccessResponse,
    LogoutSuccessResponse,
    MeResponse,
    SignUpRequest,
)
from schemas.common import (
    BadRequestResponse,
    InternalServerErrorResponse,
    UnauthorizedResponse,
)
from settings import (
    ACCESS_TOKEN_COOKIE_NAME,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    DEPLOYMENT_MODE,
    TZ,
)
from validators.email import is_valid_email

router = APIRouter(prefix="/auth", tags=["Auth"])

MIN_PASSWORD_LENGTH = 8


def set_session_cookie(response: Response, token: str) -> Response:
    """Session cookie for browser redirects back from PayPal, which carry no bearer header."""
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE_NAME,
        value=token,
        max_age=int(ACCESS_TOKEN_EXPIRE_MINUTES) * 60,
        httponly=True,
        secure=DEPLOYMENT_MODE != "development",
        samesite="lax",
    )
    return response


@router.post("/token/")
async def swagger_form_token(
    form_data: OAuth2PasswordRequestForm = Depends(), db: Session = Depends(get_db_sync)
):
    user = userRepo.get_user_by_email(db=db, email=form_data.username)
    if user is None:
        return common_response(BadRequest(message="Invalid Credentials"))

    if not user.is_active:
        return common_response(BadRequest(message="Invalid Credentials"))

    is_valid = validated_password(user.password, form_data.password)
    if not is_valid:
        return common_response(BadRequest(message="Invalid Credentials"))

    (token, refresh_token) = await generate_token_from_user(db=db, user=user)

    return {"access_token": token, "token_type": "bearer"}


@router.get(
    "/me/",
    responses={
        "200": {"model": MeResponse},
        "401": {"model": UnauthorizedResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def me(
    db: Session = Depends(get_db_sync),
    token: Optional[str] = Depends(get_token_from_request),
):
    user = get_user_from_token(db=db, token=token)
    if user is None:
        return common_response(Unauthorized(message="Invalid Credentials"))

    return common_response(
        Ok(
            data={
                "id": str(user.id),
                "email": user.email,
                "username": user.username,
                "full_name": user.full_name,
                "is_admin": bool(user.is_admin),
            }
        )
    )


@router.post(
    "/logout/",
    responses={
        "200": {"model": LogoutSuccessResponse},
        "401": {"model": UnauthorizedResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def logout(
    db: Session = Depends(get_db_sync),
    token: Optional[str] = Depends(get_token_from_request),
):
    user = get_user_from_token(db=db, token=token)
    if user is None:
        return common_response(Unauthorized(message="Invalid Credentials"))

    invalidate_token(db=db, token=token)
    response = common_response(Ok(data={"message": "logout successfully"}))
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE_NAME, httponly=True, samesite="lax")
    return response


@router.post(
    "/email/signup/",
    responses={
        "201": {"model": MeResponse},
        "400": {"model": BadRequestResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def email_signup(request: SignUpRequest, db: Session = Depends(get_db_sync)):
    if not is_valid_email(request.email):
        return common_response(BadRequest(message="Invalid email address"))

    if len(request.password) < MIN_PASSWORD_LENGTH:
        return common_response(
            BadRequest(
                message=f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        )

    existing_user = userRepo.get_user_by_email(db=db, email=request.email)
    if existing_user:
        return common_response(BadRequest(message="Email already registered"))

    now = datetime.now().astimezone(timezone(TZ))
    user = userRepo.create_user(
        db=db,
        email=request.email,
        username=request.email.strip().lower(),
        password=generate_hash_password(request.password),
        full_name=request.full_name,
        is_active=True,
        created_at=now,
    )
    return common_response(
        Created(
            data={
                "id": str(user.id),
                "email": user.email,
                "username": user.username,
                "full_name": user.full_name,
                "is_admin": bool(user.is_admin),
            }
        )
    )


@router.post(
    "/email/signin/",
    responses={
        "200": {"model": LoginSuccessResponse},
        "400": {"model": BadRequestResponse},
        "500": {"model": InternalServerErrorResponse},
    },
)
async def email_signin(request: LoginEmailRequest, db: Session = Depends(get_db_sync)):
    user = userRepo.get_user_by_email(db=db, email=request.email)
    if user is None:
        return common_response(BadRequest(message="Invalid Credentials"))

    if user.password is None:
        return common_response(BadRequest(message="Invalid Credentials"))

    if not user.is_active:
        return common_response(BadRequest(message="Invalid Credentials"))

    is_valid = validated_password(user.password, request.password)
    if not is_valid:
        return common_response(BadRequest(message="Invalid Credentials"))

    (token, refresh_token) = await generate_token_from_user(db=db, user=user)
    response = common_response(
        Ok(
            data={
                "id": str(user.id),
                "email": user.email,
                "is_active": user.is_active,
                "token": token,
                "refresh_token": refresh_token,
            }
        )
    )
    return set_session_cookie(response, token)
