from datetime import datetime, timedelta
from typing import Optional, Tuple

import bcrypt
import jwt
import pytz
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from pytz import timezone
from sqlalchemy import delete, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.orm import Session as SQLAlchemySession

from models import get_db_sync
from models.RefreshToken import RefreshToken
from models.Token import Token
from models.User import User
from settings import (
    ACCESS_TOKEN_COOKIE_NAME,
    ACCESS_TOKEN_EXPIRE_MINUTES,
    ALGORITHM,
    REFRESH_TOKEN_EXPIRE_MINUTES,
    SECRET_KEY,
    TZ,
)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token/", auto_error=False)


def generate_hash_password(password: str) -> str:
    hash = bcrypt.hashpw(str.encode(password), bcrypt.gensalt())
    return hash.decode()


def validated_password(hash: str, password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hash.encode())
    except Exception:
        return False


def _as_aware(moment: datetime) -> datetime:
    # sqlite hands back naive datetimes, they were written in TZ
    if moment.tzinfo is None:
        return timezone(TZ).localize(moment)
    return moment


async def generate_token_from_user(
    db: SQLAlchemySession, user: User
) -> Tuple[str, str]:
    """
    {
        "id": "aaaa-bbbb-cccc-dddd",
        "username": "someusername",
        "exp": 1641455971,
    }
    """
    now = datetime.now(timezone(TZ))
    expire = now + timedelta(minutes=float(ACCESS_TOKEN_EXPIRE_MINUTES))
    payload = {
        "id": str(user.id),
        "username": user.username or user.email,
        "exp": expire,
    }
    token = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
    new_token = Token(user=user, token=token, expired_at=expire)
    db.add(new_token)
    refresh_expire = now + timedelta(minutes=float(REFRESH_TOKEN_EXPIRE_MINUTES))
    payload = {
        "id": str(user.id),
        "username": user.username or user.email,
        "exp": refresh_expire,
        "type": "refresh",
    }
    refresh_token = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
    new_refresh_token = RefreshToken(
        user=user,
        refresh_token=refresh_token,
        token=new_token,
        expired_at=refresh_expire,
    )
    db.add(new_refresh_token)
    db.commit()
    return (token, refresh_token)


def get_user_from_token(db: SQLAlchemySession, token: Optional[str]) -> Optional[User]:
    if not token:
        return None
    now = datetime.now().astimezone(pytz.timezone(TZ))
    try:
        payload = jwt.decode(jwt=token, key=SECRET_KEY, algorithms=[ALGORITHM])
        id = payload.get("id")
    except Exception:
        invalidate_token(db=db, token=token)
        return None

    stmt = select(Token).where(Token.token == token)
    session = db.execute(stmt).scalar()
    if session is None or str(session.user_id) != id:
        return None
    if _as_aware(session.expired_at) <= now:
        invalidate_token(db=db, token=token)
        return None

    return session.user


def get_token_from_request(
    request: Request, token: Optional[str] = Depends(oauth2_scheme)
) -> Optional[str]:
    """Bearer header first, then the session cookie set for browser redirects."""
    if token:
        return token
    return request.cookies.get(ACCESS_TOKEN_COOKIE_NAME)


def get_current_user(
    db: Session = Depends(get_db_sync), token: Optional[str] = Depends(get_token_from_request)
) -> Optional[User]:
    return get_user_from_token(db, token)


def invalidate_token(db: SQLAlchemySession, token: str):
    # clear all expired token and selected_token
    now = datetime.now().astimezone(pytz.timezone(TZ))
    stale_tokens = select(Token.id).where(
        or_(Token.expired_at <= now, Token.token == token)
    )
    db.execute(delete(RefreshToken).where(RefreshToken.token_id.in_(stale_tokens)))
    db.execute(delete(Token).where(or_(Token.expired_at <= now, Token.token == token)))
    db.commit()
