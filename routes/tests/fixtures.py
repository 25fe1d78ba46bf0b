from datetime import datetime, timedelta

import jwt
from pytz import timezone
from sqlalchemy.orm import Session

from core.security import generate_hash_password
from models.Token import Token
from models.User import User
from settings import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY, TZ


def create_user(
    db: Session,
    email: str = "kunde@example.com",
    full_name: str = "Erika Mustermann",
    is_admin: bool = False,
) -> User:
    user = User(
        email=email,
        username=email,
        full_name=full_name,
        password=generate_hash_password("password"),
        is_active=True,
        is_admin=is_admin,
    )
    db.add(user)
    db.commit()
    return user


def create_token(db: Session, user: User) -> str:
    expire = datetime.now(tz=timezone(TZ)) + timedelta(
        minutes=float(ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    payload = {"id": str(user.id), "username": user.username, "exp": expire}
    token = jwt.encode(payload, SECRET_KEY, algorithm=ALGORITHM)
    db.add(Token(user_id=user.id, token=token, expired_at=expire))
    db.commit()
    return token
