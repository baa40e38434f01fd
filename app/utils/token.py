from jose import JWTError, jwt
from datetime import datetime, timedelta
from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import Session
from app.config import settings
from app.database import get_session
from app.exceptions import AuthenticationError, AuthorizationError
from app.models.user import User

# tokens are issued by the accounts service; this API only verifies them
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.utcnow() + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def get_current_user(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session)
) -> User:
    payload = decode_access_token(token)
    if payload is None:
        raise AuthenticationError("Could not validate credentials")

    user_id = payload.get("user_id") or payload.get("sub")
    if user_id is None:
        raise AuthenticationError("Invalid token payload")

    try:
        user = session.get(User, int(user_id))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token payload")

    if user is None:
        raise AuthenticationError("User not found")

    if not user.can_login:
        raise AuthorizationError("User account is disabled")

    return user
