from datetime import datetime, timedelta, timezone
from typing import Tuple
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import jwt, JWTError
from sqlmodel import Session

from registry.config import ACCESS_TOKEN_EXPIRE_MINUTES, JWT_ALGORITHM, JWT_SECRET
from registry.db.db import get_session
from registry.models.user import User
from registry.services.identity import is_administrator

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user: User) -> Tuple[str, int]:
    now = datetime.now(timezone.utc)
    expiry = now + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    jwt_payload = {
        "sub": user.id,
        "iat": now,
        "exp": expiry,
    }

    token = jwt.encode(jwt_payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
    return token, int(expiry.timestamp())


def get_current_user(
    token: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    try:
        payload = jwt.decode(token.credentials, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user_id = payload.get("sub")
    user = session.get(User, user_id) if user_id else None
    if not user:
        raise HTTPException(status_code=401, detail="User no longer exists")

    return user


def get_onboarded_user(user: User = Depends(get_current_user)) -> User:
    if not user.onboarded:
        raise HTTPException(status_code=403, detail="Complete onboarding first")
    return user


def require_admin(user: User = Depends(get_onboarded_user)) -> User:
    if not is_administrator(user.email):
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
