from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Cookie, HTTPException
from fastapi.responses import Response
from jose import jwt, JWTError

from event_service.config import (
    SESSION_SECRET,
    SESSION_ALGORITHM,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE,
    COOKIE_SECURE,
)

# ---------- SESSION TOKEN ----------
def create_session_token() -> str:
    payload = {
        "role": "admin",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=SESSION_MAX_AGE)
    }
    return jwt.encode(payload, SESSION_SECRET, algorithm=SESSION_ALGORITHM)

def is_admin_token(token: Optional[str]) -> bool:
    if not token:
        return False
    try:
        payload = jwt.decode(token, SESSION_SECRET, algorithms=[SESSION_ALGORITHM])
    except JWTError:
        return False
    return payload.get("role") == "admin"

# ---------- COOKIE ----------
def set_session_cookie(response: Response, token: str):
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        httponly=True,
        max_age=SESSION_MAX_AGE,
        samesite="lax",
        secure=COOKIE_SECURE
    )

def clear_session_cookie(response: Response):
    response.delete_cookie(SESSION_COOKIE_NAME)

# ---------- DEPENDENCY ----------
def require_admin(
    admin_session: Optional[str] = Cookie(None, alias=SESSION_COOKIE_NAME)
):
    """Reject the request unless it carries a valid admin session cookie"""
    if not is_admin_token(admin_session):
        raise HTTPException(status_code=401, detail="Unauthorized")
