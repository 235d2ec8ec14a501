"""
Admin session: created at login, carried as a signed JWT, cleared at logout.

Routes never look up "the current user" themselves; they depend on
``get_owner_id`` which resolves the owner once per request.
"""
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from feeledger.config import settings
from feeledger.errors import NotAuthenticatedError, ValidationError

logger = logging.getLogger(__name__)

SESSION_COOKIE = "user_token"
LANGUAGES = ("en", "hi")

security = HTTPBearer(auto_error=False)


@dataclass
class AdminSession:
    owner_id: str
    language: str = "en"


def authenticate_admin(email, password) -> AdminSession:
    email_ok = hmac.compare_digest((email or "").strip().lower(), settings.ADMIN_EMAIL.lower())
    password_ok = hmac.compare_digest(password or "", settings.ADMIN_PASSWORD)
    if not (email_ok and password_ok):
        logger.warning("Failed admin login for %s", email)
        raise NotAuthenticatedError("Invalid email or password")
    return AdminSession(owner_id=settings.ADMIN_EMAIL.lower())


def start_session(session: AdminSession, language="en") -> AdminSession:
    if language not in LANGUAGES:
        raise ValidationError("Language must be one of: " + ", ".join(LANGUAGES))
    session.language = language
    return session


def create_access_token(session: AdminSession) -> str:
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": session.owner_id, "lang": session.language, "role": "admin", "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def read_access_token(token) -> AdminSession:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        raise NotAuthenticatedError("Session expired, please login again")

    owner_id = payload.get("sub")
    if not owner_id or payload.get("role") != "admin":
        raise NotAuthenticatedError()
    return AdminSession(owner_id=owner_id, language=payload.get("lang", "en"))


def get_admin_session(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AdminSession:
    token = credentials.credentials if credentials else request.cookies.get(SESSION_COOKIE)
    if not token:
        raise NotAuthenticatedError()
    return read_access_token(token)


def get_owner_id(session: AdminSession = Depends(get_admin_session)) -> str:
    return session.owner_id
