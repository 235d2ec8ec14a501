from fastapi import APIRouter, Depends, Response

from feeledger.config import settings
from feeledger.schemas.auth import LoginSchema, Token, SessionOut
from feeledger.security import (
    SESSION_COOKIE, AdminSession, authenticate_admin, start_session,
    create_access_token, get_admin_session,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


# 1. Login: opens the admin session and hands it back as token + cookie
@router.post("/login", response_model=Token)
def process_login(response: Response, data: LoginSchema):
    session = start_session(authenticate_admin(data.email, data.password), data.language)
    token = create_access_token(session)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
    )
    return {"access_token": token, "token_type": "bearer"}


# 2. Current session
@router.get("/session", response_model=SessionOut)
def read_session(session: AdminSession = Depends(get_admin_session)):
    return session


# 3. Logout
@router.post("/logout")
def logout(response: Response):
    """Clears the session cookie; bearer tokens simply stop being sent by the client."""
    response.delete_cookie(SESSION_COOKIE)
    return {"message": "Logged out"}
