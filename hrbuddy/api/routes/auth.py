"""Session login endpoints."""

import logging
import secrets

from fastapi import APIRouter, Depends, HTTPException, Request

from hrbuddy.api.deps import require_user
from hrbuddy.api.limiter import limiter
from hrbuddy.api.schemas import LoginRequest, SessionUser
from hrbuddy.config import settings

logger = logging.getLogger(__name__)

router = APIRouter()


def authenticate(email: str, password: str) -> SessionUser | None:
    """Check credentials against the configured admin account."""
    if not settings.admin_password:
        return None
    email_ok = secrets.compare_digest(email.lower().encode(), settings.admin_email.lower().encode())
    password_ok = secrets.compare_digest(password.encode(), settings.admin_password.encode())
    if not (email_ok and password_ok):
        return None
    # Single admin account for now; everyone who logs in is an admin
    return SessionUser(id="1", name="Admin User", email=settings.admin_email, role="admin")


@router.post("/login", response_model=SessionUser)
@limiter.limit("5/minute")
def login(request: Request, credentials: LoginRequest):
    """Log in and start a session."""
    user = authenticate(credentials.email, credentials.password)
    if user is None:
        logger.info(f"Failed login for {credentials.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session["user"] = user.model_dump()
    return user


@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"success": True}


@router.get("/session", response_model=SessionUser)
def current_session(user: dict = Depends(require_user)):
    return SessionUser(**user)
