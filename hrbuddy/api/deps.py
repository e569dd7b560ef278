"""Shared route dependencies: auth, webhook secret, MCP service."""

import secrets

from fastapi import Header, HTTPException, Request

from hrbuddy.config import settings
from hrbuddy.services.mcp_service import McpService


def get_mcp_service(request: Request) -> McpService:
    """The MCP service created at startup."""
    return request.app.state.mcp_service


def require_user(request: Request) -> dict:
    """Require a logged-in session. Returns the session user."""
    user = request.session.get("user")
    if not user:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user


def verify_webhook_secret(authorization: str | None = Header(None)) -> None:
    """Check ``Authorization: Bearer <ZAPIER_WEBHOOK_SECRET>``."""
    secret = settings.zapier_webhook_secret
    if not secret or not authorization:
        raise HTTPException(status_code=401, detail="Unauthorized")
    if not secrets.compare_digest(authorization.encode(), f"Bearer {secret}".encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
