"""Moderator API key authentication."""

import hmac

from fastapi import HTTPException, Request

from backend.config.settings import get_settings


def require_admin_key(request: Request) -> None:
    """FastAPI dependency: validate the X-API-Key header against ADMIN_API_KEY."""
    settings = get_settings()
    if not settings.admin_api_key:
        raise HTTPException(status_code=503, detail="Moderation API is not configured")

    api_key = request.headers.get("X-API-Key")
    if not api_key:
        raise HTTPException(status_code=401, detail="API key required (X-API-Key header)")

    if not hmac.compare_digest(api_key.encode(), settings.admin_api_key.encode()):
        raise HTTPException(status_code=401, detail="Invalid API key")
