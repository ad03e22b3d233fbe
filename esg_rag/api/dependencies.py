"""FastAPI dependencies for the shared services and caller identity."""

from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, Request

from esg_rag.api.container import Services
from esg_rag.auth.credentials import resolve_credentials


def get_services(request: Request) -> Services:
    return request.app.state.services


async def authenticated_email(
    email: Optional[str] = Header(default=None),
    password: Optional[str] = Header(default=None),
    x_api_key: Optional[str] = Header(default=None),
    services: Services = Depends(get_services),
) -> str:
    """Resolve header credentials and verify them; the caller's email on success."""
    credentials = resolve_credentials(email, password, x_api_key)
    return await services.authenticator.authenticate(credentials)
