"""Credential extraction from request headers."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Optional

from pydantic import BaseModel, ValidationError

from esg_rag.exceptions import AuthenticationError


class Credentials(BaseModel):
    email: str
    password: str


def decode_api_key(api_key: str) -> Optional[Credentials]:
    """Decode a base64 JSON ``{"email", "password"}`` API key, or ``None``."""
    if not api_key:
        return None
    try:
        payload = json.loads(base64.b64decode(api_key, validate=True).decode("utf-8"))
        credentials = Credentials.model_validate(payload)
    except (binascii.Error, UnicodeDecodeError, ValueError, ValidationError):
        return None
    if not credentials.email or not credentials.password:
        return None
    return credentials


def resolve_credentials(
    email: Optional[str],
    password: Optional[str],
    api_key: Optional[str],
) -> Credentials:
    """Merge header credentials with the API key; explicit headers win."""
    email = email or ""
    password = password or ""
    if api_key and (not email or not password):
        decoded = decode_api_key(api_key)
        if decoded is None:
            raise AuthenticationError("Invalid API Key")
        email = email or decoded.email
        password = password or decoded.password
    if not email or not password:
        raise AuthenticationError("Unauthorized")
    return Credentials(email=email, password=password)
