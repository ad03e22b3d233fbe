"""Password verification with a short-lived positive cache."""

from __future__ import annotations

import hashlib
import logging
from typing import Optional, Protocol

from redis.asyncio import Redis
from supabase import AsyncClient, AuthApiError, create_async_client
from supabase.lib.client_options import AsyncClientOptions

from esg_rag.auth.credentials import Credentials
from esg_rag.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

CACHE_PREFIX = "auth:"


class PasswordVerifier(Protocol):
    async def verify(self, credentials: Credentials) -> None: ...


class SupabaseVerifier:
    """Checks email/password through Supabase ``sign_in_with_password``."""

    def __init__(self, url: str, key: str, client: Optional[AsyncClient] = None) -> None:
        self.url = url
        self.key = key
        self._client = client

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            # sessions from one caller must not linger on the shared client
            self._client = await create_async_client(
                self.url,
                self.key,
                options=AsyncClientOptions(auto_refresh_token=False, persist_session=False),
            )
        return self._client

    async def verify(self, credentials: Credentials) -> None:
        client = await self._get_client()
        try:
            response = await client.auth.sign_in_with_password(
                {"email": credentials.email, "password": credentials.password}
            )
        except AuthApiError as exc:
            logger.info("Sign-in rejected for %s: %s", credentials.email, exc)
            raise AuthenticationError("Unauthorized") from exc
        user = response.user
        if user is None or user.role != "authenticated":
            raise AuthenticationError("You are not an authenticated user.")


def cache_key(credentials: Credentials) -> str:
    digest = hashlib.sha256(
        f"{credentials.email}\0{credentials.password}".encode("utf-8")
    ).hexdigest()
    return f"{CACHE_PREFIX}{digest}"


class Authenticator:
    """Verifies callers, remembering successful logins for ``ttl_seconds``."""

    def __init__(self, cache: Redis, verifier: PasswordVerifier, ttl_seconds: int = 3600) -> None:
        self.cache = cache
        self.verifier = verifier
        self.ttl_seconds = ttl_seconds

    async def authenticate(self, credentials: Credentials) -> str:
        """Return the caller's email, raising :class:`AuthenticationError` on failure."""
        key = cache_key(credentials)
        if await self.cache.exists(key):
            return credentials.email
        await self.verifier.verify(credentials)
        await self.cache.setex(key, self.ttl_seconds, "1")
        logger.debug("Cached login for %s", credentials.email)
        return credentials.email

    async def close(self) -> None:
        await self.cache.aclose()
