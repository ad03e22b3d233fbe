"""Caller authentication against Supabase with a Redis positive cache."""

from .authenticator import Authenticator, SupabaseVerifier
from .credentials import Credentials, decode_api_key, resolve_credentials

__all__ = [
    "Authenticator",
    "Credentials",
    "SupabaseVerifier",
    "decode_api_key",
    "resolve_credentials",
]
