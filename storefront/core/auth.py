# storefront/core/auth.py
import time
from typing import Any

from jose import jwt

from storefront.core.config import get_settings


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode a Supabase access token (JWT).

    Verification:
      - signature + expiration (exp), only when SUPABASE_JWT_SECRET is set
      - audience is NOT verified (Supabase 'aud' may vary)

    Without a secret the claims are read as-is; Supabase has already
    validated the token when it handed us the session.

    Args:
        token: raw JWT from the Supabase session.

    Returns:
        Decoded JWT claims.

    Raises:
        jose.JWTError: if the token is malformed, or invalid/expired
        while verification is enabled.
    """
    settings = get_settings()
    if not settings.SUPABASE_JWT_SECRET:
        return jwt.get_unverified_claims(token)

    return jwt.decode(
        token,
        settings.SUPABASE_JWT_SECRET,
        algorithms=[settings.SUPABASE_JWT_ALG],
        options={"verify_aud": False},
    )


def is_expired(expires_at: int | None, now: float | None = None) -> bool:
    """True once the token's exp timestamp has passed. Tokens without exp never expire."""
    if expires_at is None:
        return False
    if now is None:
        now = time.time()
    return expires_at <= now
