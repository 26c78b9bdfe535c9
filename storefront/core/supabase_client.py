# storefront/core/supabase_client.py
from supabase import AsyncClient, acreate_client

from storefront.core.config import Settings


async def supabase_public(settings: Settings) -> AsyncClient:
    """
    Create an async Supabase client with the anon/public key.

    Use cases:
      - table reads/writes on behalf of the signed-in shopper
      - email/password auth and session change notifications

    Note: This client respects RLS. Every policy decision is made by
    Supabase; a denied row surfaces as a 42501 error.
    """
    return await acreate_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
