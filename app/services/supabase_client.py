"""
Supabase initialization
"""

from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client

from app.core.config import settings


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create and cache the Supabase client.

    Expects credentials via SUPABASE_URL and SUPABASE_KEY (a service key, since
    the API enforces ownership itself rather than through row level security).
    """
    if not settings.SUPABASE_URL or not settings.SUPABASE_KEY:
        raise RuntimeError("Supabase credentials not provided. Set SUPABASE_URL and SUPABASE_KEY")
    return create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
