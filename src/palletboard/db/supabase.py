"""Supabase client for the shared board row."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Cached client for the remote board mirror.

    Returns ``None`` when ``PALLET_SUPABASE_URL`` or ``PALLET_SUPABASE_KEY`` is
    missing; remote sync is then disabled and the board runs on local storage
    only. Creating the client does not contact the server.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured; board will not be mirrored remotely")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
