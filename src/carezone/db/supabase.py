"""Supabase client used to mirror service zones into a hosted table."""

import logging
from functools import lru_cache

from supabase import Client, create_client

from ..config import settings

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Cached Supabase client, or None when ``CAREZONE_SUPABASE_URL``/``_KEY`` are unset.

    Creating the client does not contact the server; failures surface on the
    first query and are handled by the zone sync listener.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.info("Supabase credentials not configured; zones stay local")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client for {settings.supabase_url}: {e}")
        return None
