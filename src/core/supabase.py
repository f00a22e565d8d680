"""Supabase clients.

Three flavours, by whose authority the calls run:

- get_supabase_client(): shared backend client on the secret key; bypasses
  row-level security, so only use it after the API layer has authorized
  the caller.
- create_user_client(token): fresh client carrying the caller's access
  token; row-level security applies.
- create_auth_client(): fresh client for Auth calls that set a session.
"""

import logging
from functools import lru_cache
from typing import Any

from supabase import Client, create_client
from supabase.lib.client_options import SyncClientOptions
from supabase_auth import SyncMemoryStorage

from src.core.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache
def get_supabase_client() -> Client:
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_secret_key)


def _isolated_options() -> SyncClientOptions:
    # Sessions stay in memory on this client only and are never refreshed
    return SyncClientOptions(
        storage=SyncMemoryStorage(),
        auto_refresh_token=False,
        persist_session=False,
    )


def create_auth_client() -> Client:
    """Fresh secret-key client for set_session / sign-in style Auth calls."""
    settings = get_settings()
    return create_client(settings.supabase_url, settings.supabase_secret_key, options=_isolated_options())


def create_user_client(access_token: str) -> Client:
    """Fresh client whose PostgREST calls run as the token's user.

    Args:
        access_token: The caller's verified Supabase access token.

    Returns:
        Client: Client scoped to that user.
    """
    settings = get_settings()
    client = create_client(settings.supabase_url, settings.user_client_key, options=_isolated_options())
    client.postgrest.auth(access_token)
    return client


async def check_database_connection() -> dict[str, Any]:
    """Run a one-row read against profiles.

    Returns:
        dict: {"healthy": bool} plus "error" when the query failed.
    """
    try:
        get_supabase_client().table("profiles").select("id").limit(1).execute()
    except Exception as e:
        logger.warning("Database readiness check failed: %s", e)
        return {"healthy": False, "error": str(e)}
    return {"healthy": True}
