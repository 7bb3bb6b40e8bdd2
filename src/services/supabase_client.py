"""Supabase client wrapper with async context manager support."""

import os
import logging
from typing import Optional
from supabase import create_client, Client
from supabase.client import ClientOptions
from src.utils.config import AppConfig
from src.utils.errors import SupabaseError

logger = logging.getLogger(__name__)

# Global client instance (singleton pattern)
_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """Get or create Supabase client singleton."""
    global _client

    if _client is None:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        options = ClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        _client = create_client(url, key, options)
        logger.info("Supabase client initialized", extra={"supabase_url": url})

    return _client


def reset_supabase_client() -> None:
    """Drop the cached client so the next call rebuilds it."""
    global _client
    _client = None


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[Client] = None

    async def __aenter__(self) -> Client:
        self.client = get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "error_type": exc_type.__name__}
            )
        return False


async def ping_store() -> bool:
    """Cheapest possible read against the listings table."""
    async with SupabaseClient() as client:
        try:
            client.table(AppConfig.LISTINGS_TABLE).select("id").limit(1).execute()
            return True
        except Exception as e:
            raise SupabaseError(f"Failed to reach listings table: {e}")


# Listings table operations
async def get_listing_by_id(listing_id: int) -> Optional[dict]:
    """Get listing row by ID, None when it does not exist."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LISTINGS_TABLE).select("*").eq("id", listing_id).limit(1).execute()
            return result.data[0] if result.data and len(result.data) > 0 else None
        except Exception as e:
            raise SupabaseError(f"Failed to get listing: {e}")


# Leads table operations
async def insert_lead(lead_data: dict) -> dict:
    """Insert a lead row and return it as stored."""
    async with SupabaseClient() as client:
        try:
            result = client.table(AppConfig.LEADS_TABLE).insert(lead_data).execute()
        except Exception as e:
            raise SupabaseError(f"Failed to create lead: {e}")
        if result.data and len(result.data) > 0:
            return result.data[0]
        raise SupabaseError("Failed to create lead: no data returned")
