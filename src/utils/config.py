"""Application configuration read from environment variables."""

import os


class AppConfig:
    """Centralized application configuration."""

    SERVICE_NAME = os.environ.get("SERVICE_NAME", "immoway-proxy")

    # Supabase tables
    LISTINGS_TABLE = os.environ.get("LISTINGS_TABLE", "biens")
    LEADS_TABLE = os.environ.get("LEADS_TABLE", "leads")

    # Completion provider
    LLM_PROVIDER = os.environ.get("LLM_PROVIDER", "openai").lower()
    LLM_MODEL = os.environ.get("LLM_MODEL", "gpt-4o-mini")
    LLM_TIMEOUT_SECONDS = float(os.environ.get("LLM_TIMEOUT_SECONDS", "8"))
