"""Shared pytest fixtures and configuration."""

import os
import pytest

# Set test environment variables
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("SUPABASE_URL", "https://test.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "test-key")
os.environ.setdefault("LLM_PROVIDER", "openai")
os.environ.setdefault("LLM_MODEL", "gpt-4o-mini")
os.environ.setdefault("LOG_FORMAT", "text")

from src.models.listing import Listing
from tests.fixtures.listings import loft_row, bare_row
from tests.utils.helpers import FakeCompletionProvider


@pytest.fixture
def listing_row():
    """Listing row as returned by Supabase."""
    return loft_row()


@pytest.fixture
def listing(listing_row):
    return Listing.model_validate(listing_row)


@pytest.fixture
def bare_listing():
    """Listing with nothing but an id."""
    return Listing.model_validate(bare_row())


@pytest.fixture
def working_provider():
    """Completion provider that answers."""
    return FakeCompletionProvider(reply="  Oui, le bien dispose d'un balcon. Souhaitez-vous organiser une visite ?  ")


@pytest.fixture
def failing_provider():
    """Completion provider that is down."""
    return FakeCompletionProvider(error=RuntimeError("503 Service Unavailable"))


@pytest.fixture
def blank_provider():
    """Completion provider returning only whitespace."""
    return FakeCompletionProvider(reply="   \n  ")


@pytest.fixture
def mock_supabase_client():
    """Mock Supabase client whose query builder chains back onto itself."""
    from unittest.mock import MagicMock

    client = MagicMock()
    query = MagicMock()
    for method in ("select", "eq", "limit", "insert"):
        getattr(query, method).return_value = query
    query.execute.return_value = MagicMock(data=[])
    client.table.return_value = query
    client.query = query
    return client
