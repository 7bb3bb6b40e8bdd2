"""Tests for Supabase store helpers."""

from unittest.mock import MagicMock, patch

import pytest

from src.services import supabase_client
from src.services.supabase_client import (
    get_listing_by_id,
    get_supabase_client,
    insert_lead,
    ping_store,
    reset_supabase_client,
)
from src.utils.errors import SupabaseError


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_id_found(mock_supabase_client, listing_row):
    mock_supabase_client.query.execute.return_value = MagicMock(data=[listing_row])

    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        row = await get_listing_by_id(1)

    assert row["titre"] == "Loft A"
    mock_supabase_client.table.assert_called_once_with("biens")
    mock_supabase_client.query.eq.assert_called_once_with("id", 1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_id_missing(mock_supabase_client):
    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        assert await get_listing_by_id(999) is None


@pytest.mark.unit
@pytest.mark.asyncio
async def test_get_listing_by_id_store_error(mock_supabase_client):
    mock_supabase_client.query.execute.side_effect = RuntimeError("connection refused")

    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        with pytest.raises(SupabaseError, match="connection refused"):
            await get_listing_by_id(1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_lead_returns_row(mock_supabase_client):
    mock_supabase_client.query.execute.return_value = MagicMock(data=[{"id": 5, "phone": "0600000000"}])

    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        row = await insert_lead({"listing_id": 1, "phone": "0600000000"})

    assert row["id"] == 5
    mock_supabase_client.table.assert_called_once_with("leads")
    mock_supabase_client.query.insert.assert_called_once_with({"listing_id": 1, "phone": "0600000000"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_lead_without_returned_row(mock_supabase_client):
    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        with pytest.raises(SupabaseError, match="no data returned"):
            await insert_lead({"listing_id": 1, "phone": "0600000000"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_insert_lead_error_detail(mock_supabase_client):
    mock_supabase_client.query.execute.side_effect = RuntimeError("violates foreign key constraint")

    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        with pytest.raises(SupabaseError, match="violates foreign key constraint"):
            await insert_lead({"listing_id": 999, "phone": "0600000000"})


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ping_store(mock_supabase_client):
    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        assert await ping_store() is True

    mock_supabase_client.query.select.assert_called_once_with("id")
    mock_supabase_client.query.limit.assert_called_once_with(1)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_ping_store_failure(mock_supabase_client):
    mock_supabase_client.query.execute.side_effect = RuntimeError("timeout")

    with patch("src.services.supabase_client.get_supabase_client", return_value=mock_supabase_client):
        with pytest.raises(SupabaseError):
            await ping_store()


@pytest.mark.unit
def test_get_supabase_client_requires_credentials(monkeypatch):
    reset_supabase_client()
    monkeypatch.delenv("SUPABASE_URL", raising=False)

    with pytest.raises(SupabaseError, match="SUPABASE_URL"):
        get_supabase_client()


@pytest.mark.unit
def test_get_supabase_client_is_cached():
    reset_supabase_client()
    sentinel = MagicMock()

    with patch("src.services.supabase_client.create_client", return_value=sentinel) as mock_create:
        assert get_supabase_client() is sentinel
        assert get_supabase_client() is sentinel

    mock_create.assert_called_once()
    reset_supabase_client()
    assert supabase_client._client is None
