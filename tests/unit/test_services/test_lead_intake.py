"""Tests for lead intake."""

from unittest.mock import AsyncMock, patch

import pytest

from src.services.lead_intake import build_lead_record, create_lead
from src.utils.errors import LeadValidationError, SupabaseError


@pytest.mark.unit
def test_build_lead_record_defaults():
    record = build_lead_record(1, "0600000000")

    assert record == {
        "listing_id": 1,
        "name": None,
        "phone": "0600000000",
        "email": None,
        "message": "Demande d'information",
        "status": "new",
    }


@pytest.mark.unit
def test_build_lead_record_blank_message_gets_default():
    assert build_lead_record(1, "0600000000", message="   ")["message"] == "Demande d'information"


@pytest.mark.unit
@pytest.mark.parametrize("listing_id,phone,field", [
    (None, "0600000000", "listingId"),
    (0, "0600000000", "listingId"),
    (1, None, "phone"),
    (1, "  ", "phone"),
])
def test_build_lead_record_required_fields(listing_id, phone, field):
    with pytest.raises(LeadValidationError) as exc_info:
        build_lead_record(listing_id, phone)
    assert exc_info.value.field == field


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_lead_inserts_once():
    stored = {
        "id": 10,
        "listing_id": 1,
        "name": "Camille",
        "phone": "0600000000",
        "email": None,
        "message": "Visite samedi ?",
        "status": "new",
        "created_at": "2024-06-01T09:30:00+00:00",
    }

    with patch("src.services.lead_intake.insert_lead", new_callable=AsyncMock) as mock_insert:
        mock_insert.return_value = stored
        lead = await create_lead(1, "0600000000", name="Camille", message="Visite samedi ?")

    mock_insert.assert_awaited_once()
    assert mock_insert.call_args.args[0]["status"] == "new"
    assert lead.id == 10
    assert lead.name == "Camille"
    assert lead.created_at == "2024-06-01T09:30:00+00:00"


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_lead_validation_skips_store():
    with patch("src.services.lead_intake.insert_lead", new_callable=AsyncMock) as mock_insert:
        with pytest.raises(LeadValidationError):
            await create_lead(1, "")

    mock_insert.assert_not_called()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_lead_store_error_propagates():
    with patch("src.services.lead_intake.insert_lead", new_callable=AsyncMock) as mock_insert:
        mock_insert.side_effect = SupabaseError("Failed to create lead: permission denied")
        with pytest.raises(SupabaseError, match="permission denied"):
            await create_lead(1, "0600000000")

    assert mock_insert.await_count == 1


@pytest.mark.unit
@pytest.mark.asyncio
async def test_create_lead_masks_phone_in_logs(caplog):
    with patch("src.services.lead_intake.insert_lead", new_callable=AsyncMock) as mock_insert:
        mock_insert.return_value = {"id": 1}
        with caplog.at_level("INFO"):
            await create_lead(1, "06 12 34 56 78")

    creating = [record for record in caplog.records if record.getMessage() == "Creating lead"]
    assert creating[0].phone == "[REDACTED_PHONE]"
