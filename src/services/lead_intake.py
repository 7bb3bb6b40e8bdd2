"""Lead intake - validate a buyer contact request and store it once."""

from typing import Optional

from src.models.lead import DEFAULT_LEAD_MESSAGE, DEFAULT_LEAD_STATUS, Lead
from src.services.supabase_client import insert_lead
from src.utils.errors import LeadValidationError
from src.utils.logging import get_structured_logger, log_timing, mask_sensitive_data, sanitize_message_text

logger = get_structured_logger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_lead_record(
    listing_id: Optional[int],
    phone: Optional[str],
    name: Optional[str] = None,
    email: Optional[str] = None,
    message: Optional[str] = None,
) -> dict:
    """Validate required fields and apply defaults; no store access."""
    if not listing_id:
        raise LeadValidationError("listingId")
    phone = _clean(phone)
    if not phone:
        raise LeadValidationError("phone")

    return {
        "listing_id": listing_id,
        "name": _clean(name),
        "phone": phone,
        "email": _clean(email),
        "message": _clean(message) or DEFAULT_LEAD_MESSAGE,
        "status": DEFAULT_LEAD_STATUS,
    }


async def create_lead(
    listing_id: Optional[int],
    phone: Optional[str],
    name: Optional[str] = None,
    email: Optional[str] = None,
    message: Optional[str] = None,
) -> Lead:
    """
    Record a lead for a listing.

    Raises LeadValidationError before touching the store when listing_id or
    phone is missing. Store failures propagate as SupabaseError; there is a
    single insert attempt.
    """
    record = build_lead_record(listing_id, phone, name, email, message)

    logger.info(
        "Creating lead",
        listing_id=listing_id,
        phone=mask_sensitive_data(record["phone"]),
        has_email=bool(record["email"]),
        message_preview=sanitize_message_text(record["message"], max_length=100)
    )

    with log_timing("insert_lead", logger=logger, listing_id=listing_id):
        row = await insert_lead(record)

    lead = Lead.model_validate({**record, **row})
    logger.info("Lead created", listing_id=listing_id, lead_id=lead.id)
    return lead
