"""Lead models."""

from typing import Optional, Union
from pydantic import BaseModel, Field

DEFAULT_LEAD_MESSAGE = "Demande d'information"
DEFAULT_LEAD_STATUS = "new"


class Lead(BaseModel):
    """Buyer interest captured for a listing."""
    id: Optional[Union[int, str]] = Field(None, description="Lead ID (assigned by the store, integer or uuid)")
    listing_id: int = Field(..., description="Listing the buyer is interested in")
    name: Optional[str] = Field(None, description="Buyer name")
    phone: str = Field(..., description="Buyer phone number")
    email: Optional[str] = Field(None, description="Buyer email")
    message: str = Field(default=DEFAULT_LEAD_MESSAGE, description="Need expressed by the buyer")
    status: str = Field(default=DEFAULT_LEAD_STATUS, description="Lead status")
    created_at: Optional[str] = None
