"""Listing models."""

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.utils.formatting import to_number


# (column, label) pairs for the external links a listing may carry
LINK_FIELDS = (
    ("lien_annonce", "Annonce en ligne"),
    ("visite_virtuelle", "Visite virtuelle"),
    ("lien_photos", "Photos"),
)


class Listing(BaseModel):
    """Real estate listing (a row of the `biens` table)."""
    model_config = ConfigDict(extra="allow", frozen=True)

    id: Optional[int] = Field(None, description="Listing ID")
    titre: Optional[str] = Field(None, description="Listing title")
    ville: Optional[str] = Field(None, description="City")
    prix: Optional[float] = Field(None, description="Price, currency-less")
    surface: Optional[float] = Field(None, description="Surface area in m²")
    pieces: Optional[int] = Field(None, description="Room count")
    chambres: Optional[int] = Field(None, description="Bedroom count")
    etage: Optional[Union[int, str]] = Field(None, description="Floor (number or label such as 'RDC')")
    exposition: Optional[str] = Field(None, description="Exposure")
    description: Optional[str] = Field(None, description="Free-text description")
    lien_annonce: Optional[str] = None
    visite_virtuelle: Optional[str] = None
    lien_photos: Optional[str] = None

    @field_validator("prix", "surface", mode="before")
    @classmethod
    def lenient_amount(cls, value):
        # Hand-entered rows hold text such as "350 000" or "42,5"; unreadable values count as missing
        return to_number(value)

    @field_validator("pieces", "chambres", mode="before")
    @classmethod
    def lenient_count(cls, value):
        number = to_number(value)
        return int(number) if number is not None and number.is_integer() else None

    @field_validator("etage", mode="before")
    @classmethod
    def blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    def links(self) -> list[tuple[str, str]]:
        """Return (label, url) for every link column that is filled in."""
        found = []
        for column, label in LINK_FIELDS:
            url = getattr(self, column)
            if url and url.strip():
                found.append((label, url.strip()))
        return found

    def snapshot(self) -> dict:
        """Full row, extra columns included, for prompt serialization."""
        return self.model_dump()
