"""Canonical formatting helpers shared by chat answers, fallback digests and PDFs."""

import math
import re
from typing import Any, Optional

NOT_COMMUNICATED = "NC"
CURRENCY_SUFFIX = "€"
AREA_UNIT = "m²"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")
_FRAGMENT_SPLIT = re.compile(r"(?<=[.!?])\s+|[\r\n]+")
_NUMBER_NOISE = re.compile(r"[\s€]+")


def to_number(value: Any) -> Optional[float]:
    """Lenient number parsing ('350 000', '42,5', '350 000 €'); None when not a finite number."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = _NUMBER_NOISE.sub("", value).replace(",", ".")
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _format_number(number: float) -> str:
    """French grouping: spaces between thousands, decimal comma when fractional."""
    if number.is_integer():
        return f"{number:,.0f}".replace(",", " ")
    text = f"{number:,.2f}".rstrip("0").rstrip(".")
    return text.replace(",", " ").replace(".", ",")


def format_price(value: Any) -> str:
    """Format a price as '350 000 €', or NC when absent."""
    number = to_number(value)
    if number is None:
        return NOT_COMMUNICATED
    return f"{_format_number(number)} {CURRENCY_SUFFIX}"


def format_surface(value: Any) -> str:
    """Format a surface as '42 m²', or NC when absent."""
    number = to_number(value)
    if number is None:
        return NOT_COMMUNICATED
    return f"{_format_number(number)} {AREA_UNIT}"


def or_dash(value: Any) -> str:
    """Render a free-text field, '-' when absent."""
    if value is None:
        return "-"
    text = str(value).strip()
    return text or "-"


def safe_filename(title: Optional[str], listing_id: Any) -> str:
    """
    Derive a filename stem from a listing title.

    Runs of characters outside [A-Za-z0-9_-] collapse into a single underscore.
    Falls back to 'bien-<id>' when nothing usable remains.
    """
    stem = _UNSAFE_FILENAME_CHARS.sub("_", title or "").strip("_")
    if not stem:
        stem = _UNSAFE_FILENAME_CHARS.sub("_", f"bien-{listing_id}").strip("_")
    return stem


def extract_highlights(description: Optional[str], limit: int = 3) -> list[str]:
    """First `limit` non-empty sentences or lines of a description."""
    if not description:
        return []
    fragments = (fragment.strip() for fragment in _FRAGMENT_SPLIT.split(description))
    return [fragment for fragment in fragments if fragment][:limit]


def key_fact_lines(listing) -> list[str]:
    """Labeled key facts used by the fallback digest and the summary placeholder."""
    return [
        f"- Titre : {or_dash(listing.titre)}",
        f"- Ville : {or_dash(listing.ville)}",
        f"- Surface : {format_surface(listing.surface)}",
        f"- Prix : {format_price(listing.prix)}",
        f"- Description : {or_dash(listing.description)}",
    ]
