"""Listing PDF endpoints: full download and inline preview."""

import re
from typing import Optional
from urllib.parse import urlsplit

from pydantic import ValidationError

from src.models.listing import Listing
from src.models.requests import DocumentRequest, invalid_parameter_message
from src.services.completion import get_completion_provider
from src.services.document_renderer import render_full, stream_preview
from src.services.listing_summarizer import summarize_listing
from src.services.supabase_client import get_listing_by_id
from src.utils.formatting import safe_filename
from src.utils.http import JsonRequestHandler, run_async
from src.utils.logging import correlation_context, get_structured_logger

logger = get_structured_logger(__name__)

_DOCUMENT_PATH = re.compile(r"^(?:/api)?/document/(?P<listing_id>[^/]+)(?P<preview>/preview)?/?$")


def parse_listing_id(raw: str) -> Optional[int]:
    """Positive integer from a path segment, None otherwise."""
    if not raw or not (raw.isascii() and raw.isdigit()):
        return None
    value = int(raw)
    return value if value > 0 else None


async def _fetch_listing(listing_id: int) -> Optional[Listing]:
    row = await get_listing_by_id(listing_id)
    return Listing.model_validate(row) if row is not None else None


async def _build_full_document(listing_id: int):
    listing = await _fetch_listing(listing_id)
    if listing is None:
        return None
    summary = await summarize_listing(listing, get_completion_provider())
    narrative = summary.text if summary.generated else None
    pdf_bytes = render_full(listing, narrative)
    return listing, summary, pdf_bytes


class handler(JsonRequestHandler):
    """Vercel serverless function handler for listing documents."""

    def _send_full_document(self, listing_id: int) -> None:
        result = run_async(_build_full_document(listing_id))
        if result is None:
            self.send_json(404, {"error": "Bien introuvable"})
            return

        listing, summary, pdf_bytes = result
        pdf_filename = f"{safe_filename(listing.titre, listing_id)}.pdf"
        logger.info(
            "Document rendered",
            listing_id=listing_id,
            pdf_filename=pdf_filename,
            summary_source=summary.source,
            size_bytes=len(pdf_bytes)
        )
        self.send_pdf(pdf_bytes, pdf_filename, extra_headers={"X-Summary-Source": summary.source})

    def _send_preview(self, listing_id: int) -> None:
        listing = run_async(_fetch_listing(listing_id))
        if listing is None:
            self.send_json(404, {"error": "Bien introuvable"})
            return

        pdf_filename = f"{safe_filename(listing.titre, listing_id)}-apercu.pdf"
        self.start_pdf(pdf_filename, "inline")
        stream_preview(listing, self.wfile)
        logger.info("Preview streamed", listing_id=listing_id, pdf_filename=pdf_filename)

    def do_POST(self):
        """POST /document with {listingId}: full PDF download."""
        with correlation_context(self.request_correlation_id()) as correlation_id:
            self.correlation_id = correlation_id
            try:
                try:
                    request = DocumentRequest.model_validate(self.read_json())
                except ValidationError as e:
                    self.send_json(422, {"error": invalid_parameter_message(e)})
                    return
                self._send_full_document(request.listingId)
            except Exception as e:
                logger.error("Error rendering document", error=str(e), exc_info=True)
                if not self.pdf_streaming:
                    self.send_json(500, {"error": "Erreur serveur"})

    def do_GET(self):
        """GET /document/<id> (download) and /document/<id>/preview (inline)."""
        with correlation_context(self.request_correlation_id()) as correlation_id:
            self.correlation_id = correlation_id
            try:
                match = _DOCUMENT_PATH.match(urlsplit(self.path).path)
                if not match:
                    self.send_json(404, {"error": "Route introuvable"})
                    return

                listing_id = parse_listing_id(match.group("listing_id"))
                if listing_id is None:
                    self.send_json(422, {"error": "Paramètre 'id' manquant ou invalide"})
                    return

                if match.group("preview"):
                    self._send_preview(listing_id)
                else:
                    self._send_full_document(listing_id)
            except Exception as e:
                logger.error("Error rendering document", error=str(e), exc_info=True)
                if not self.pdf_streaming:
                    self.send_json(500, {"error": "Erreur serveur"})
