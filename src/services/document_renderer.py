"""
PDF rendering of listings.

Layouts are built as a list of Block instructions first, then materialized
with ReportLab Platypus into any writable sink. Downloads and inline previews
both go through write_document, so both delivery modes emit the same bytes.
"""

from dataclasses import dataclass
from io import BytesIO
from typing import BinaryIO, Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer
from reportlab.platypus.flowables import HRFlowable

from src.models.listing import Listing
from src.utils.formatting import (
    NOT_COMMUNICATED,
    extract_highlights,
    format_price,
    format_surface,
)
from src.utils.logging import timed

DEFAULT_TITLE = "Bien immobilier"
KEY_FACTS_HEADING = "Caractéristiques principales"
PRESENTATION_HEADING = "Présentation"
LINKS_HEADING = "Liens utiles"
HIGHLIGHTS_HEADING = "Points forts (aperçu)"
FOOTER_NOTICE = "Document généré automatiquement."
PREVIEW_NOTICE = (
    "Ceci est un aperçu. La version complète inclut la présentation détaillée, "
    "les équipements, les photos et les liens utiles."
)


@dataclass(frozen=True)
class Block:
    """One layout instruction: title, rule, heading, line, paragraph, bullet, footer or notice."""
    kind: str
    text: str = ""


def _title(listing: Listing) -> str:
    return (listing.titre or "").strip() or DEFAULT_TITLE


def _key_facts(listing: Listing) -> list[Block]:
    blocks = [
        Block("heading", KEY_FACTS_HEADING),
        Block("line", f"Ville : {(listing.ville or '').strip() or NOT_COMMUNICATED}"),
        Block("line", f"Prix : {format_price(listing.prix)}"),
        Block("line", f"Surface : {format_surface(listing.surface)}"),
    ]
    optional = (
        ("Pièces", listing.pieces),
        ("Chambres", listing.chambres),
        ("Étage", listing.etage),
        ("Exposition", listing.exposition),
    )
    for label, value in optional:
        if value is None or (isinstance(value, str) and not value.strip()):
            continue
        blocks.append(Block("line", f"{label} : {str(value).strip()}"))
    return blocks


def build_full_layout(listing: Listing, narrative: Optional[str] = None) -> list[Block]:
    """Full document: title, key facts, optional presentation and links, footer."""
    blocks = [Block("title", _title(listing)), Block("rule")]
    blocks.extend(_key_facts(listing))

    if narrative and narrative.strip():
        blocks.append(Block("heading", PRESENTATION_HEADING))
        blocks.append(Block("paragraph", narrative))

    links = listing.links()
    if links:
        blocks.append(Block("heading", LINKS_HEADING))
        blocks.extend(Block("bullet", f"{label} : {url}") for label, url in links)

    blocks.append(Block("rule"))
    blocks.append(Block("footer", FOOTER_NOTICE))
    return blocks


def build_preview_layout(listing: Listing) -> list[Block]:
    """Shorter preview: title, key facts, three highlights, notice."""
    blocks = [Block("title", _title(listing)), Block("rule")]
    blocks.extend(_key_facts(listing))

    blocks.append(Block("heading", HIGHLIGHTS_HEADING))
    highlights = extract_highlights(listing.description)
    if highlights:
        blocks.extend(Block("bullet", fragment) for fragment in highlights)
    else:
        blocks.append(Block("line", NOT_COMMUNICATED))

    blocks.append(Block("rule"))
    blocks.append(Block("notice", PREVIEW_NOTICE))
    return blocks


def _styles() -> dict:
    sample = getSampleStyleSheet()
    return {
        "title": sample["Title"],
        "heading": sample["Heading2"],
        "line": sample["BodyText"],
        "paragraph": ParagraphStyle(
            "Justified", parent=sample["BodyText"], alignment=TA_JUSTIFY, leading=15
        ),
        "bullet": ParagraphStyle(
            "Bullet", parent=sample["BodyText"], leftIndent=14, bulletIndent=4
        ),
        "footer": ParagraphStyle(
            "Footer", parent=sample["Italic"], alignment=TA_CENTER, fontSize=8, textColor=colors.grey
        ),
        "notice": ParagraphStyle(
            "Notice", parent=sample["Italic"], fontSize=9, textColor=colors.grey
        ),
    }


def _markup(text: str) -> str:
    """Escape for Platypus mini-markup, keeping line breaks."""
    return "<br/>".join(escape(line) for line in text.splitlines())


def _to_flowables(blocks: list[Block]) -> list:
    styles = _styles()
    story = []
    for block in blocks:
        if block.kind == "rule":
            story.append(HRFlowable(width="100%", thickness=0.8, color=colors.grey, spaceBefore=6, spaceAfter=10))
        elif block.kind == "title":
            story.append(Paragraph(f"<u>{_markup(block.text)}</u>", styles["title"]))
        elif block.kind == "bullet":
            story.append(Paragraph(_markup(block.text), styles["bullet"], bulletText="•"))
        elif block.kind == "heading":
            story.append(Spacer(1, 0.2 * cm))
            story.append(Paragraph(_markup(block.text), styles["heading"]))
        elif block.kind in styles:
            story.append(Paragraph(_markup(block.text), styles[block.kind]))
        else:
            raise ValueError(f"Unknown layout block: {block.kind}")
    return story


def write_document(blocks: list[Block], sink: BinaryIO, title: str = DEFAULT_TITLE) -> None:
    """Render layout blocks as a PDF into a writable binary sink."""
    doc = SimpleDocTemplate(
        sink,
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=title,
        author="IMMOWAY",
        invariant=1,
    )
    doc.build(_to_flowables(blocks))


def _render_bytes(blocks: list[Block], title: str) -> bytes:
    buffer = BytesIO()
    write_document(blocks, buffer, title=title)
    return buffer.getvalue()


@timed("render_full_document")
def render_full(listing: Listing, narrative: Optional[str] = None) -> bytes:
    return _render_bytes(build_full_layout(listing, narrative), _title(listing))


@timed("render_preview_document")
def render_preview(listing: Listing) -> bytes:
    return _render_bytes(build_preview_layout(listing), _title(listing))


@timed("stream_preview_document")
def stream_preview(listing: Listing, sink: BinaryIO) -> None:
    """Drive the preview layout straight into a response stream."""
    write_document(build_preview_layout(listing), sink, title=_title(listing))
