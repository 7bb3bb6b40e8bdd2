"""AI-written listing presentation for the full PDF document."""

import json
from typing import NamedTuple

from src.models.listing import Listing
from src.services.answer_synthesizer import SOURCE_FALLBACK, SOURCE_PROVIDER
from src.services.completion import CompletionProvider, complete_or_none
from src.utils.formatting import key_fact_lines

SUMMARY_TEMPERATURE = 0.5

SUMMARY_UNAVAILABLE = "Présentation détaillée indisponible pour le moment."

SUMMARY_PROMPT = """
Tu es rédacteur immobilier pour IMMOWAY.
À partir des données du bien, rédige une présentation réaliste, factuelle et commerciale
de 10 à 15 lignes, en français, avec de courts intertitres si c'est utile.
N'invente aucune information absente des données.
""".strip()


class ListingSummary(NamedTuple):
    text: str
    source: str

    @property
    def generated(self) -> bool:
        return self.source == SOURCE_PROVIDER


def build_summary_placeholder(listing: Listing) -> str:
    return "\n".join([*key_fact_lines(listing), "", SUMMARY_UNAVAILABLE])


async def summarize_listing(listing: Listing, provider: CompletionProvider) -> ListingSummary:
    """Presentation text for a listing; placeholder text when the provider is unavailable."""
    snapshot = json.dumps(listing.snapshot(), ensure_ascii=False, indent=2, default=str)
    text = await complete_or_none(
        provider,
        SUMMARY_PROMPT,
        f"Données du bien (JSON) :\n{snapshot}",
        SUMMARY_TEMPERATURE,
        operation="summarize_listing",
    )
    if text is not None:
        return ListingSummary(text, SOURCE_PROVIDER)
    return ListingSummary(build_summary_placeholder(listing), SOURCE_FALLBACK)
