"""Answer buyer questions about a listing, with a deterministic fallback."""

import json
from typing import NamedTuple

from src.models.listing import Listing
from src.services.completion import CompletionProvider, complete_or_none
from src.utils.formatting import key_fact_lines

ANSWER_TEMPERATURE = 0.4

SOURCE_PROVIDER = "provider"
SOURCE_FALLBACK = "fallback"

VISIT_INVITATION = "Souhaitez-vous organiser une visite ? Je peux m'en charger."
OFF_TOPIC_REDIRECT = "Je peux vous aider pour ce bien immobilier. Souhaitez-vous une information précise ?"
FALLBACK_OFFER = "Réponse sans IA : je peux transmettre toute information manquante à l'agent."

SYSTEM_PROMPT = f"""
Tu es un assistant immobilier professionnel d'IMMOWAY.
Tu connais parfaitement le bien dont on te fournit les données (issues de la base IMMOWAY).
Ta mission est de répondre aux questions des acheteurs de manière :
- précise
- claire
- orientée solutions
- professionnelle
- rassurante

Tu n'inventes jamais des éléments absents de la base.
Si une information n'est pas précisée, explique calmement que tu peux la vérifier auprès de l'agent.

Ton objectif secondaire est de valoriser le bien :
- mettre en avant les points forts
- aider l'acheteur à se projeter
- reformuler de manière positive
- rester réaliste et honnête

Termine toujours par :
« {VISIT_INVITATION} »

Si la question ne concerne pas le bien, recentre gentiment :
« {OFF_TOPIC_REDIRECT} »

Ton ton est professionnel, chaleureux, expert et efficace.
Évite les phrases trop longues. Réponds en français.
""".strip()


class AnswerResult(NamedTuple):
    text: str
    source: str


def build_user_content(listing: Listing, question: str) -> str:
    """Listing snapshot followed by the buyer question."""
    snapshot = json.dumps(listing.snapshot(), ensure_ascii=False, indent=2, default=str)
    return (
        "Informations du bien (données JSON) :\n"
        f"{snapshot}\n\n"
        "Question de l'acheteur :\n"
        f"{question}"
    )


def build_fallback_digest(listing: Listing) -> str:
    """Answer built from the listing fields alone."""
    return "\n".join([
        "Fiche bien :",
        *key_fact_lines(listing),
        "",
        FALLBACK_OFFER,
        VISIT_INVITATION,
    ])


async def answer_question(listing: Listing, question: str, provider: CompletionProvider) -> AnswerResult:
    """
    Answer a buyer question about a listing.

    Never raises on provider trouble: errors, timeouts and blank completions
    all produce the fallback digest with source 'fallback'.
    """
    text = await complete_or_none(
        provider,
        SYSTEM_PROMPT,
        build_user_content(listing, question),
        ANSWER_TEMPERATURE,
        operation="answer_question",
    )
    if text is not None:
        return AnswerResult(text, SOURCE_PROVIDER)
    return AnswerResult(build_fallback_digest(listing), SOURCE_FALLBACK)
