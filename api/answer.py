"""Buyer question endpoint: answers about a listing, AI first, fallback otherwise."""

from pydantic import ValidationError

from src.models.listing import Listing
from src.models.requests import AnswerRequest, invalid_parameter_message
from src.services.answer_synthesizer import answer_question
from src.services.completion import get_completion_provider
from src.services.supabase_client import get_listing_by_id
from src.utils.http import JsonRequestHandler, run_async
from src.utils.logging import correlation_context, get_structured_logger, sanitize_message_text

logger = get_structured_logger(__name__)


async def _answer(request: AnswerRequest):
    row = await get_listing_by_id(request.listingId)
    if row is None:
        return None
    listing = Listing.model_validate(row)
    return await answer_question(listing, request.question, get_completion_provider())


class handler(JsonRequestHandler):
    """Vercel serverless function handler for buyer questions."""

    def do_POST(self):
        with correlation_context(self.request_correlation_id()) as correlation_id:
            self.correlation_id = correlation_id
            try:
                body = self.read_json()
                try:
                    request = AnswerRequest.model_validate(body)
                except ValidationError as e:
                    self.send_json(422, {"error": invalid_parameter_message(e)})
                    return

                logger.info(
                    "Question received",
                    listing_id=request.listingId,
                    question_preview=sanitize_message_text(request.question, max_length=100)
                )

                result = run_async(_answer(request))
                if result is None:
                    self.send_json(404, {"error": "Bien introuvable"})
                    return

                logger.info("Question answered", listing_id=request.listingId, answer_source=result.source)
                self.send_json(200, {
                    "answer": result.text,
                    "listingId": request.listingId,
                    "source": result.source,
                })
            except Exception as e:
                logger.error("Error answering question", error=str(e), exc_info=True)
                self.send_json(500, {"error": "Erreur serveur"})
