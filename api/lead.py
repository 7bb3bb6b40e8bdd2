"""Lead capture endpoint."""

from pydantic import ValidationError

from src.models.requests import LeadRequest, invalid_parameter_message
from src.services.lead_intake import create_lead
from src.utils.errors import LeadValidationError, SupabaseError
from src.utils.http import JsonRequestHandler, run_async
from src.utils.logging import correlation_context, get_structured_logger

logger = get_structured_logger(__name__)


class handler(JsonRequestHandler):
    """Vercel serverless function handler for leads."""

    def do_POST(self):
        with correlation_context(self.request_correlation_id()) as correlation_id:
            self.correlation_id = correlation_id
            try:
                body = self.read_json()
                try:
                    request = LeadRequest.model_validate(body)
                except ValidationError as e:
                    self.send_json(422, {"error": invalid_parameter_message(e)})
                    return

                try:
                    lead = run_async(create_lead(
                        request.listingId,
                        request.phone,
                        name=request.name,
                        email=request.email,
                        message=request.message,
                    ))
                except LeadValidationError as e:
                    self.send_json(422, {"error": f"Paramètre '{e.field}' manquant ou invalide"})
                    return
                except SupabaseError as e:
                    logger.error("Lead insert failed", listing_id=request.listingId, error=str(e))
                    self.send_json(500, {"ok": False, "error": str(e)})
                    return

                self.send_json(200, {"ok": True, "lead": lead.model_dump()})
            except Exception as e:
                logger.error("Error creating lead", error=str(e), exc_info=True)
                self.send_json(500, {"ok": False, "error": "Erreur serveur"})
