"""Health check endpoint."""

from src.services.supabase_client import ping_store
from src.utils.http import JsonRequestHandler, run_async
from src.utils.logging import correlation_context, get_structured_logger

logger = get_structured_logger(__name__)


class handler(JsonRequestHandler):
    """Health check handler for Vercel serverless function."""

    def do_GET(self):
        """Probe the store with a minimal read."""
        with correlation_context(self.request_correlation_id()) as correlation_id:
            self.correlation_id = correlation_id
            try:
                run_async(ping_store())
            except Exception as e:
                logger.warning("Health check failed", error=str(e))
                self.send_json(500, {"ok": False, "supabase": False})
                return
            self.send_json(200, {"ok": True, "supabase": True})
