"""Liveness endpoint."""

from src.utils.http import JsonRequestHandler

LIVENESS_TEXT = "✅ Proxy IMMOWAY opérationnel !"


class handler(JsonRequestHandler):
    """Liveness handler for Vercel serverless function."""

    def do_GET(self):
        self.send_text(200, LIVENESS_TEXT)
