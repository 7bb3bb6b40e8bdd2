"""Shared plumbing for the Vercel serverless handlers."""

import asyncio
import json
from http.server import BaseHTTPRequestHandler
from typing import Any, Optional

from src.utils.logging import get_structured_logger
from src.utils.logging_config import LoggingConfig

LoggingConfig.setup_logging()
logger = get_structured_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": f"Content-Type, {LoggingConfig.LOG_CORRELATION_ID_HEADER}",
}


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


class JsonRequestHandler(BaseHTTPRequestHandler):
    """Base handler with JSON, PDF and CORS helpers."""

    correlation_id: Optional[str] = None
    pdf_streaming = False

    def log_message(self, format, *args):
        logger.debug("HTTP access", client=self.address_string(), detail=format % args)

    def request_correlation_id(self) -> Optional[str]:
        return self.headers.get(LoggingConfig.LOG_CORRELATION_ID_HEADER)

    def read_json(self) -> Any:
        """Parse the JSON request body; {} when empty or malformed."""
        content_length = int(self.headers.get('Content-Length', 0) or 0)
        raw_body = self.rfile.read(content_length) if content_length > 0 else b""
        try:
            return json.loads(raw_body.decode('utf-8')) if raw_body else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            return {}

    def _send_common_headers(self) -> None:
        for name, value in CORS_HEADERS.items():
            self.send_header(name, value)
        if self.correlation_id:
            self.send_header(LoggingConfig.LOG_CORRELATION_ID_HEADER, self.correlation_id)

    def send_json(self, status: int, payload: Any) -> None:
        body = json.dumps(payload, ensure_ascii=False).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self._send_common_headers()
        self.end_headers()
        self.wfile.write(body)

    def send_text(self, status: int, text: str) -> None:
        body = text.encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'text/plain; charset=utf-8')
        self.send_header('Content-Length', str(len(body)))
        self._send_common_headers()
        self.end_headers()
        self.wfile.write(body)

    def start_pdf(self, pdf_filename: str, disposition: str, extra_headers: Optional[dict] = None,
                  content_length: Optional[int] = None) -> None:
        """Send status and headers of a PDF response; the body follows."""
        self.pdf_streaming = True
        self.send_response(200)
        self.send_header('Content-Type', 'application/pdf')
        self.send_header('Content-Disposition', f'{disposition}; filename="{pdf_filename}"')
        if content_length is not None:
            self.send_header('Content-Length', str(content_length))
        for name, value in (extra_headers or {}).items():
            self.send_header(name, value)
        self._send_common_headers()
        self.end_headers()

    def send_pdf(self, pdf_bytes: bytes, pdf_filename: str, extra_headers: Optional[dict] = None) -> None:
        """Send a complete PDF as a download."""
        self.start_pdf(pdf_filename, "attachment", extra_headers, content_length=len(pdf_bytes))
        self.wfile.write(pdf_bytes)

    def do_OPTIONS(self):
        """CORS preflight."""
        self.send_response(204)
        self._send_common_headers()
        self.end_headers()
