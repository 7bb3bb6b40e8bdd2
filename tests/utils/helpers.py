"""Test helper functions."""

import asyncio
import json
from io import BytesIO
from typing import Any, Dict, Optional, Tuple

from src.services.completion import CompletionProvider


class FakeCompletionProvider(CompletionProvider):
    """Deterministic completion provider: replies, fails, or stalls on demand."""

    name = "fake"

    def __init__(self, reply: Optional[str] = "Réponse", error: Optional[Exception] = None, delay: float = 0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def complete(self, system: str, user: str, temperature: float) -> str:
        self.calls.append({"system": system, "user": user, "temperature": temperature})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class MockSocket:
    """In-memory socket: serves one raw request, records everything sent back."""

    def __init__(self, raw_request: bytes):
        self.raw_request = raw_request
        self.sent = bytearray()

    def makefile(self, *args, **kwargs):
        return BytesIO(self.raw_request)

    def sendall(self, data):
        self.sent.extend(data)

    def close(self):
        pass


def build_raw_request(
    method: str,
    path: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> bytes:
    """Serialize an HTTP/1.1 request with an optional JSON body."""
    if body is None:
        payload = b""
    elif isinstance(body, (bytes, str)):
        payload = body.encode("utf-8") if isinstance(body, str) else body
    else:
        payload = json.dumps(body).encode("utf-8")

    lines = [f"{method} {path} HTTP/1.1", "Host: localhost"]
    if payload:
        lines.append("Content-Type: application/json")
        lines.append(f"Content-Length: {len(payload)}")
    for name, value in (headers or {}).items():
        lines.append(f"{name}: {value}")
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8") + payload


def parse_raw_response(raw: bytes) -> Tuple[int, Dict[str, str], bytes]:
    """Split a raw HTTP response into status, headers and body."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    status = int(lines[0].split(" ")[1])
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(":")
        headers[name.strip().lower()] = value.strip()
    return status, headers, body


def call_handler(
    handler_class,
    method: str,
    path: str,
    body: Any = None,
    headers: Optional[Dict[str, str]] = None
) -> Tuple[int, Dict[str, str], bytes]:
    """Drive a BaseHTTPRequestHandler subclass through one full request."""
    sock = MockSocket(build_raw_request(method, path, body, headers))
    handler_class(sock, ("127.0.0.1", 8000), None)
    return parse_raw_response(bytes(sock.sent))
