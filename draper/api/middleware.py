"""
Request body ceiling.

Frames and audio travel as base64 inside JSON, so request bodies are the
one input whose size a client fully controls. Requests that declare a
Content-Length are judged by the header; chunked requests are counted as
they arrive and buffered up to the limit before the app sees them.
"""

import logging

from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..core.errors import PayloadTooLargeError

logger = logging.getLogger(__name__)


class BodySizeLimitMiddleware:
    """Reject request bodies larger than ``max_bytes`` with a 413."""

    def __init__(self, app: ASGIApp, max_bytes: int, max_mb: int) -> None:
        self.app = app
        self.max_mb = max_mb
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        headers = dict(scope.get("headers") or [])
        content_length = headers.get(b"content-length", b"").decode("latin-1")

        if content_length.isdigit():
            if int(content_length) > self.max_bytes:
                await self._reject(scope, receive, send, int(content_length))
                return
            await self.app(scope, receive, send)
            return

        # No declared length: read the body ourselves, stopping at the limit
        body = bytearray()
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] == "http.disconnect":
                return
            body.extend(message.get("body", b""))
            if len(body) > self.max_bytes:
                await self._reject(scope, receive, send, len(body))
                return
            more_body = message.get("more_body", False)

        replayed = False

        async def replay() -> Message:
            nonlocal replayed
            if not replayed:
                replayed = True
                return {"type": "http.request", "body": bytes(body), "more_body": False}
            return await receive()

        await self.app(scope, replay, send)

    async def _reject(self, scope: Scope, receive: Receive, send: Send, size: int) -> None:
        error = PayloadTooLargeError(f"Request body exceeds {self.max_mb}MB")
        logger.warning(
            "Rejected oversized request",
            extra={"path": scope.get("path"), "bytes": size},
        )
        response = JSONResponse(status_code=error.status_code, content={"error": error.message})
        await response(scope, receive, send)
