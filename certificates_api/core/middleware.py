"""
Request body size limit.

Declared Content-Length is checked up front. Bodies without one (chunked
uploads) are counted while the route reads them.
"""

from fastapi import HTTPException
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from certificates_api.core.config import settings


def too_large_detail(max_size: int) -> str:
    return f"Request body too large. Max size: {max_size // (1024 * 1024)}MB"


class BodySizeLimitMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        # Read at request time so the limit follows the live settings
        max_size = settings.MAX_BODY_SIZE
        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > max_size:
            response = JSONResponse(status_code=413, content={"detail": too_large_detail(max_size)})
            await response(scope, receive, send)
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > max_size:
                    # Raised inside body parsing, so the exception handlers answer 413
                    raise HTTPException(status_code=413, detail=too_large_detail(max_size))
            return message

        await self.app(scope, limited_receive, send)
