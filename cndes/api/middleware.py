"""
Request body size limit.

Attachments travel inline as base64 inside the JSON body, so the limit
is generous (MAX_REQUEST_BYTES, 50 MiB by default). A declared
Content-Length over the limit is refused before the app runs; chunked
bodies are counted as they are received.
"""

import logging

from fastapi import HTTPException
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class RequestSizeLimitMiddleware:
    def __init__(self, app: ASGIApp, max_bytes: int = 50 * 1024 * 1024) -> None:
        self.app = app
        self.max_bytes = max_bytes

    @property
    def detail(self) -> str:
        return f"Request body exceeds the {self.max_bytes} byte limit"

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        declared = _declared_length(Headers(scope=scope))
        if declared is not None and declared > self.max_bytes:
            logger.warning(f"Rejected {scope.get('method')} {scope.get('path')}: body of {declared} bytes")
            response = JSONResponse(status_code=413, content={"error": self.detail})
            await response(scope, receive, send)
            return

        received = 0

        async def _limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message.get("type") == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    logger.warning(
                        f"Rejected {scope.get('method')} {scope.get('path')}: "
                        f"streamed body passed {self.max_bytes} bytes"
                    )
                    # handled by the app's HTTPException handler as a JSON 413
                    raise HTTPException(status_code=413, detail=self.detail)
            return message

        await self.app(scope, _limited_receive, send)


def _declared_length(headers: Headers) -> int | None:
    length = headers.get("content-length")
    if length is None:
        return None
    try:
        return int(length)
    except ValueError:
        return None
