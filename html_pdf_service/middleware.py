"""
Request middleware: request id tagging and request body size cap.
"""

import uuid

from fastapi import HTTPException
from starlette.datastructures import Headers
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "X-Request-ID"


def body_too_large_content(max_body_size: int) -> dict:
    return {
        "error": "Request body too large",
        "details": f"Request body exceeds the {max_body_size // (1024 * 1024)}MB limit",
    }


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Assign a unique X-Request-ID to each request.

    A client-provided X-Request-ID is preserved. The id is stored on
    ``request.state.request_id`` for log correlation and echoed back in
    the response headers.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER)
        if not request_id:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_size`` bytes.

    Requests announcing an oversized Content-Length are answered with 413
    before the route runs. Bodies without a Content-Length are counted as
    they stream in and abort the request once they pass the limit.
    """

    def __init__(self, app: ASGIApp, max_body_size: int):
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length is not None and content_length.isdigit():
            if int(content_length) > self.max_body_size:
                response = JSONResponse(
                    status_code=413,
                    content=body_too_large_content(self.max_body_size),
                )
                await response(scope, receive, send)
                return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_size:
                    raise HTTPException(
                        status_code=413,
                        detail=body_too_large_content(self.max_body_size),
                    )
            return message

        await self.app(scope, limited_receive, send)
