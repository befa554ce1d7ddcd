"""Per-request deadline.

The downstream application is cancelled when the deadline passes, so code
that is interrupted sees ``asyncio.CancelledError`` and can schedule its own
cleanup. The client gets HTTP 504 unless a response had already started.
"""

import asyncio

from loguru import logger
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestDeadlineMiddleware:
    def __init__(self, app: ASGIApp, timeout: float | None = None):
        self.app = app
        self.timeout = timeout

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.timeout:
            await self.app(scope, receive, send)
            return

        response_started = False

        async def send_wrapper(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await asyncio.wait_for(self.app(scope, receive, send_wrapper), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"{scope['method']} {scope['path']} cancelled after {self.timeout}s deadline"
            )
            if response_started:
                return
            response = JSONResponse(
                status_code=504,
                content={"Code": 504, "Message": "Request timed out", "Details": None},
            )
            await response(scope, receive, send)
