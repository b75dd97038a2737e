"""
Request context middleware.
"""
import uuid

from loguru import logger
from starlette.datastructures import MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send


class RequestContextMiddleware:
    """
    Tags every HTTP request with a UUID.

    The id is bound to all log lines emitted while the request is handled
    and returned to the client as ``X-Request-ID``. Written as a plain ASGI
    middleware so ``receive`` reaches the endpoint untouched and
    ``Request.is_disconnected()`` keeps reporting dropped clients.
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = str(uuid.uuid4())

        async def send_with_request_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                headers.append("X-Request-ID", request_id)
            await send(message)

        with logger.contextualize(request_id=request_id):
            await self.app(scope, receive, send_with_request_id)
