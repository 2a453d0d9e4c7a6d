"""The ASGI application that serves built output.

One request runs: build a ``ResolutionRequest`` → resolve with history
fallback → compose → send.  Everything the app reads during a request
(roots, headers, fallback path) comes from a frozen ``ServeConfig``.
"""

import logging

from bundleserve._internal.asgi import Receive, Scope, Send
from bundleserve.compose import compose
from bundleserve.config import ServeConfig
from bundleserve.fallback import route
from bundleserve.http.request import Request
from bundleserve.http.response import Response
from bundleserve.resolve import IOFault, ResolutionRequest
from bundleserve.server.sender import send_response

logger = logging.getLogger("bundleserve.server")


class StaticApp:
    """ASGI 3.0 application serving files from ``config.content_base``.

    Usage::

        app = StaticApp(ServeConfig.from_options({"contentBase": "dist"}))
        uvicorn.run(app, port=10001)
    """

    __slots__ = ("config",)

    def __init__(self, config: ServeConfig | None = None) -> None:
        self.config = config or ServeConfig()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        if scope["type"] != "http":
            msg = f"Unsupported ASGI scope type: {scope['type']!r}"
            raise TypeError(msg)

        request = Request.from_asgi(scope)
        response = await self.handle(request)
        await send_response(response, send, head=request.method == "HEAD")

    async def handle(self, request: Request) -> Response:
        """Resolve *request* and compose its response."""
        resolution = ResolutionRequest(
            url_path=request.path,
            accepts_compression=request.accepts_compression,
        )
        result = await route(
            resolution,
            self.config.content_base,
            self.config.history_api_fallback,
        )
        response = compose(result, self.config.headers)

        if isinstance(result, IOFault):
            logger.warning(
                "%s %s %s -> %d %s (%s)",
                request.peer,
                request.method,
                request.target,
                response.status,
                result.attempted_path,
                result.detail,
            )
        else:
            logger.debug("%s %s %s -> %d", request.peer, request.method, request.target, response.status)
        return response

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Acknowledge the ASGI lifespan protocol.  There is nothing to set up."""
        while True:
            message = await receive()
            msg_type = message["type"]
            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return
