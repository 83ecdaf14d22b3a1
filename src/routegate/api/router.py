"""
Entry gate and route registration.

GateRouter is the single ASGI entry point: it applies the CORS origin policy
to every HTTP request and only then hands the request to the middleware
stack and the Starlette router. Every registered handler is wrapped in a
RouteHandler which binds the matched path parameters into the request
context, so handlers keep the plain ``handler(request)`` signature.
"""

import inspect
import logging
import re
from typing import Any, Callable, List, Optional, Tuple

from fastapi import Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import MutableHeaders
from starlette.routing import Route, Router
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from ..config.settings import ConfigLookup
from ..core.context import PARAMS_KEY, context_from_scope, scope_with_context
from ..core.cors import evaluate_origin
from ..core.errors import ForbiddenError
from ..core.params import Params
from ..core.response import APIResponse, write_error

logger = logging.getLogger(__name__)

Handler = Callable[[Request], Any]

_NAMED_SEGMENT = re.compile(r"/:([A-Za-z_][A-Za-z0-9_]*)")
_CATCH_ALL_SEGMENT = re.compile(r"/\*([A-Za-z_][A-Za-z0-9_]*)$")

# router statuses meaning no handler answered the preflight
_UNHANDLED_STATUSES = (404, 405)


def to_route_path(path: str) -> str:
    """
    Rewrite colon-style patterns to Starlette patterns.

    ``/users/:uid`` becomes ``/users/{uid}`` and ``/static/*filepath``
    becomes ``/static/{filepath:path}``. Starlette-style patterns pass
    through unchanged.
    """
    path = _NAMED_SEGMENT.sub(r"/{\1}", path)
    return _CATCH_ALL_SEGMENT.sub(r"/{\1:path}", path)


class RouteHandler:
    """
    ASGI adapter for a ``handler(request)`` callable.

    When the matched route produced path parameters they are bound under
    PARAMS_KEY in a context derived from the incoming one; the handler gets
    a Request over a copy of the scope carrying that context. Routes without
    parameters are passed through untouched.
    """

    def __init__(self, handler: Handler):
        self.handler = handler
        self.is_async = inspect.iscoroutinefunction(handler)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        path_params = scope.get("path_params")
        if path_params:
            context = context_from_scope(scope).with_value(
                PARAMS_KEY, Params.from_mapping(path_params)
            )
            scope = scope_with_context(scope, context)

        request = Request(scope, receive, send)
        if self.is_async:
            result = await self.handler(request)
        else:
            result = await run_in_threadpool(self.handler, request)

        response = result.write(request) if isinstance(result, APIResponse) else result
        await response(scope, receive, send)


class GateRouter:
    """
    Router wrapper enforcing the CORS policy before dispatch.

    Routes are registered by method and path before serving starts; the
    route table is not changed afterwards.
    """

    def __init__(self, config: ConfigLookup):
        """
        Args:
            config: Configuration lookup holding the CORS allow-list
        """
        self.config = config
        self.router = Router()
        self._middleware: List[Tuple[type, dict]] = []
        self._app: Optional[ASGIApp] = None

    # registration

    def handle(self, method: str, path: str, handler: Handler) -> Handler:
        if self._app is not None:
            raise RuntimeError("Cannot register routes after the gate started serving")
        route_path = to_route_path(path)
        self.router.routes.append(
            Route(route_path, RouteHandler(handler), methods=[method.upper()])
        )
        logger.debug(f"Registered {method.upper()} {route_path}")
        return handler

    def get(self, path: str, handler: Optional[Handler] = None):
        return self._register("GET", path, handler)

    def post(self, path: str, handler: Optional[Handler] = None):
        return self._register("POST", path, handler)

    def put(self, path: str, handler: Optional[Handler] = None):
        return self._register("PUT", path, handler)

    def delete(self, path: str, handler: Optional[Handler] = None):
        return self._register("DELETE", path, handler)

    def patch(self, path: str, handler: Optional[Handler] = None):
        return self._register("PATCH", path, handler)

    def options(self, path: str, handler: Optional[Handler] = None):
        return self._register("OPTIONS", path, handler)

    def _register(self, method: str, path: str, handler: Optional[Handler]):
        # usable directly or as a decorator
        if handler is not None:
            return self.handle(method, path, handler)

        def decorator(func: Handler) -> Handler:
            return self.handle(method, path, func)

        return decorator

    def add_middleware(self, middleware_class: type, **options: Any) -> None:
        """Add middleware between the gate and the router; the last added runs first"""
        if self._app is not None:
            raise RuntimeError("Cannot add middleware after the gate started serving")
        self._middleware.append((middleware_class, options))

    @property
    def middleware(self) -> List[type]:
        return [middleware_class for middleware_class, _ in self._middleware]

    @property
    def app(self) -> ASGIApp:
        if self._app is None:
            app: ASGIApp = self.router
            for middleware_class, options in self._middleware:
                app = middleware_class(app, **options)
            self._app = app
        return self._app

    # dispatch

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        decision = evaluate_origin(request.headers.get("Origin"), self.config)
        if not decision.allowed:
            response = write_error(request, ForbiddenError())
            await response(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            send = await self._flush_preflight(send, decision.headers)
        else:
            send = _inject_headers(send, decision.headers)

        await self.app(scope, receive, send)

    async def _flush_preflight(self, send: Send, headers: dict) -> Send:
        """
        Send the 200 response start for a preflight before dispatching.

        The request still reaches the router. Its own response start is
        dropped since headers are already on the wire; its body is forwarded
        unless the router found no handler, in which case the preflight ends
        with an empty body. Headers set by an OPTIONS handler, Content-Type
        included, never reach the client since the start is already sent.
        """
        await send({
            "type": "http.response.start",
            "status": 200,
            "headers": [
                (name.lower().encode("latin-1"), value.encode("latin-1"))
                for name, value in headers.items()
            ],
        })

        inner_status: Optional[int] = None

        async def send_after_flush(message: Message) -> None:
            nonlocal inner_status
            if message["type"] == "http.response.start":
                inner_status = message["status"]
                return
            if message["type"] == "http.response.body" and inner_status in _UNHANDLED_STATUSES:
                message = {
                    "type": "http.response.body",
                    "body": b"",
                    "more_body": message.get("more_body", False),
                }
            await send(message)

        return send_after_flush


def _inject_headers(send: Send, headers: dict) -> Send:
    async def send_with_headers(message: Message) -> None:
        if message["type"] == "http.response.start":
            response_headers = MutableHeaders(scope=message)
            for name, value in headers.items():
                response_headers[name] = value
        await send(message)

    return send_with_headers
