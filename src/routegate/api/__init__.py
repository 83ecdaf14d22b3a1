"""API layer - Entry gate, middleware and request helpers"""

from .middleware import AuthMiddleware, BodyParserMiddleware
from .params import (
    param_by_name,
    query_param_by_name,
    query_params_by_name,
    request_body,
    route_params,
)
from .router import GateRouter, RouteHandler
from .routes import register_routes
from .session import (
    authorize,
    has_role,
    is_authorized,
    session_claims,
    session_user_id,
    user_roles,
)

__all__ = [
    "AuthMiddleware",
    "BodyParserMiddleware",
    "GateRouter",
    "RouteHandler",
    "authorize",
    "has_role",
    "is_authorized",
    "param_by_name",
    "query_param_by_name",
    "query_params_by_name",
    "register_routes",
    "request_body",
    "route_params",
    "session_claims",
    "session_user_id",
    "user_roles",
]
