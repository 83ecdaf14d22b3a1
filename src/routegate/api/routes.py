"""API routes: health check and the user resource"""

import logging
from typing import Any, Dict

from fastapi import Request, Response

from ..core.errors import MissingRequiredDataError
from ..core.response import APIResponse, data_response, write_error
from .params import param_by_name, query_params_by_name, request_body
from .router import GateRouter
from .session import authorize, session_user_id, user_roles

logger = logging.getLogger(__name__)


async def health_check(request: Request) -> APIResponse:
    """
    Basic health check endpoint.

    Example Response:
        {
            "status": "OK",
            "data": {"service": "routegate", "version": "1.0.0"}
        }
    """
    return data_response({"service": "routegate", "version": "1.0.0"})


async def get_user(request: Request) -> APIResponse:
    return data_response({
        "uid": param_by_name("uid", request),
        "session_uid": session_user_id(request),
        "roles": user_roles(request),
        "fields": query_params_by_name("field", request),
    })


async def update_user(request: Request) -> Response:
    """Update a user's own record; only the owner may write it"""
    denied = authorize(request)
    if denied is not None:
        return denied

    body = request_body(request)
    if not isinstance(body, dict):
        return write_error(request, MissingRequiredDataError())

    updated: Dict[str, Any] = dict(body, uid=param_by_name("uid", request))
    logger.info(f"Updated user {updated['uid']}")
    return data_response(updated).write(request)


def register_routes(gate: GateRouter) -> None:
    gate.get("/health", health_check)
    gate.get("/users/:uid", get_user)
    gate.put("/users/:uid", update_user)
