"""
Session identity and resource-owner authorization helpers.

Claims are attached upstream by AuthMiddleware. Every helper here degrades
to an empty identity when claims are missing, so they are safe to call on
public routes.

``authorize`` does not stop the handler: it returns the Forbidden response
and the handler must return it::

    async def update_user(request):
        denied = authorize(request)
        if denied is not None:
            return denied
        ...
"""

import logging
from typing import List, Optional

from fastapi import Request, Response

from ..core.claims import Claims
from ..core.context import SESSION_USER_KEY, context_from_scope
from ..core.errors import ForbiddenError
from ..core.response import write_error
from .params import param_by_name

logger = logging.getLogger(__name__)

OWNER_PARAM = "uid"


def session_claims(request: Request) -> Optional[Claims]:
    claims = context_from_scope(request.scope).value(SESSION_USER_KEY)
    if isinstance(claims, Claims):
        return claims
    return None


def session_user_id(request: Request) -> str:
    """Returns user id of the current session, "" when there is none"""
    claims = session_claims(request)
    if claims is None or claims.uid is None:
        return ""
    return claims.uid


def user_roles(request: Request) -> List[str]:
    """Current user roles, empty when there is no session"""
    claims = session_claims(request)
    if claims is None:
        return []
    return list(claims.roles)


def has_role(request: Request, role: str) -> bool:
    return role in user_roles(request)


def is_authorized(request: Request, param: str = OWNER_PARAM) -> bool:
    """True when the session user owns the resource named by route param ``param``"""
    sid = session_user_id(request)
    if not sid:
        return False
    return sid == param_by_name(param, request)


def authorize(request: Request, param: str = OWNER_PARAM) -> Optional[Response]:
    """
    Check that the session user owns the requested resource.

    Args:
        request: Request routed through RouteHandler
        param: Route parameter holding the owner id

    Returns:
        None when authorized, otherwise a 403 Forbidden envelope
        response the caller must return
    """
    if is_authorized(request, param):
        return None

    logger.warning(
        f"Session user {session_user_id(request) or '<anonymous>'} denied access to "
        f"{request.method} {request.url.path}"
    )
    return write_error(request, ForbiddenError())
