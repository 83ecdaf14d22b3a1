"""Authentication and body parsing middleware"""

import json
import logging
from typing import Callable, Sequence

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from ..core.auth_provider import IClaimsProvider
from ..core.context import BODY_KEY, CONTEXT_SCOPE_KEY, SESSION_USER_KEY, context_from_scope
from ..core.errors import MissingRequiredDataError, TokenValidationError, UnauthorizedError
from ..core.response import write_error

logger = logging.getLogger(__name__)

DEFAULT_PUBLIC_PATHS = ("/health",)


def _bind(request: Request, key, value) -> None:
    # derive the context; the slot in the scope is what call_next forwards
    request.scope[CONTEXT_SCOPE_KEY] = context_from_scope(request.scope).with_value(key, value)


class AuthMiddleware(BaseHTTPMiddleware):
    """
    Authentication middleware binding session claims into the request context.

    Flow:
    1. Skip public endpoints
    2. Extract Authorization header
    3. Validate the bearer token via the claims provider
    4. Bind the claims under SESSION_USER_KEY
    5. Forward to the next handler

    Requests without a token pass through without claims unless
    ``auth_required`` is set, so session helpers see an empty identity on
    public routes.
    """

    def __init__(
        self,
        app,
        claims_provider: IClaimsProvider,
        auth_required: bool = False,
        public_paths: Sequence[str] = DEFAULT_PUBLIC_PATHS,
    ):
        """
        Initialize authentication middleware.

        Args:
            app: Downstream ASGI application
            claims_provider: Token validation backend (IClaimsProvider)
            auth_required: Reject requests that carry no token
            public_paths: Path prefixes served without authentication
        """
        super().__init__(app)
        self.claims_provider = claims_provider
        self.auth_required = auth_required
        self.public_paths = tuple(public_paths)

        logger.info(
            f"Initialized AuthMiddleware with provider: {claims_provider.get_provider_name()}, "
            f"Auth Required: {self.auth_required}"
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """
        Process request with authentication validation.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware/handler in chain

        Returns:
            Response from downstream handler or 401 error envelope
        """
        # preflights carry no credentials; the gate answers them
        if request.method == "OPTIONS":
            return await call_next(request)

        if self._is_public_endpoint(request.url.path):
            logger.debug(f"Public endpoint accessed: {request.url.path}")
            return await call_next(request)

        auth_header = request.headers.get("Authorization")

        if not auth_header:
            if self.auth_required:
                logger.warning(f"Missing Authorization header for {request.url.path}")
                return write_error(request, UnauthorizedError("Authorization header is required"))
            return await call_next(request)

        try:
            token = self._extract_bearer_token(auth_header)
            claims = await self.claims_provider.validate_token(token)
        except TokenValidationError as e:
            logger.warning(f"Token validation failed: {str(e)}")
            return write_error(request, UnauthorizedError(str(e)))

        _bind(request, SESSION_USER_KEY, claims)
        logger.info(
            f"Authenticated user {claims.uid or '<no uid>'} for {request.method} "
            f"{request.url.path}"
        )

        return await call_next(request)

    def _is_public_endpoint(self, path: str) -> bool:
        return any(path.startswith(prefix) for prefix in self.public_paths)

    def _extract_bearer_token(self, auth_header: str) -> str:
        """
        Extract token from Authorization header.

        Expected format: "Bearer <token>"

        Raises:
            TokenValidationError: If header format is invalid
        """
        parts = auth_header.split()
        if len(parts) != 2:
            raise TokenValidationError("Authorization header must be 'Bearer <token>'")

        scheme, token = parts
        if scheme.lower() != "bearer":
            raise TokenValidationError("Authorization scheme must be Bearer")

        return token


class BodyParserMiddleware(BaseHTTPMiddleware):
    """
    Parse JSON request bodies into the request context.

    Bodies of requests whose content type is JSON are decoded and bound
    under BODY_KEY. Other content types and empty bodies bind nothing.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_type = request.headers.get("Content-Type", "")
        if "json" not in content_type.lower():
            return await call_next(request)

        raw = await request.body()
        if not raw.strip():
            return await call_next(request)

        try:
            body = json.loads(raw)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.warning(f"Malformed JSON body for {request.method} {request.url.path}: {e}")
            return write_error(request, MissingRequiredDataError("malformed JSON body"))

        _bind(request, BODY_KEY, body)
        return await call_next(request)
