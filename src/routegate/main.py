"""
routegate - Main Application

Implements the gateway adapter around the Starlette router:
- CORS origin enforcement at a single entry gate
- Route parameters propagated through request-scoped context
- JWT claims bound into context for session/authorization helpers
- Standard JSON envelopes for every API response
"""

import logging
import sys
from typing import Optional

from .api.middleware import AuthMiddleware, BodyParserMiddleware
from .api.router import GateRouter
from .api.routes import register_routes
from .config import ConfigLookup, Settings, SettingsConfigLookup, get_settings
from .core.auth_provider import IClaimsProvider
from .infrastructure import JWTClaimsProvider

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    config: Optional[ConfigLookup] = None,
    claims_provider: Optional[IClaimsProvider] = None,
) -> GateRouter:
    """
    Create and configure the gateway application.

    Args:
        settings: Application settings (default: environment settings)
        config: Configuration lookup for the CORS allow-list (default: backed by settings)
        claims_provider: Token validation backend (default: built from settings)

    Returns:
        Configured GateRouter, usable directly as an ASGI app
    """
    settings = settings or get_settings()
    gate = GateRouter(config or SettingsConfigLookup(settings))

    register_routes(gate)

    gate.add_middleware(BodyParserMiddleware)

    claims_provider = claims_provider or _create_claims_provider(settings)
    if claims_provider is not None:
        gate.add_middleware(
            AuthMiddleware,
            claims_provider=claims_provider,
            auth_required=settings.auth_required,
        )
    else:
        logger.warning("No JWT secret or JWKS URL configured; requests carry no session claims")

    return gate


def _create_claims_provider(settings: Settings) -> Optional[IClaimsProvider]:
    """
    Create claims provider based on configuration.

    Returns:
        JWTClaimsProvider, or None when neither a secret nor a JWKS URL is set
    """
    if not settings.jwt_secret and not settings.jwks_url:
        return None
    return JWTClaimsProvider(
        secret=settings.jwt_secret,
        jwks_url=settings.jwks_url,
        algorithms=settings.jwt_algorithms_list,
        audience=settings.jwt_audience,
        issuer=settings.jwt_issuer,
        cache_ttl=settings.jwk_cache_ttl,
    )


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    # Configure logging level from settings
    logging.getLogger().setLevel(settings.log_level)

    uvicorn.run(
        "routegate.main:app",
        host=settings.gateway_host,
        port=settings.gateway_port,
        log_level=settings.log_level.lower(),
    )
