"""JWT claims provider implementation"""

import time
import logging
from typing import Any, Dict, List, Optional

import httpx
from jose import jwk, jwt
from jose.exceptions import ExpiredSignatureError, JOSEError, JWTError

from ..core.auth_provider import IClaimsProvider
from ..core.claims import Claims
from ..core.errors import TokenValidationError

logger = logging.getLogger(__name__)


class JWTClaimsProvider(IClaimsProvider):
    """
    Claims provider for signed JWTs.

    Features:
    - HS* validation with a shared secret
    - RS256 validation with a key fetched from a JWKS endpoint (cached)
    - Token expiration validation
    - Optional issuer and audience validation
    """

    def __init__(
        self,
        secret: Optional[str] = None,
        jwks_url: Optional[str] = None,
        algorithms: Optional[List[str]] = None,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        cache_ttl: int = 300,
    ):
        """
        Initialize JWT claims provider.

        Args:
            secret: Shared secret for HS* tokens; takes precedence over jwks_url
            jwks_url: JWKS endpoint for RS256 tokens
            algorithms: Accepted algorithms (default: HS256 with a secret, RS256 with JWKS)
            audience: Expected 'aud' claim, skipped when None
            issuer: Expected 'iss' claim, skipped when None
            cache_ttl: JWK cache TTL in seconds (default: 300 = 5 minutes)

        Raises:
            ValueError: If neither secret nor jwks_url is given
        """
        if not secret and not jwks_url:
            raise ValueError("JWTClaimsProvider needs a secret or a JWKS URL")

        self.secret = secret
        self.jwks_url = jwks_url
        self.algorithms = algorithms or (["HS256"] if secret else ["RS256"])
        self.audience = audience
        self.issuer = issuer
        self.cache_ttl = cache_ttl
        self._cached_key: Optional[str] = None
        self._cache_time = 0.0

        source = "shared secret" if secret else f"JWKS URL {jwks_url} (cache TTL: {cache_ttl}s)"
        logger.info(f"Initialized JWTClaimsProvider with {source}")

    async def validate_token(self, token: str) -> Claims:
        """
        Validate a JWT and extract its claims.

        Steps:
        1. Resolve the verification key (secret, or cached JWK)
        2. Verify signature and expiration
        3. Validate issuer and audience when configured
        4. Build typed claims from the payload

        Args:
            token: JWT token string (without "Bearer " prefix)

        Returns:
            Claims built from the token payload

        Raises:
            TokenValidationError: If token is invalid, expired, or signature verification fails
        """
        key = self.secret if self.secret else await self._get_public_key()

        try:
            payload: Dict[str, Any] = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError:
            logger.warning("Token validation failed: Token has expired")
            raise TokenValidationError("Token has expired")
        except JWTError as e:
            logger.warning(f"Token validation failed: {str(e)}")
            raise TokenValidationError(f"Invalid token: {str(e)}")

        claims = Claims.from_mapping(payload)
        logger.debug(f"Validated token for user {claims.uid or '<no uid>'}")
        return claims

    def get_provider_name(self) -> str:
        """Return the name of this claims provider"""
        return "jwt"

    async def _get_public_key(self) -> str:
        """
        Fetch public key from JWKS endpoint with caching.

        Returns:
            Public key in PEM format

        Raises:
            TokenValidationError: If JWKS endpoint is unreachable or invalid
        """
        # Check cache
        current_time = time.time()
        if self._cached_key and (current_time - self._cache_time) < self.cache_ttl:
            return self._cached_key

        # Fetch JWKS
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(self.jwks_url)
                response.raise_for_status()
                jwks_data = response.json()
        except httpx.HTTPError as e:
            logger.error(f"Failed to fetch JWKS from {self.jwks_url}: {str(e)}")
            raise TokenValidationError(f"Cannot fetch JWKS: {str(e)}")

        keys = jwks_data.get("keys") if isinstance(jwks_data, dict) else None
        if not keys:
            raise TokenValidationError("No signing keys found in JWKS endpoint")

        try:
            key_obj = jwk.construct(keys[0], algorithm=self.algorithms[0])
            public_key_pem = key_obj.to_pem().decode("utf-8")
        except (JOSEError, KeyError, TypeError) as e:
            logger.error(f"Error processing JWKS: {str(e)}")
            raise TokenValidationError(f"Invalid JWKS format: {str(e)}")

        # Cache the key
        self._cached_key = public_key_pem
        self._cache_time = current_time

        logger.debug(f"Fetched and cached public key from {self.jwks_url}")

        return public_key_pem
