"""Infrastructure layer - Claims provider implementations"""

from .jwt_provider import JWTClaimsProvider

__all__ = ["JWTClaimsProvider"]
