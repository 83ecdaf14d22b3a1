"""Claims provider interface for pluggable token validation backends"""

from abc import ABC, abstractmethod

from .claims import Claims


class IClaimsProvider(ABC):
    """
    Interface for claims providers.

    Implementations must:
    1. Verify the token signature
    2. Reject expired tokens and tokens for another issuer or audience
    3. Return the typed claims carried by the token
    """

    @abstractmethod
    async def validate_token(self, token: str) -> Claims:
        """
        Validate a JWT and extract its claims.

        Args:
            token: JWT token string (without "Bearer " prefix)

        Returns:
            Claims built from the token payload

        Raises:
            TokenValidationError: If token is invalid, expired, or signature verification fails
        """
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of this claims provider"""
        pass
