"""
Error taxonomy for the gateway.

APIError subclasses end up in an ERROR envelope with their status code.
MissingParamsError is a programming mistake (a handler registered without
the parameter-injecting wrapper) and is not meant to be caught.
"""

from fastapi import status


class APIError(Exception):
    """Base exception for errors written to the client as an envelope"""

    default_message = "error handling request"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ForbiddenError(APIError):
    default_message = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class UnauthorizedError(APIError):
    default_message = "unauthorized"
    status_code = status.HTTP_401_UNAUTHORIZED


class MissingRequiredDataError(APIError):
    default_message = "missing required data"
    status_code = status.HTTP_400_BAD_REQUEST


class NotRecognizedError(APIError):
    default_message = "not recognized"
    status_code = status.HTTP_401_UNAUTHORIZED


class MissingParamsError(LookupError):
    """Route parameters requested on a request that never went through RouteHandler"""


class TokenValidationError(ValueError):
    """Raised by claims providers when a token is invalid, expired or unverifiable"""
