"""Core domain models: context, carriers, envelopes and errors"""

from .auth_provider import IClaimsProvider
from .claims import Claims
from .context import (
    BODY_KEY,
    PARAMS_KEY,
    SESSION_USER_KEY,
    ContextKey,
    RequestContext,
)
from .errors import (
    APIError,
    ForbiddenError,
    MissingParamsError,
    MissingRequiredDataError,
    NotRecognizedError,
    TokenValidationError,
    UnauthorizedError,
)
from .params import Param, Params
from .response import (
    APIResponse,
    data_response,
    error_response,
    string_error_response,
    write_error,
    write_json,
)

__all__ = [
    "APIError",
    "APIResponse",
    "BODY_KEY",
    "Claims",
    "ContextKey",
    "ForbiddenError",
    "IClaimsProvider",
    "MissingParamsError",
    "MissingRequiredDataError",
    "NotRecognizedError",
    "PARAMS_KEY",
    "Param",
    "Params",
    "RequestContext",
    "SESSION_USER_KEY",
    "TokenValidationError",
    "UnauthorizedError",
    "data_response",
    "error_response",
    "string_error_response",
    "write_error",
    "write_json",
]
