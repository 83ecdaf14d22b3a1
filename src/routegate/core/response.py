"""Standard JSON envelope for API responses"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse

from .errors import APIError

logger = logging.getLogger(__name__)

STATUS_OK = "OK"
STATUS_ERROR = "ERROR"


@dataclass(frozen=True)
class APIResponse:
    """
    Response data representation for the API.

    Serialized as ``{"error"?, "status", "data"?}`` with empty fields left
    out. Build instances through ``data_response``, ``string_error_response``
    or ``error_response`` so that an envelope is never both OK and carrying
    error text.
    """

    error: str = ""
    status: str = ""
    data: Any = None

    @property
    def is_error(self) -> bool:
        return self.status == STATUS_ERROR

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.error:
            body["error"] = self.error
        if self.status:
            body["status"] = self.status
        if self.data is not None:
            body["data"] = self.data
        return body

    def write(self, request: Request, status_code: Optional[int] = None) -> JSONResponse:
        """
        Build the HTTP response for this envelope.

        ERROR envelopes are logged with the request path and user agent
        before the response is built.

        Args:
            request: Request being answered
            status_code: HTTP status, defaults to 200 for OK and 400 for ERROR

        Returns:
            JSONResponse carrying the serialized envelope
        """
        if self.is_error:
            logger.error(
                f"[ERROR][API][PATH: {request.url.path}]:: Error handling request. "
                f"ERROR: {self.error}. User agent: {request.headers.get('User-Agent', '')}"
            )
        if status_code is None:
            status_code = status.HTTP_400_BAD_REQUEST if self.is_error else status.HTTP_200_OK
        return write_json(self.to_dict(), status_code=status_code)


def data_response(data: Any = None) -> APIResponse:
    """Creates new API data response using the resource"""
    return APIResponse(error="", status=STATUS_OK, data=data)


def string_error_response(error: str) -> APIResponse:
    """Constructs error response based on input"""
    return APIResponse(error=error, status=STATUS_ERROR, data=None)


def error_response(err: Exception) -> APIResponse:
    """Constructs error response from an exception"""
    return string_error_response(str(err))


def write_error(request: Request, err: APIError) -> JSONResponse:
    """Write ``err`` as an ERROR envelope using its status code"""
    return error_response(err).write(request, status_code=err.status_code)


def write_json(payload: Any, status_code: int = status.HTTP_200_OK) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=payload)
