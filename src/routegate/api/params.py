"""Accessors for route parameters, query parameters and the parsed body"""

from typing import Any, List

from fastapi import Request

from ..core.context import BODY_KEY, PARAMS_KEY, context_from_scope
from ..core.errors import MissingParamsError
from ..core.params import Params


def route_params(request: Request) -> Params:
    """
    Route parameters bound by RouteHandler.

    Raises:
        MissingParamsError: If the route was dispatched without parameters
            or without going through RouteHandler
    """
    params = context_from_scope(request.scope).value(PARAMS_KEY)
    if params is None:
        raise MissingParamsError(
            f"no route parameters bound for {request.method} {request.url.path}"
        )
    return params


def param_by_name(name: str, request: Request) -> str:
    """Returns the route param by name"""
    return route_params(request).by_name(name)


def query_param_by_name(name: str, request: Request) -> str:
    """Returns the first query param by name, "" when absent"""
    return request.query_params.get(name, "")


def query_params_by_name(name: str, request: Request) -> List[str]:
    """Returns every query param value for name"""
    return request.query_params.getlist(name)


def request_body(request: Request) -> Any:
    """Returns the parsed request body, None if no body was attached"""
    return context_from_scope(request.scope).value(BODY_KEY)
