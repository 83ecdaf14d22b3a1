"""Tests for route registration and route parameter injection."""

import pytest
from httpx import ASGITransport, AsyncClient
from starlette.responses import JSONResponse, PlainTextResponse

from routegate.api.params import (
    param_by_name,
    query_param_by_name,
    query_params_by_name,
    request_body,
    route_params,
)
from routegate.api.router import GateRouter, RouteHandler, to_route_path
from routegate.config import StaticConfigLookup
from routegate.core.claims import Claims
from routegate.core.context import (
    BODY_KEY,
    CONTEXT_SCOPE_KEY,
    EMPTY_CONTEXT,
    PARAMS_KEY,
    SESSION_USER_KEY,
    context_from_scope,
)
from routegate.core.errors import MissingParamsError
from routegate.core.params import Params
from routegate.core.response import data_response

from conftest import ASGIRecorder, make_scope


def _gate() -> GateRouter:
    return GateRouter(StaticConfigLookup({}))


def _client(gate: GateRouter) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=gate), base_url="http://test")


class TestRoutePath:
    @pytest.mark.parametrize(
        "pattern, expected",
        [
            ("/users/:uid", "/users/{uid}"),
            ("/orgs/:org/users/:uid", "/orgs/{org}/users/{uid}"),
            ("/static/*filepath", "/static/{filepath:path}"),
            ("/users/{uid}", "/users/{uid}"),
            ("/health", "/health"),
        ],
    )
    def test_to_route_path(self, pattern, expected):
        assert to_route_path(pattern) == expected


class TestRouteHandler:
    async def test_params_bound_in_derived_context(self):
        seen = {}

        async def handler(request):
            seen["ctx"] = context_from_scope(request.scope)
            return PlainTextResponse("ok")

        claims = Claims.from_mapping({"uid": "42"})
        upstream = EMPTY_CONTEXT.with_value(BODY_KEY, {"name": "x"}).with_value(SESSION_USER_KEY, claims)
        scope = make_scope(path="/users/42", path_params={"uid": "42"})
        scope[CONTEXT_SCOPE_KEY] = upstream
        recorder = ASGIRecorder()

        await RouteHandler(handler)(scope, recorder.receive, recorder.send)

        ctx = seen["ctx"]
        assert ctx.value(PARAMS_KEY) == Params([("uid", "42")])
        assert ctx.value(BODY_KEY) == {"name": "x"}
        assert ctx.value(SESSION_USER_KEY) is claims
        # upstream context and scope untouched
        assert scope[CONTEXT_SCOPE_KEY] is upstream
        assert PARAMS_KEY not in upstream
        assert recorder.status == 200

    async def test_no_params_passes_request_through(self):
        seen = {}

        async def handler(request):
            seen["scope"] = request.scope
            return PlainTextResponse("ok")

        scope = make_scope(path="/health", path_params={})
        recorder = ASGIRecorder()

        await RouteHandler(handler)(scope, recorder.receive, recorder.send)

        assert seen["scope"] is scope
        assert PARAMS_KEY not in context_from_scope(scope)

    async def test_same_params_give_same_bindings(self):
        contexts = []

        async def handler(request):
            contexts.append(context_from_scope(request.scope))
            return PlainTextResponse("ok")

        wrapped = RouteHandler(handler)
        for _ in range(2):
            recorder = ASGIRecorder()
            scope = make_scope(path="/users/42", path_params={"uid": "42"})
            await wrapped(scope, recorder.receive, recorder.send)

        assert contexts[0].value(PARAMS_KEY) == contexts[1].value(PARAMS_KEY)

    async def test_sync_handler_runs(self):
        def handler(request):
            return PlainTextResponse(param_by_name("uid", request))

        recorder = ASGIRecorder()
        scope = make_scope(path="/users/7", path_params={"uid": "7"})
        await RouteHandler(handler)(scope, recorder.receive, recorder.send)

        assert recorder.messages[1]["body"] == b"7"

    async def test_envelope_return_is_written(self):
        async def handler(request):
            return data_response({"a": 1})

        recorder = ASGIRecorder()
        await RouteHandler(handler)(make_scope(), recorder.receive, recorder.send)

        assert recorder.status == 200
        assert recorder.messages[1]["body"] == b'{"status":"OK","data":{"a":1}}'


class TestDispatch:
    async def test_param_by_name_inside_handler(self):
        gate = _gate()

        @gate.get("/orgs/:org/users/:uid")
        async def show(request):
            return JSONResponse({
                "org": param_by_name("org", request),
                "uid": param_by_name("uid", request),
                "names": [p.name for p in route_params(request)],
            })

        async with _client(gate) as client:
            response = await client.get("/orgs/acme/users/42")

        assert response.json() == {"org": "acme", "uid": "42", "names": ["org", "uid"]}

    async def test_methods_on_same_path(self):
        gate = _gate()
        gate.get("/users/:uid", lambda request: PlainTextResponse("get"))
        gate.put("/users/:uid", lambda request: PlainTextResponse("put"))
        gate.delete("/users/:uid", lambda request: PlainTextResponse("delete"))

        async with _client(gate) as client:
            assert (await client.get("/users/1")).text == "get"
            assert (await client.put("/users/1")).text == "put"
            assert (await client.delete("/users/1")).text == "delete"
            assert (await client.post("/users/1")).status_code == 405

    async def test_param_accessor_without_params_is_contract_violation(self):
        gate = _gate()

        @gate.get("/health")
        async def health(request):
            return PlainTextResponse(param_by_name("uid", request))

        async with _client(gate) as client:
            with pytest.raises(MissingParamsError):
                await client.get("/health")

    async def test_registration_closed_after_serving(self):
        gate = _gate()
        gate.get("/a", lambda request: PlainTextResponse("a"))

        async with _client(gate) as client:
            await client.get("/a")

        with pytest.raises(RuntimeError):
            gate.get("/b", lambda request: PlainTextResponse("b"))


class TestQueryAndBody:
    def _request(self, query_string: bytes = b"", **extra):
        from fastapi import Request

        return Request(make_scope(query_string=query_string, **extra))

    def test_query_param_by_name(self):
        request = self._request(b"q=routers&page=2&q=second")
        assert query_param_by_name("q", request) == "routers"
        assert query_param_by_name("page", request) == "2"

    def test_missing_query_param_is_empty(self):
        request = self._request()
        assert query_param_by_name("q", request) == ""
        assert query_params_by_name("q", request) == []

    def test_query_params_by_name(self):
        request = self._request(b"tag=a&tag=b&other=c")
        assert query_params_by_name("tag", request) == ["a", "b"]

    def test_request_body_absent(self):
        assert request_body(self._request()) is None

    def test_request_body_from_context(self):
        request = self._request(**{CONTEXT_SCOPE_KEY: EMPTY_CONTEXT.with_value(BODY_KEY, [1, 2])})
        assert request_body(request) == [1, 2]
