"""
Shared pytest fixtures.

Function-scoped:
    settings     Settings with a fixed allow-list and JWT secret
    gate         GateRouter built by create_app(settings)
    client       httpx AsyncClient talking to the gate over ASGITransport
    make_token   Factory for HS256 tokens signed with the test secret
"""

import time
from typing import Any, Callable, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from jose import jwt

from routegate.config import Settings
from routegate.main import create_app

SECRET = "test-secret-not-real"
ALLOWED_ORIGIN = "https://app.example.com"
OTHER_ALLOWED_ORIGIN = "http://localhost:3000"


def make_scope(
    method: str = "GET",
    path: str = "/",
    headers: Optional[List[tuple]] = None,
    query_string: bytes = b"",
    **extra: Any,
) -> Dict[str, Any]:
    """Minimal HTTP scope for driving ASGI callables and Requests directly"""
    scope = {
        "type": "http",
        "http_version": "1.1",
        "method": method,
        "scheme": "http",
        "server": ("test", 80),
        "path": path,
        "raw_path": path.encode(),
        "root_path": "",
        "query_string": query_string,
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or [])],
    }
    scope.update(extra)
    return scope


class ASGIRecorder:
    """receive/send pair collecting every message sent by an ASGI app"""

    def __init__(self, body: bytes = b""):
        self.body = body
        self.messages: List[Dict[str, Any]] = []

    async def receive(self) -> Dict[str, Any]:
        return {"type": "http.request", "body": self.body, "more_body": False}

    async def send(self, message: Dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def status(self) -> int:
        return self.messages[0]["status"]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        cors_allowed_list=f"{ALLOWED_ORIGIN}, {OTHER_ALLOWED_ORIGIN}",
        jwt_secret=SECRET,
        auth_required=False,
    )


@pytest.fixture
def gate(settings):
    return create_app(settings)


@pytest_asyncio.fixture
async def client(gate):
    transport = ASGITransport(app=gate)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make_token(claims: Dict[str, Any], secret: str = SECRET, expires_in: int = 300) -> str:
        payload = dict(claims)
        payload.setdefault("exp", int(time.time()) + expires_in)
        return jwt.encode(payload, secret, algorithm="HS256")

    return _make_token


@pytest.fixture
def auth_header(make_token) -> Callable[..., Dict[str, str]]:
    def _auth_header(claims: Dict[str, Any]) -> Dict[str, str]:
        return {"Authorization": f"Bearer {make_token(claims)}"}

    return _auth_header
