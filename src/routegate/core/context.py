"""Request-scoped context carried in the ASGI scope"""

from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

# ASGI scope entry holding the RequestContext of the in-flight request
CONTEXT_SCOPE_KEY = "routegate.context"


class ContextKey:
    """Private, identity-compared context key"""

    __slots__ = ("name",)

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"ContextKey({self.name!r})"


PARAMS_KEY = ContextKey("params")
BODY_KEY = ContextKey("body")
SESSION_USER_KEY = ContextKey("session_user")


@dataclass(frozen=True)
class RequestContext:
    """
    Immutable chain of key -> value bindings.

    Each ``with_value`` call returns a new link pointing at its parent, so a
    derived context sees every binding of the context it came from while
    the parent stays untouched.
    """

    key: Optional[ContextKey] = None
    val: Any = None
    parent: Optional["RequestContext"] = None

    def with_value(self, key: ContextKey, value: Any) -> "RequestContext":
        return RequestContext(key=key, val=value, parent=self)

    def value(self, key: ContextKey, default: Any = None) -> Any:
        ctx: Optional[RequestContext] = self
        while ctx is not None:
            if ctx.key is key:
                return ctx.val
            ctx = ctx.parent
        return default

    def __contains__(self, key: ContextKey) -> bool:
        marker = object()
        return self.value(key, marker) is not marker


EMPTY_CONTEXT = RequestContext()


def context_from_scope(scope: MutableMapping[str, Any]) -> RequestContext:
    return scope.get(CONTEXT_SCOPE_KEY, EMPTY_CONTEXT)


def scope_with_context(
    scope: MutableMapping[str, Any], context: RequestContext
) -> dict[str, Any]:
    """Copy of ``scope`` carrying ``context``; the original scope is left as is"""
    derived = dict(scope)
    derived[CONTEXT_SCOPE_KEY] = context
    return derived
