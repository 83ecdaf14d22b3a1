"""Session claims extracted from validated JWT tokens"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class Claims:
    """
    Typed view over a validated claims payload.

    Built once at the authentication boundary. Shape problems in the raw
    payload never raise: a non-string ``uid`` becomes ``None`` and a roles
    claim that is neither a string nor a list of strings becomes empty.
    """

    uid: Optional[str] = None
    roles: tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_mapping(cls, payload: Any) -> "Claims":
        if not isinstance(payload, Mapping):
            return cls()

        uid = payload.get("uid")
        if not isinstance(uid, str):
            uid = None

        return cls(
            uid=uid,
            roles=_coerce_roles(payload.get("roles")),
            raw=MappingProxyType(dict(payload)),
        )

    @property
    def has_uid(self) -> bool:
        return bool(self.uid)

    def get(self, name: str, default: Any = None) -> Any:
        """Raw claim lookup for claims without a typed field"""
        return self.raw.get(name, default)


def _coerce_roles(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,) if value else ()
    if isinstance(value, (list, tuple, set, frozenset)):
        if all(isinstance(role, str) for role in value):
            # sets have no order; sort so the result is stable
            if isinstance(value, (set, frozenset)):
                return tuple(sorted(value))
            return tuple(value)
    return ()
