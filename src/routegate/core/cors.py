"""CORS origin policy evaluated by the entry gate"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional

from ..config.settings import CORS_ALLOWED_LIST_KEY, ConfigLookup

logger = logging.getLogger(__name__)

ALLOW_METHODS = "POST, GET, OPTIONS, PUT, DELETE"
ALLOW_HEADERS = (
    "Accept, Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, "
    "Authorization, X-Requested-With, X-App-Source, X-Request-Id"
)


@dataclass(frozen=True)
class CORSDecision:
    """Outcome of the origin check: allowed or not, and the headers to send"""

    allowed: bool
    headers: Dict[str, str] = field(default_factory=dict)


def origin_allowed(origin: str, allowed_list: str) -> bool:
    """
    Check ``origin`` against a comma-separated allow-list.

    Entries are compared whole after trimming whitespace and trailing
    slashes. There is no wildcard entry: credentials are always allowed, so
    every permitted origin must be listed.
    """
    origin = origin.rstrip("/")
    for entry in allowed_list.split(","):
        entry = entry.strip().rstrip("/")
        if entry and entry == origin:
            return True
    return False


def evaluate_origin(origin: Optional[str], config: ConfigLookup) -> CORSDecision:
    """
    Decide the CORS outcome for a request.

    The allow-list is looked up on every call so configuration changes
    apply to the next request.

    Args:
        origin: Value of the Origin header, None or "" when absent
        config: Configuration lookup holding the allow-list

    Returns:
        CORSDecision with the response headers, or a denial with no headers
    """
    if not origin:
        allow_origin = "*"
    elif origin_allowed(origin, config.get(CORS_ALLOWED_LIST_KEY)):
        allow_origin = origin
    else:
        logger.warning(f"Rejected request from origin not on allow-list: {origin}")
        return CORSDecision(allowed=False)

    return CORSDecision(
        allowed=True,
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": ALLOW_METHODS,
            "Access-Control-Allow-Headers": ALLOW_HEADERS,
        },
    )
