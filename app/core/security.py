"""
Request security helpers: client identification and the database-backed rate limiter.

The limiter delegates counting to the `check_rate_limit` Postgres function
(see app/modules/tenants/models.py for its contract) so that limits hold across
every worker and instance. If that call fails, requests are allowed through.
"""

import logging
from fastapi import Request
from pydantic import BaseModel
from supabase import Client

logger = logging.getLogger(__name__)

RATE_LIMIT_RPC = "check_rate_limit"


class RateLimitResult(BaseModel):
    allowed: bool
    remaining: int


def get_client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For, else the socket peer, else "unknown"."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def rate_limit_key(scope: str, client_ip: str) -> str:
    return f"{scope}_{client_ip}"


def check_rate_limit(
    supabase: Client,
    key: str,
    limit: int = 20,
    window_ms: int = 60_000
) -> RateLimitResult:
    """Count one request against `key` and report whether it is within `limit` per `window_ms`.

    Fails open: any error from the database (or an unreadable reply) is logged
    and the request is treated as allowed.
    """
    try:
        result = supabase.rpc(RATE_LIMIT_RPC, {
            "p_key": key,
            "p_limit": limit,
            "p_window_ms": window_ms
        }).execute()
        data = result.data
        # Functions declared RETURNS TABLE come back as a one-row list
        if isinstance(data, list):
            data = data[0] if data else None
        if not isinstance(data, dict) or "allowed" not in data:
            raise ValueError(f"Unexpected rate limit response: {data!r}")
        return RateLimitResult(
            allowed=bool(data["allowed"]),
            remaining=max(int(data.get("remaining") or 0), 0)
        )
    except Exception as e:
        logger.error(f"Rate limit check failed for {key}, allowing request: {e}")
        return RateLimitResult(allowed=True, remaining=1)
