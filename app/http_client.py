"""Shared HTTP client — connection pooling for all outbound requests.

One module-level singleton httpx.AsyncClient, used by the hosted table
backend connector (connectors/rest_store.py). No redirects, 30s default
timeout; per-request overrides via http.get(url, timeout=15).

Usage:
    from app.http_client import http
    resp = await http.get(url, params=params, timeout=15)
"""

import httpx

_LIMITS = httpx.Limits(
    max_connections=50,
    max_keepalive_connections=20,
    keepalive_expiry=30,
)

http = httpx.AsyncClient(
    timeout=30,
    limits=_LIMITS,
    follow_redirects=False,
)


async def close_clients():
    """Shut down the shared client. Call from app lifespan shutdown."""
    try:
        await http.aclose()
    except RuntimeError:
        pass
