from __future__ import annotations

import hmac

from fastapi import HTTPException, Request

from forecastpanel.config import settings

# Paths reachable without a key (liveness probes)
OPEN_PATHS = frozenset({"/healthz"})


def _presented_key(request: Request) -> str:
    """Header first; ``?api_key=`` for dashboards that can't set headers."""
    return request.headers.get("X-API-KEY") or request.query_params.get("api_key", "")


async def verify_api_key(request: Request) -> None:
    """Dependency that enforces a client key when FORECASTPANEL_API_KEY is set."""
    if not settings.API_KEY or request.url.path in OPEN_PATHS:
        return
    if not hmac.compare_digest(
        _presented_key(request).encode(), settings.API_KEY.encode()
    ):
        raise HTTPException(status_code=401, detail="Invalid or missing API key")
