"""API key guard for the leaderboard adapter."""

from __future__ import annotations

import os
from typing import Set

from fastapi import Header, HTTPException, Query, status


def load_api_keys() -> Set[str]:
    """Allowed keys from ``API_KEY`` plus the comma separated ``API_KEYS``."""

    keys = {key.strip() for key in os.getenv("API_KEYS", "").split(",") if key.strip()}
    primary = os.getenv("API_KEY")
    if primary:
        keys.add(primary)
    return keys


def require_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    api_key_query: str | None = Query(default=None, alias="apiKey"),
) -> str | None:
    """Require a matching API key when ``REQUIRE_API_KEY=1``."""

    candidate = x_api_key or api_key_query

    if os.getenv("REQUIRE_API_KEY", "0") != "1":
        return candidate

    allowed_keys = load_api_keys()
    if not allowed_keys or candidate not in allowed_keys:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="invalid api key",
        )

    return candidate


__all__ = ["load_api_keys", "require_api_key"]
