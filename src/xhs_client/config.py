"""
Client configuration from constructor values and environment variables.

Environment variables:
    XHS_COOKIE - Cookie string copied from a logged-in browser session
    XHS_USER_AGENT - Override the user agent
    XHS_TIMEOUT_MS - Overall request timeout in milliseconds (default: 10000)
    XHS_PROXY - Proxy URL, e.g. http://127.0.0.1:8080
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/111.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT_MS = 10000


@dataclass
class ClientConfig:
    """
    Settings supplied to a client at construction.

    Attributes:
        cookie: Raw cookie string, or None for an anonymous session
        user_agent: User-Agent header sent with every request
        timeout_ms: Overall request timeout in milliseconds
        proxy: Optional proxy URL passed to httpx
    """
    cookie: str | None = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    proxy: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ClientConfig:
        """
        Build a config from environment variables.

        Raises:
            ValueError: If XHS_TIMEOUT_MS is not a positive integer
        """
        env = os.environ if environ is None else environ

        timeout_raw = env.get("XHS_TIMEOUT_MS")
        timeout_ms = DEFAULT_TIMEOUT_MS
        if timeout_raw:
            try:
                timeout_ms = int(timeout_raw)
            except ValueError:
                raise ValueError(f"XHS_TIMEOUT_MS must be an integer, got {timeout_raw!r}")
            if timeout_ms <= 0:
                raise ValueError(f"XHS_TIMEOUT_MS must be positive, got {timeout_ms}")

        return cls(
            cookie=env.get("XHS_COOKIE") or None,
            user_agent=env.get("XHS_USER_AGENT") or DEFAULT_USER_AGENT,
            timeout_ms=timeout_ms,
            proxy=env.get("XHS_PROXY") or None,
        )
