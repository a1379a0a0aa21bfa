"""
Cookie state for a client instance.
"""

from __future__ import annotations

import threading


def parse_cookie(cookie: str | None) -> dict[str, str]:
    """
    Parse a ``;``-delimited ``key=value`` cookie string.

    Pairs without ``=`` or with an empty key are skipped. Values are kept
    as-is (no URL decoding).

    Examples:
        >>> parse_cookie("a1=abc; web_session=xyz")
        {'a1': 'abc', 'web_session': 'xyz'}
        >>> parse_cookie("garbage")
        {}
    """
    if not cookie:
        return {}

    result: dict[str, str] = {}
    for pair in cookie.split(";"):
        key, sep, value = pair.strip().partition("=")
        if not sep or not key:
            continue
        result[key.strip()] = value.strip()
    return result


class Session:
    """
    Holds the authentication cookie.

    The raw cookie string is the only stored state; every derived field is
    parsed from it on read.
    """

    def __init__(self, cookie: str | None = None):
        self._lock = threading.Lock()
        self._cookie = cookie or None

    def set_cookie(self, raw: str | None) -> None:
        """
        Replace the stored cookie.

        Args:
            raw: New cookie string; empty or None clears the session
        """
        with self._lock:
            self._cookie = raw or None

    def get_cookie(self) -> str | None:
        """Return the stored cookie, or None when unset."""
        with self._lock:
            return self._cookie

    def snapshot(self) -> str:
        """Cookie string for one request ("" when unset)."""
        return self.get_cookie() or ""

    @property
    def cookie_dict(self) -> dict[str, str]:
        """All fields parsed from the stored cookie."""
        return parse_cookie(self.get_cookie())

    def get_cookie_field(self, name: str) -> str | None:
        """
        Look up one cookie field.

        Args:
            name: Field name, e.g. ``a1``

        Returns:
            The field value, or None if absent or the cookie is malformed
        """
        return self.cookie_dict.get(name)
