"""
Signature header composition and per-request header building.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from .models import COMMON_HEADER, SIGNATURE_HEADER, TIMESTAMP_HEADER, SignedHeaders
from .session import parse_cookie
from .signer import CommonDeriver, Signer, call_signer

# Headers that are bound to a single request's URL/body/cookie
SIGNATURE_HEADERS = frozenset({
    SIGNATURE_HEADER,
    TIMESTAMP_HEADER,
    COMMON_HEADER,
})

# Headers callers may not supply: the signed values and the cookie they cover
PROTECTED_HEADERS = SIGNATURE_HEADERS | {"Cookie"}

# Secondary identifier passed to the common deriver; the web client sends it empty
DEFAULT_B1 = ""


async def compose_signed_headers(
    url: str,
    body: Any,
    cookie: str,
    *,
    signer: Signer,
    derive_common: CommonDeriver,
) -> SignedHeaders:
    """
    Compute the signature headers for one request.

    Args:
        url: Request path including the final query string
        body: Structured request body (unescaped), or None
        cookie: Cookie string that will be sent with the request
        signer: Signature provider
        derive_common: X-s-common derivation function

    Returns:
        SignedHeaders bound to this url/body/cookie triple

    Raises:
        SignerError: If the signer output cannot be used
    """
    a1 = parse_cookie(cookie).get("a1", "")

    result = await call_signer(signer, url, body, cookie)
    common = derive_common(a1, DEFAULT_B1, result.token, result.timestamp)

    return SignedHeaders(
        signature=result.token,
        timestamp=result.timestamp,
        common=common,
    )


def build_request_headers(
    signed: SignedHeaders,
    cookie: str,
    extra: Mapping[str, str] | None = None,
) -> httpx.Headers:
    """
    Build a fresh header set for a single call.

    Extra headers are kept, except any (in any letter case) that would
    collide with the signature headers or the cookie that was signed.

    Args:
        signed: Signature headers for this call
        cookie: Cookie string that was signed ("" for none)
        extra: Caller-supplied headers for this call only

    Returns:
        Case-insensitive httpx.Headers, never shared between calls
    """
    headers = httpx.Headers(extra or {})
    for name in PROTECTED_HEADERS:
        if name in headers:
            del headers[name]

    headers.update(signed.as_dict())
    if cookie:
        headers["Cookie"] = cookie
    return headers
