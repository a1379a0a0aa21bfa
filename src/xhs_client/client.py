"""
Signed client for the Xiaohongshu web API.
"""

from __future__ import annotations

import json
import logging
import math
import random
import time
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from .classifier import classify_response
from .config import DEFAULT_TIMEOUT_MS, DEFAULT_USER_AGENT, ClientConfig
from .exceptions import DataFetchError, ErrorCode, IPBlockedError, TransportError
from .headers import build_request_headers, compose_signed_headers
from .models import RoutingTarget, SearchNoteType, SearchSortType
from .normalize import extract_initial_state
from .session import Session
from .signer import CommonDeriver, Signer

logger = logging.getLogger(__name__)

HOME_URL = "https://www.xiaohongshu.com"

# Characters left unescaped in query strings, in addition to alphanumerics and "-_.~"
_QUERY_SAFE = "!*'()"

_BASE36 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"


def _query_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            return ""
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, str):
        return value
    return ""


def build_query_string(params: Mapping[str, Any]) -> str:
    """
    Serialize query parameters the way the web client does.

    Sequences become repeated keys, booleans become ``true``/``false`` and
    None becomes an empty value.

    Examples:
        >>> build_query_string({"target_user_id": "5ff0", "num": 30})
        'target_user_id=5ff0&num=30'
        >>> build_query_string({"tag": ["a b", "c"]})
        'tag=a%20b&tag=c'
    """
    parts = []
    for key, value in params.items():
        name = quote(str(key), safe=_QUERY_SAFE)
        values = value if isinstance(value, (list, tuple)) else [value]
        for item in values:
            parts.append(f"{name}={quote(_query_value(item), safe=_QUERY_SAFE)}")
    return "&".join(parts)


def encode_json_body(body: Any) -> str:
    """
    Serialize a request body for the wire.

    Compact JSON with every character outside U+0000..U+007E written as a
    ``\\uXXXX`` escape (astral characters as surrogate pairs).
    """
    return json.dumps(body, separators=(",", ":"), ensure_ascii=True)


def base36encode(number: int) -> str:
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def get_search_id() -> str:
    """Generate a search session id: base36 of (epoch ms << 64) + random."""
    e = int(time.time() * 1000) << 64
    t = int(random.uniform(0, 2147483646))
    return base36encode(e + t)


class XhsClient:
    """
    Client for the Xiaohongshu web API.

    Every call is signed with the configured signer and classified into a
    payload or a typed error. Signature headers are built per call and never
    stored on the client, so concurrent calls on one instance are safe.

    Args:
        signer: Produces X-s/X-t for a request path, body and cookie
        derive_common: Produces X-s-common from (a1, b1, X-s, X-t)
        cookie: Cookie string of a logged-in session
        user_agent: User-Agent header. Default: desktop Chrome
        timeout_ms: Overall request timeout in milliseconds. Default: 10000
        proxy: Optional proxy URL

    Example:
        >>> client = XhsClient(signer, derive_common, cookie=cookie)
        >>> note = await client.get_note_by_id("6505318c000000001f03c5a6")
    """

    def __init__(
        self,
        signer: Signer,
        derive_common: CommonDeriver,
        *,
        cookie: str | None = None,
        user_agent: str | None = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        proxy: str | None = None,
    ):
        self.signer = signer
        self.derive_common = derive_common
        self.session = Session(cookie)
        self.user_agent = user_agent or DEFAULT_USER_AGENT
        self.timeout_ms = timeout_ms
        self.proxy = proxy

    @classmethod
    def from_config(
        cls,
        config: ClientConfig,
        signer: Signer,
        derive_common: CommonDeriver,
    ) -> XhsClient:
        """
        Build a client from a ClientConfig.

        Args:
            config: Cookie, user agent, timeout and proxy settings
            signer: Produces X-s/X-t for each request
            derive_common: Produces X-s-common

        Returns:
            A new XhsClient
        """
        return cls(
            signer,
            derive_common,
            cookie=config.cookie,
            user_agent=config.user_agent,
            timeout_ms=config.timeout_ms,
            proxy=config.proxy,
        )

    @property
    def cookie(self) -> str | None:
        return self.session.get_cookie()

    @cookie.setter
    def cookie(self, cookie: str | None) -> None:
        self.session.set_cookie(cookie)

    @property
    def cookie_dict(self) -> dict[str, str]:
        return self.session.cookie_dict

    def _http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_ms / 1000,
            proxy=self.proxy,
            headers={
                "user-agent": self.user_agent,
                "Content-Type": "application/json",
            },
        )

    async def _send(
        self,
        method: str,
        url: str,
        headers: Mapping[str, str],
        content: str | None = None,
    ) -> httpx.Response:
        logger.debug("%s %s", method, url)
        try:
            async with self._http_client() as client:
                response = await client.request(method, url, headers=headers, content=content)
        except httpx.RequestError as e:
            logger.debug("%s %s failed: %r", method, url, e)
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response

    async def request(
        self,
        method: str,
        uri: str,
        *,
        params: Mapping[str, Any] | None = None,
        body: Any = None,
        target: RoutingTarget = RoutingTarget.DEFAULT,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Sign, send and classify one API call.

        Args:
            method: HTTP method (GET, POST)
            uri: API path, e.g. /api/sns/web/v1/feed
            params: Query parameters, appended to the path before signing
            body: JSON body; signed as-is and sent escaped
            target: Which host to send the request to
            headers: Extra headers for this call only

        Returns:
            The ``data`` payload of a successful envelope, or the raw
            response when the body is empty

        Raises:
            ResponseError: Subclass matching the failure kind
            TransportError: On network errors and timeouts
            SignerError: If the signer output is unusable
        """
        method = method.upper()
        if params:
            uri = f"{uri}?{build_query_string(params)}"

        # One cookie read per call: what is signed is what is sent
        cookie = self.session.snapshot()
        signed = await compose_signed_headers(
            uri,
            body,
            cookie,
            signer=self.signer,
            derive_common=self.derive_common,
        )
        request_headers = build_request_headers(signed, cookie, headers)

        content: str | None = None
        if body is not None:
            content = encode_json_body(body)
            request_headers["Content-Type"] = "application/json"

        response = await self._send(method, f"{target.host}{uri}", request_headers, content)
        return classify_response(response)

    async def get(
        self,
        uri: str,
        params: Mapping[str, Any] | None = None,
        target: RoutingTarget = RoutingTarget.DEFAULT,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Signed GET request.

        Args:
            uri: API path
            params: Query parameters, signed as part of the path
            target: Which host to send the request to
            headers: Extra headers for this call only

        Returns:
            The success payload (see ``request``)
        """
        return await self.request("GET", uri, params=params, target=target, headers=headers)

    async def post(
        self,
        uri: str,
        body: Any = None,
        target: RoutingTarget = RoutingTarget.DEFAULT,
        headers: Mapping[str, str] | None = None,
    ) -> Any:
        """
        Signed POST request with a JSON body.

        Args:
            uri: API path
            body: JSON-serializable body, or None
            target: Which host to send the request to
            headers: Extra headers for this call only

        Returns:
            The success payload (see ``request``)
        """
        return await self.request("POST", uri, body=body, target=target, headers=headers)

    async def get_note_by_id(self, note_id: str) -> Any:
        """Fetch a note's detail card through the feed API."""
        body = {
            "source_note_id": note_id,
            "image_scenes": ["CRD_WM_WEBP"],
        }
        res = await self.post("/api/sns/web/v1/feed", body)
        return res["items"][0]["note_card"]

    async def get_note_by_id_from_html(self, note_id: str) -> Any:
        """
        Fetch a note from its explore page instead of the JSON API.

        The page state is unsigned; its keys are normalized to snake_case so
        the result has the same shape as the API's note card.

        Raises:
            IPBlockedError: If the page reports a blocked network
            DataFetchError: If the page carries no usable note state
            TransportError: On network errors and timeouts
        """
        headers = {
            "user-agent": self.user_agent,
            "referer": f"{HOME_URL}/",
        }
        cookie = self.session.snapshot()
        if cookie:
            headers["Cookie"] = cookie

        response = await self._send("GET", f"{HOME_URL}/explore/{note_id}", headers)
        html = response.text
        context = {"status_code": response.status_code, "headers": response.headers}

        try:
            state = extract_initial_state(html)
            if state is not None:
                return state["note"]["note_detail_map"][note_id]["note"]
        except (KeyError, TypeError, ValueError) as e:
            raise DataFetchError(
                f"Unusable note state in page for note {note_id}: {e!r}",
                response,
                **context,
            ) from e

        if ErrorCode.IP_BLOCK.msg in html:
            logger.warning("Explore page reports IP block for note %s", note_id)
            raise IPBlockedError(ErrorCode.IP_BLOCK.msg, response, **context)

        raise DataFetchError(f"No note state found in page for note {note_id}", response, **context)

    async def get_self_info(self) -> Any:
        """Current user's profile (v1 endpoint)."""
        return await self.get("/api/sns/web/v1/user/selfinfo")

    async def get_self_info_v2(self) -> Any:
        """Current user's profile (v2 endpoint)."""
        return await self.get("/api/sns/web/v2/user/me")

    async def get_user_info(self, user_id: str) -> Any:
        """
        Another user's public profile.

        Args:
            user_id: Target user id

        Returns:
            The user info payload
        """
        return await self.get("/api/sns/web/v1/user/otherinfo", {"target_user_id": user_id})

    async def get_note_by_keyword(
        self,
        keyword: str,
        page: int = 1,
        page_size: int = 20,
        sort: SearchSortType = SearchSortType.GENERAL,
        note_type: SearchNoteType = SearchNoteType.ALL,
    ) -> Any:
        """Search notes by keyword."""
        body = {
            "keyword": keyword,
            "page": page,
            "page_size": page_size,
            "search_id": get_search_id(),
            "sort": sort.value,
            "note_type": note_type.value,
            "image_formats": ["jpg", "webp", "avif"],
            "ext_flags": [],
        }
        return await self.post("/api/sns/web/v1/search/notes", body)
