"""
Response classification into success payloads or typed errors.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .exceptions import (
    DataFetchError,
    ErrorCode,
    IPBlockedError,
    NeedVerificationError,
    SignatureRejectedError,
)
from .models import ChallengeInfo, ResponseEnvelope

logger = logging.getLogger(__name__)

# HTTP statuses the platform uses to demand a verification challenge
VERIFICATION_STATUSES = frozenset({461, 471})


def _is_empty(body: Any) -> bool:
    return body is None or body == "" or body == b""


def classify(
    status: int,
    headers: Mapping[str, str],
    body: Any,
    response: httpx.Response | None = None,
) -> Any:
    """
    Decide the outcome of one API response.

    Rules, in order:
    1. Empty body: return the raw response unchanged
    2. Verification status (461/471): raise NeedVerificationError
    3. ``success`` is truthy: return ``data`` (or ``success`` if data is absent)
    4. IP block code: raise IPBlockedError
    5. Signature fault code: raise SignatureRejectedError
    6. Anything else: raise DataFetchError

    Args:
        status: HTTP status code
        headers: Response headers (case-insensitive lookup)
        body: Parsed JSON body, or raw text if it did not parse
        response: Raw httpx response, attached to errors for diagnostics

    Returns:
        The success payload, or ``response`` for an empty body

    Raises:
        ResponseError: One of its subclasses for every non-success outcome
    """
    if _is_empty(body):
        return response

    # Normalize header names to lowercase for lookup
    normalized = {k.lower(): v for k, v in headers.items()}
    envelope = ResponseEnvelope.from_body(body)
    context = {"status_code": status, "headers": normalized, "envelope": envelope}

    if status in VERIFICATION_STATUSES:
        challenge = ChallengeInfo(
            verify_type=normalized.get("verifytype"),
            verify_uuid=normalized.get("verifyuuid"),
        )
        logger.warning(
            "Verification challenge (status %s, verifytype=%s, verifyuuid=%s)",
            status, challenge.verify_type, challenge.verify_uuid,
        )
        raise NeedVerificationError(challenge, response, **context)

    if envelope.success:
        # Empty containers are payloads too; only a missing data field falls back
        return envelope.data if envelope.data is not None else envelope.success

    if envelope.code == ErrorCode.IP_BLOCK.code:
        logger.warning("Request rejected: IP blocked (code %s)", envelope.code)
        raise IPBlockedError(ErrorCode.IP_BLOCK.msg, response, **context)

    if envelope.code == ErrorCode.SIGN_FAULT.code:
        raise SignatureRejectedError(ErrorCode.SIGN_FAULT.msg, response, **context)

    raise DataFetchError(
        f"Data fetch failed: code={envelope.code}, msg={envelope.msg}",
        response,
        **context,
    )


def parse_body(response: httpx.Response) -> Any:
    """Return the parsed JSON body, or the raw text if it is not JSON."""
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def classify_response(response: httpx.Response) -> Any:
    """Classify an httpx response, whatever its status code."""
    return classify(
        response.status_code,
        response.headers,
        parse_body(response),
        response=response,
    )
