"""
Error taxonomy for the Xiaohongshu web API client.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping

import httpx

from .models import ChallengeInfo, ResponseEnvelope


class ErrorCode(Enum):
    """Platform envelope codes the classifier branches on."""

    IP_BLOCK = (300012, "网络连接异常，请检查网络设置或重启试试")
    SIGN_FAULT = (300015, "浏览器异常，请尝试关闭/卸载风险插件或重启试试")

    @property
    def code(self) -> int:
        return self.value[0]

    @property
    def msg(self) -> str:
        return self.value[1]


class XhsError(Exception):
    """Base class for all client errors."""


class TransportError(XhsError):
    """The HTTP call itself failed (DNS, connection reset, timeout)."""


class SignerError(XhsError):
    """The signer returned something that cannot be turned into headers."""


class ResponseError(XhsError):
    """
    The platform answered but the answer is not a success.

    Attributes:
        response: The raw httpx response, if available
        status_code: HTTP status of the response
        headers: Response headers
        envelope: Parsed response envelope
    """

    def __init__(
        self,
        message: str,
        response: httpx.Response | None = None,
        *,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        envelope: ResponseEnvelope | None = None,
    ):
        super().__init__(message)
        self.response = response
        self.status_code = status_code
        self.headers = dict(headers) if headers is not None else {}
        self.envelope = envelope


class NeedVerificationError(ResponseError):
    """The platform demands an interactive verification challenge."""

    def __init__(self, challenge: ChallengeInfo, response: httpx.Response | None = None, **kwargs: Any):
        super().__init__(
            f"Verification required, verifytype: {challenge.verify_type}, "
            f"verifyuuid: {challenge.verify_uuid}",
            response,
            **kwargs,
        )
        self.challenge = challenge

    @property
    def verify_type(self) -> str | None:
        return self.challenge.verify_type

    @property
    def verify_uuid(self) -> str | None:
        return self.challenge.verify_uuid


class IPBlockedError(ResponseError):
    """The originating address is blocked or rate limited."""


class SignatureRejectedError(ResponseError):
    """The request signature was rejected as stale or invalid."""


class DataFetchError(ResponseError):
    """Any other non-success envelope."""
