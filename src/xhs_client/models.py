"""
Data models for the Xiaohongshu web API client.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Union

# JSON-like value as returned by the API or embedded in page state
JSONValue = Union[None, bool, int, float, str, "dict[str, JSONValue]", "list[JSONValue]"]

SIGNATURE_HEADER = "X-s"
TIMESTAMP_HEADER = "X-t"
COMMON_HEADER = "X-s-common"


class RoutingTarget(str, Enum):
    """Base host a request is sent to."""

    DEFAULT = "https://edith.xiaohongshu.com"
    CREATOR = "https://creator.xiaohongshu.com"
    CUSTOMER = "https://customer.xiaohongshu.com"

    @property
    def host(self) -> str:
        return self.value


class SearchSortType(Enum):
    """Sort order for note search."""

    GENERAL = "general"
    MOST_POPULAR = "popularity_descending"
    LATEST = "time_descending"


class SearchNoteType(Enum):
    """Note kind filter for note search."""

    ALL = 0
    VIDEO = 1
    IMAGE = 2


@dataclass(frozen=True)
class SignResult:
    """
    Output of a signer for a single request.

    Attributes:
        token: Raw signature token (sent as X-s)
        timestamp: Signing timestamp as a string (sent as X-t)
    """
    token: str
    timestamp: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SignResult:
        """Build from the ``{"X-s": ..., "X-t": ...}`` shape signers commonly return."""
        return cls(token=str(data["X-s"]), timestamp=str(data["X-t"]))


@dataclass(frozen=True)
class SignedHeaders:
    """
    The three signature headers for one request.

    Attributes:
        signature: X-s value
        timestamp: X-t value
        common: X-s-common value
    """
    signature: str
    timestamp: str
    common: str

    def as_dict(self) -> dict[str, str]:
        return {
            SIGNATURE_HEADER: self.signature,
            TIMESTAMP_HEADER: self.timestamp,
            COMMON_HEADER: self.common,
        }


@dataclass(frozen=True)
class ChallengeInfo:
    """
    Verification challenge details sent by the platform.

    Attributes:
        verify_type: Value of the ``verifytype`` response header
        verify_uuid: Value of the ``verifyuuid`` response header
    """
    verify_type: str | None
    verify_uuid: str | None


@dataclass
class ResponseEnvelope:
    """
    Top-level JSON object wrapping every API response.

    Attributes:
        success: Whether the platform reports success
        code: Platform error/status code
        data: Payload on success
        msg: Human-readable platform message
    """
    success: bool
    code: int | None = None
    data: Any = None
    msg: str | None = None

    @classmethod
    def from_body(cls, body: Any) -> ResponseEnvelope:
        if not isinstance(body, Mapping):
            return cls(success=False)
        return cls(
            success=bool(body.get("success", False)),
            code=body.get("code"),
            data=body.get("data"),
            msg=body.get("msg"),
        )
