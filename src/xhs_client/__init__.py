"""
Xiaohongshu web API client for Python

Signs requests with the platform's X-s/X-t/X-s-common headers and classifies
responses into payloads or typed errors.
"""

from .models import (
    ChallengeInfo,
    ResponseEnvelope,
    RoutingTarget,
    SearchNoteType,
    SearchSortType,
    SignedHeaders,
    SignResult,
)
from .exceptions import (
    DataFetchError,
    ErrorCode,
    IPBlockedError,
    NeedVerificationError,
    ResponseError,
    SignatureRejectedError,
    SignerError,
    TransportError,
    XhsError,
)
from .session import Session, parse_cookie
from .signer import CommonDeriver, Signer
from .headers import compose_signed_headers
from .classifier import classify, classify_response
from .normalize import camel_to_underscore, extract_initial_state, normalize_keys
from .config import ClientConfig
from .client import XhsClient, get_search_id

__version__ = "0.1.0"

__all__ = [
    "ChallengeInfo",
    "ResponseEnvelope",
    "RoutingTarget",
    "SearchNoteType",
    "SearchSortType",
    "SignedHeaders",
    "SignResult",
    "DataFetchError",
    "ErrorCode",
    "IPBlockedError",
    "NeedVerificationError",
    "ResponseError",
    "SignatureRejectedError",
    "SignerError",
    "TransportError",
    "XhsError",
    "Session",
    "parse_cookie",
    "CommonDeriver",
    "Signer",
    "compose_signed_headers",
    "classify",
    "classify_response",
    "camel_to_underscore",
    "extract_initial_state",
    "normalize_keys",
    "ClientConfig",
    "XhsClient",
    "get_search_id",
]
