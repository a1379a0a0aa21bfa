"""
Interfaces for the external signing collaborators.

The signing algorithm itself lives outside this package. A signer is any
object with a ``sign(url, body, cookie)`` method; a common deriver is any
callable producing the X-s-common header value.
"""

from __future__ import annotations

import asyncio
import inspect
from typing import Any, Awaitable, Mapping, Protocol, Union

from .exceptions import SignerError
from .models import SignResult

SignOutput = Union[SignResult, Mapping[str, Any]]


class Signer(Protocol):
    def sign(
        self,
        url: str,
        body: Any,
        cookie: str,
    ) -> SignOutput | Awaitable[SignOutput]:
        """
        Sign one request.

        Args:
            url: Request path including the final query string
            body: Structured (unescaped) JSON body, or None
            cookie: Raw cookie string sent with the request

        Returns:
            SignResult, or a mapping with ``X-s`` and ``X-t`` keys.
            May be returned directly or as an awaitable.
        """
        ...


class CommonDeriver(Protocol):
    def __call__(self, a1: str, b1: str, token: str, timestamp: str) -> str:
        ...


async def resolve_sign_result(value: SignOutput | Awaitable[SignOutput]) -> SignResult:
    """Await the signer output if needed and normalize it to a SignResult."""
    if inspect.isawaitable(value):
        value = await value

    if isinstance(value, SignResult):
        return value

    if isinstance(value, Mapping):
        try:
            return SignResult.from_mapping(value)
        except KeyError as e:
            raise SignerError(f"Signer result is missing key {e}") from e

    raise SignerError(f"Unsupported signer result type: {type(value).__name__}")


async def call_signer(signer: Signer, url: str, body: Any, cookie: str) -> SignResult:
    """
    Run a signer without blocking the event loop.

    Coroutine signers are awaited directly; plain ``sign`` methods run in a
    worker thread since they may be slow (e.g. a JS sandbox).

    Returns:
        Normalized SignResult

    Raises:
        SignerError: If the signer output cannot be used
    """
    if inspect.iscoroutinefunction(signer.sign):
        output = await signer.sign(url, body, cookie)
    else:
        output = await asyncio.to_thread(signer.sign, url, body, cookie)
    return await resolve_sign_result(output)
