from __future__ import annotations

import asyncio
import codecs
import errno
import logging
import socket
from dataclasses import dataclass

import aiohttp

from page_loader.core.config import LoaderSettings
from page_loader.core.errors import (
    ConnectionRefusedFetchError,
    FetchError,
    FetchTimeoutError,
    ForbiddenError,
    HostUnresolvedError,
    NetworkError,
    NotFoundError,
    ServerError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchedPayload:
    url: str
    body: bytes
    charset: str | None = None

    def text(self) -> str:
        # surrogateescape keeps undecodable bytes so encode_text() round-trips them.
        return self.body.decode(self.charset or "utf-8", errors="surrogateescape")

    def encode_text(self, text: str) -> bytes:
        return text.encode(self.charset or "utf-8", errors="surrogateescape")


def known_charset(charset: str | None) -> str | None:
    """Return `charset` if Python has a codec for it, else None (decode as UTF-8)."""

    if not charset:
        return None
    try:
        codecs.lookup(charset)
    except LookupError:
        logger.warning("Unknown charset %r; decoding as utf-8", charset)
        return None
    return charset


def status_error(url: str, status: int, *, target: str) -> FetchError:
    if status == 404:
        return NotFoundError(url, target=target)
    if status == 403:
        return ForbiddenError(url, target=target)
    if status >= 500:
        return ServerError(url, status, target=target)
    return NetworkError(url, target=target, detail=f"HTTP {status}")


def _error_chain(exc: BaseException) -> list[BaseException]:
    chain: list[BaseException] = [exc]
    os_error = getattr(exc, "os_error", None)
    if isinstance(os_error, BaseException):
        chain.append(os_error)
    if exc.__cause__ is not None:
        chain.append(exc.__cause__)
    return chain


def transport_error(exc: BaseException, url: str, *, target: str) -> FetchError:
    """Map an aiohttp/socket failure onto the fetch error taxonomy."""

    chain = _error_chain(exc)
    if any(isinstance(e, asyncio.TimeoutError) for e in chain):
        return FetchTimeoutError(url, target=target)
    if any(isinstance(e, (aiohttp.ClientConnectorDNSError, socket.gaierror)) for e in chain):
        return HostUnresolvedError(url, target=target, detail=str(exc) or None)
    if any(
        isinstance(e, ConnectionRefusedError) or getattr(e, "errno", None) == errno.ECONNREFUSED
        for e in chain
    ):
        return ConnectionRefusedFetchError(url, target=target)
    return NetworkError(url, target=target, detail=str(exc) or type(exc).__name__)


class Fetcher:
    """Binary-safe GET used for the page and for each of its resources.

    No retries: any failure is raised as a FetchError subclass.
    """

    def __init__(self, *, settings: LoaderSettings, session: aiohttp.ClientSession) -> None:
        self._settings = settings
        self._session = session

    async def fetch(self, url: str, *, target: str = "resource") -> FetchedPayload:
        headers = {"User-Agent": self._settings.user_agent}
        timeout = aiohttp.ClientTimeout(total=self._settings.timeout_seconds)
        try:
            async with self._session.get(url, headers=headers, timeout=timeout, allow_redirects=True) as resp:
                status = int(resp.status)
                if status >= 400:
                    raise status_error(url, status, target=target)
                body = await resp.read()
                charset = known_charset(resp.charset)
        except FetchError:
            raise
        except (aiohttp.ClientError, OSError, asyncio.TimeoutError) as e:
            logger.debug("GET %s failed: %r", url, e)
            raise transport_error(e, url, target=target) from e

        logger.debug("GET %s -> %s (%d bytes)", url, status, len(body))
        return FetchedPayload(url=url, body=body, charset=charset)
