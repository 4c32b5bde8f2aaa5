# help_view/transport.py
"""
Transport: issues fetches for URLs and reports progress, completion and
authentication challenges to a single subscribed listener.

:class:`AiohttpTransport` runs each fetch as an asyncio task on the
current event loop. ``http``/``https`` go through a shared
:class:`aiohttp.ClientSession`, ``file`` URLs are read from disk.
"""
from __future__ import annotations

import asyncio
import functools
import itertools
import re
from pathlib import Path
from typing import Dict, Mapping, Optional, Protocol
from urllib.parse import urlparse
from urllib.request import url2pathname

from aiohttp import BasicAuth, ClientError, ClientResponse, ClientSession, ClientTimeout

from help_view.config import ViewerConfig
from help_view.errors import Canceled, TransportError
from help_view.logger import logger
from help_view.models import Credentials, FetchHandle, FetchResult, FetchStatus

_REALM_RE = re.compile(r'realm\s*=\s*"?([^",]*)"?', re.IGNORECASE)


class TransportListener(Protocol):
    def on_progress(self, handle: FetchHandle, done: int, total: int) -> None: ...

    def on_fetch_completed(
        self,
        handle: FetchHandle,
        status: FetchStatus,
        data: bytes,
        error: Optional[Exception] = None,
    ) -> None: ...

    def on_auth_challenge(
        self, handle: FetchHandle, realm: str, host: str
    ) -> Optional[Credentials]: ...


class Transport(Protocol):
    def issue(self, url: str) -> FetchHandle: ...

    def cancel(self, handle: FetchHandle) -> None: ...

    def supports(self, url: str) -> bool: ...

    def subscribe(self, listener: TransportListener) -> None: ...

    def unsubscribe(self, listener: TransportListener) -> None: ...


class AiohttpTransport:
    """Asynchronous transport over aiohttp and the local filesystem."""

    SCHEMES = ("http", "https", "file")

    def __init__(self, session: ClientSession, config: ViewerConfig) -> None:
        self.session = session
        self.config = config
        self._ids = itertools.count(1)
        self._tasks: Dict[FetchHandle, asyncio.Task[FetchResult]] = {}
        self._listener: Optional[TransportListener] = None
        self._semaphore = asyncio.Semaphore(config.max_connections)

    # ------------------------------------------------------------ subscription

    def subscribe(self, listener: TransportListener) -> None:
        if self._listener is not None and self._listener is not listener:
            raise RuntimeError("transport already has a listener")
        self._listener = listener

    def unsubscribe(self, listener: TransportListener) -> None:
        if self._listener is listener:
            self._listener = None

    # ------------------------------------------------------------- operations

    def supports(self, url: str) -> bool:
        return urlparse(url).scheme.lower() in self.SCHEMES

    def issue(self, url: str) -> FetchHandle:
        """Start fetching *url*; the result arrives later via ``on_fetch_completed``."""
        handle = FetchHandle(next(self._ids), url)
        task = asyncio.get_running_loop().create_task(self._run(handle), name=f"fetch-{handle.id}")
        self._tasks[handle] = task
        task.add_done_callback(functools.partial(self._on_task_done, handle))
        logger.debug("Issued fetch #%d for %s", handle.id, url)
        return handle

    def cancel(self, handle: FetchHandle) -> None:
        task = self._tasks.get(handle)
        if task is not None and not task.done():
            logger.debug("Canceling fetch #%d for %s", handle.id, handle.url)
            task.cancel()

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def join(self) -> None:
        """Wait until no fetch is in flight, including ones issued meanwhile."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)

    async def aclose(self) -> None:
        for task in list(self._tasks.values()):
            task.cancel()
        await self.join()

    # -------------------------------------------------------------- internals

    def _on_task_done(self, handle: FetchHandle, task: asyncio.Task[FetchResult]) -> None:
        self._tasks.pop(handle, None)
        if task.cancelled():
            result = FetchResult(FetchStatus.CANCELED, error=Canceled(handle.url))
        elif task.exception() is not None:
            exc = task.exception()
            logger.error("Unexpected failure while fetching %s", handle.url, exc_info=exc)
            result = FetchResult(
                FetchStatus.ERROR,
                error=TransportError(handle.url, str(exc) or type(exc).__name__),
            )
        else:
            result = task.result()

        listener = self._listener
        if listener is None:
            logger.debug("No listener for fetch #%d (%s), result dropped", handle.id, handle.url)
            return
        listener.on_fetch_completed(handle, result.status, result.data, result.error)

    async def _run(self, handle: FetchHandle) -> FetchResult:
        scheme = urlparse(handle.url).scheme.lower()
        async with self._semaphore:
            try:
                if scheme == "file":
                    data = await self._read_file(handle)
                elif scheme in ("http", "https"):
                    data = await self._get(handle)
                else:
                    raise TransportError(handle.url, f"Unsupported URL scheme {scheme!r}")
            except TransportError as exc:
                return FetchResult(FetchStatus.ERROR, error=exc)
            except (ClientError, asyncio.TimeoutError, OSError) as exc:
                reason = str(exc) or type(exc).__name__
                return FetchResult(FetchStatus.ERROR, error=TransportError(handle.url, reason))
        return FetchResult(FetchStatus.OK, data=data)

    async def _read_file(self, handle: FetchHandle) -> bytes:
        path = Path(url2pathname(urlparse(handle.url).path))
        loop = asyncio.get_running_loop()
        data = await loop.run_in_executor(None, path.read_bytes)
        self._progress(handle, len(data), len(data))
        return data

    async def _get(self, handle: FetchHandle) -> bytes:
        auth: Optional[BasicAuth] = None
        timeout = ClientTimeout(total=self.config.timeout)
        # second pass only happens with credentials from a challenge
        for _ in range(2):
            async with self.session.get(handle.url, auth=auth, timeout=timeout) as resp:
                if resp.status == 401 and auth is None:
                    creds = self._challenge(handle, self._realm(resp.headers), resp.url.host or "")
                    if creds is not None:
                        auth = BasicAuth(creds.user, creds.password)
                        continue
                if resp.status >= 400:
                    raise TransportError(handle.url, resp.reason or "request failed", status=resp.status)
                return await self._read_body(handle, resp)
        raise TransportError(handle.url, "authentication failed", status=401)

    async def _read_body(self, handle: FetchHandle, resp: ClientResponse) -> bytes:
        total = resp.content_length if resp.content_length is not None else -1
        chunks = []
        done = 0
        async for chunk in resp.content.iter_chunked(self.config.chunk_size):
            chunks.append(chunk)
            done += len(chunk)
            self._progress(handle, done, total)
        return b"".join(chunks)

    def _progress(self, handle: FetchHandle, done: int, total: int) -> None:
        if self._listener is not None:
            self._listener.on_progress(handle, done, total)

    def _challenge(self, handle: FetchHandle, realm: str, host: str) -> Optional[Credentials]:
        logger.debug("Authentication required for %s (realm %r)", handle.url, realm)
        if self._listener is None:
            return None
        return self._listener.on_auth_challenge(handle, realm, host)

    @staticmethod
    def _realm(headers: Mapping[str, str]) -> str:
        match = _REALM_RE.search(headers.get("WWW-Authenticate", ""))
        return match.group(1) if match else ""


__all__ = ["AiohttpTransport", "Transport", "TransportListener"]
