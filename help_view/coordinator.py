# help_view/coordinator.py
"""
Resource fetch coordinator: drives the transport on behalf of the
rendering surface.

* :meth:`ResourceFetchCoordinator.navigate` fetches a page; the page is
  shown only once the fetch completes.
* :meth:`ResourceFetchCoordinator.provide_resource` answers the surface's
  synchronous resource requests with a placeholder and fetches the real
  data in the background.
* :meth:`ResourceFetchCoordinator.on_fetch_completed` is the single place
  where transport results are turned into document or resource updates.

All methods run on the event loop thread; no locking is needed, but a
completion may arrive before :meth:`Transport.issue` has returned.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple
from urllib.parse import urljoin, urlparse

from help_view.config import ViewerConfig
from help_view.errors import ResourceUnavailable
from help_view.logger import logger
from help_view.models import (
    CurrentDocument,
    Credentials,
    EmbeddedTag,
    FetchHandle,
    FetchStatus,
    PendingEntry,
    PurposeTag,
    ResourceKind,
    SourceTag,
)
from help_view.navigation import NavigationStateMachine
from help_view.placeholders import command_help_page, placeholder_for
from help_view.registry import PendingFetchRegistry
from help_view.signals import ViewerSignals
from help_view.surface import RenderingSurface
from help_view.transport import Transport

AuthPrompt = Callable[[str, str], Optional[Credentials]]
_Completion = Tuple[FetchStatus, bytes, Optional[Exception]]

# failed page loads remembered for the error page
UNREACHABLE_LIMIT = 64


class ResourceFetchCoordinator:
    """Issues fetches, correlates completions and feeds the rendering surface."""

    def __init__(
        self,
        transport: Transport,
        surface: RenderingSurface,
        config: Optional[ViewerConfig] = None,
        *,
        signals: Optional[ViewerSignals] = None,
        auth_prompt: Optional[AuthPrompt] = None,
    ) -> None:
        self.transport = transport
        self.surface = surface
        self.config = config or ViewerConfig()
        self.signals = signals or ViewerSignals()
        self.registry = PendingFetchRegistry()
        self.current: Optional[CurrentDocument] = None
        self.navigation = NavigationStateMachine(
            surface, self.navigate, self.signals, home_page=self.config.home_page
        )
        self._auth_prompt = auth_prompt
        # url -> reason of the last failed page load
        self._unreachable: Dict[str, str] = {}
        self._issuing = 0
        self._early: Dict[FetchHandle, _Completion] = {}
        self._nav_seq = 0
        self._promoted_seq = 0
        self._torn_down = False

        transport.subscribe(self)
        surface.set_resource_provider(self.provide_resource)

    def __enter__(self) -> ResourceFetchCoordinator:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()

    @property
    def pending(self) -> int:
        return len(self.registry)

    @property
    def closed(self) -> bool:
        return self._torn_down

    # ----------------------------------------------------------------- public

    def navigate(self, url: str) -> Optional[FetchHandle]:
        """Start loading *url* as the next page. Nothing is shown until it completes."""
        if self._torn_down:
            logger.warning("navigate(%s) after teardown ignored", url)
            return None
        target = self._resolve(url)
        scheme = urlparse(target).scheme.lower()
        if scheme in self.config.external_schemes:
            logger.info("Handing %s to an external browser", target)
            self.signals.external_browser_requested.emit(target)
            return None

        self._nav_seq += 1
        logger.info("Loading %s", target)
        self.signals.status_text_changed.emit(f"Downloading {target}")
        return self._issue(target, SourceTag(seq=self._nav_seq))

    def provide_resource(self, url: str, kind: ResourceKind) -> bytes:
        """Answer a layout-time resource request immediately."""
        url = self._resolve(url)
        if self.current is not None and url == self.current.url:
            # real bytes, not a stand-in
            self.surface.add_resource(url, kind, self.current.data)
            return self.current.data
        if not self._torn_down:
            self._issue(url, EmbeddedTag(kind))
        return placeholder_for(
            kind,
            url,
            size=self.config.placeholder_size,
            color=self.config.placeholder_color,
            reason=self._unreachable.get(url),
        )

    def stop(self) -> None:
        """User abort: cancel every pending fetch; results arrive as CANCELED."""
        for handle in self.registry.handles():
            self.transport.cancel(handle)

    def show_command_help(self, command: str, info: str) -> None:
        """Show the description of a command handed over by drag and drop."""
        self.surface.set_html(command_help_page(command, info))

    def teardown(self) -> None:
        """Cancel everything and stop listening; no callback has effect afterwards."""
        if self._torn_down:
            return
        self._torn_down = True
        try:
            entries = self.registry.cancel_all()
            logger.debug("Teardown: canceling %d pending fetch(es)", len(entries))
            for entry in entries:
                self.transport.cancel(entry.handle)
        finally:
            self.transport.unsubscribe(self)
            self.surface.set_resource_provider(None)
            self.navigation.detach()
            self._early.clear()

    # ------------------------------------------------------ transport callbacks

    def on_progress(self, handle: FetchHandle, done: int, total: int) -> None:
        entry = self.registry.peek(handle)
        if entry is None:
            return
        self.signals.fetch_progress.emit(entry.url, done, total)

    def on_fetch_completed(
        self,
        handle: FetchHandle,
        status: FetchStatus,
        data: bytes,
        error: Optional[Exception] = None,
    ) -> None:
        entry = self.registry.resolve(handle)
        if entry is None:
            if self._issuing:
                # arrived before issue() returned; replayed after registration
                self._early[handle] = (status, data, error)
            else:
                logger.debug("Completion for unknown fetch %s ignored", handle)
            return

        if status is FetchStatus.CANCELED:
            self._on_canceled(entry)
        elif status is FetchStatus.ERROR:
            self._on_failed(entry, error)
        else:
            self._on_succeeded(entry, data)

    def on_auth_challenge(self, handle: FetchHandle, realm: str, host: str) -> Optional[Credentials]:
        if self.registry.peek(handle) is None:
            return None
        creds = self.config.credentials_for(host)
        if creds is None and self._auth_prompt is not None:
            creds = self._auth_prompt(realm, host)
        return creds

    # -------------------------------------------------------------- internals

    def _issue(self, url: str, tag: PurposeTag) -> FetchHandle:
        self._issuing += 1
        try:
            handle = self.transport.issue(url)
        finally:
            self._issuing -= 1
        self.registry.register(handle, url, tag)
        logger.debug("Fetch %s registered as %s", handle, tag)
        early = self._early.pop(handle, None)
        if self._issuing == 0:
            self._early.clear()
        if early is not None:
            self.on_fetch_completed(handle, *early)
        return handle

    def _resolve(self, url: str) -> str:
        if self.current is None:
            return url
        try:
            if urlparse(url).scheme:
                return url
            return urljoin(self.current.url, url)
        except ValueError as exc:
            logger.warning("Cannot resolve %r against %s (%s), using it as is", url, self.current.url, exc)
            return url

    def _on_canceled(self, entry: PendingEntry) -> None:
        logger.info("Fetch of %s canceled", entry.url)
        if isinstance(entry.tag, SourceTag):
            self.signals.status_text_changed.emit("Download canceled.")

    def _on_failed(self, entry: PendingEntry, error: Optional[Exception]) -> None:
        if isinstance(entry.tag, EmbeddedTag):
            logger.debug("%s", ResourceUnavailable(entry.url, error))
            return
        reason = str(error) if error is not None else "unknown error"
        self._unreachable.pop(entry.url, None)
        self._unreachable[entry.url] = reason
        while len(self._unreachable) > UNREACHABLE_LIMIT:
            del self._unreachable[next(iter(self._unreachable))]
        logger.warning("Failed to load %s: %s", entry.url, reason)
        self.signals.status_text_changed.emit(f"Failed to load {entry.url}: {reason}")
        self.signals.load_failed.emit(entry.url, error)

    def _on_succeeded(self, entry: PendingEntry, data: bytes) -> None:
        tag = entry.tag
        if isinstance(tag, EmbeddedTag):
            logger.debug("Resource %s arrived (%d bytes)", entry.url, len(data))
            self.surface.add_resource(entry.url, tag.kind, data)
            return

        if self.config.discard_stale_navigations and tag.seq < self._promoted_seq:
            logger.debug("Stale page load of %s dropped", entry.url)
            return
        self._promoted_seq = max(self._promoted_seq, tag.seq)
        self.current = CurrentDocument(url=entry.url, data=bytes(data))
        self._unreachable.pop(entry.url, None)
        self.navigation.document_loaded(entry.url)
        logger.info("Loaded %s (%d bytes)", entry.url, len(data))
        self.surface.display(entry.url, self.current.data)
        self.signals.status_text_changed.emit(f"Downloaded {entry.url}")


__all__ = ["AuthPrompt", "ResourceFetchCoordinator"]
