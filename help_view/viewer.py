# File: help_view/viewer.py
"""help_view.viewer: facade wiring config, aiohttp session, transport, surface and coordinator."""

from __future__ import annotations

import asyncio
from typing import List, Optional

from aiohttp import ClientSession, ClientTimeout

from help_view.config import ViewerConfig
from help_view.coordinator import AuthPrompt, ResourceFetchCoordinator
from help_view.logger import logger
from help_view.models import CurrentDocument
from help_view.signals import ViewerSignals
from help_view.surface import HtmlSurface
from help_view.transport import AiohttpTransport

__all__ = ["HelpViewer", "load_page"]


class HelpViewer:
    """Async context manager around one viewing session.

    Leaving the context tears the coordinator down before the transport and
    the session are closed, so no completion reaches a dead viewer.
    """

    def __init__(
        self,
        config: Optional[ViewerConfig] = None,
        *,
        surface: Optional[HtmlSurface] = None,
        auth_prompt: Optional[AuthPrompt] = None,
    ) -> None:
        self.config = config or ViewerConfig()
        self.surface = surface or HtmlSurface()
        self.signals = ViewerSignals()
        self.status_log: List[str] = []
        self.failures: List[str] = []
        self._auth_prompt = auth_prompt
        self.session: Optional[ClientSession] = None
        self.transport: Optional[AiohttpTransport] = None
        self.coordinator: Optional[ResourceFetchCoordinator] = None

    async def __aenter__(self) -> HelpViewer:
        self.session = ClientSession(
            timeout=ClientTimeout(total=self.config.timeout),
            headers={"User-Agent": self.config.user_agent},
            raise_for_status=False,
        )
        self.transport = AiohttpTransport(self.session, self.config)
        self.coordinator = ResourceFetchCoordinator(
            self.transport,
            self.surface,
            self.config,
            signals=self.signals,
            auth_prompt=self._auth_prompt,
        )
        self.signals.status_text_changed.connect(lambda text: self.status_log.append(text))
        self.signals.load_failed.connect(lambda url, _err: self.failures.append(url))
        if self.config.start_page:
            self.coordinator.navigate(self.config.start_page)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self.coordinator is not None:
            self.coordinator.teardown()
        if self.transport is not None:
            await self.transport.aclose()
        if self.session and not self.session.closed:
            await self.session.close()
        self.signals.disconnect_all()

    @property
    def current(self) -> Optional[CurrentDocument]:
        return self._require().current

    async def open(self, url: str) -> Optional[CurrentDocument]:
        """Navigate to *url* and wait until the page and its resources are in."""
        self._require().navigate(url)
        await self.wait_idle()
        return self.current

    async def back(self) -> bool:
        moved = self._require().navigation.go_back()
        await self.wait_idle()
        return moved

    async def forward(self) -> bool:
        moved = self._require().navigation.go_forward()
        await self.wait_idle()
        return moved

    async def home(self) -> bool:
        moved = self._require().navigation.home()
        await self.wait_idle()
        return moved

    async def reload(self) -> bool:
        moved = self._require().navigation.reload()
        await self.wait_idle()
        return moved

    def stop(self) -> None:
        self._require().stop()

    async def wait_idle(self) -> None:
        if self.transport is not None:
            await self.transport.join()

    def _require(self) -> ResourceFetchCoordinator:
        if self.coordinator is None:
            raise RuntimeError("HelpViewer is not started; use 'async with'")
        return self.coordinator


async def load_page(cfg: ViewerConfig, url: str, *, timeout: Optional[float] = None) -> dict:
    """
    Open *url* in a fresh viewer, wait for all resources and return a
    session summary suitable for the JSON report.
    """
    async with HelpViewer(cfg) as viewer:
        logger.info("Opening %s", url)
        if timeout:
            await asyncio.wait_for(viewer.open(url), timeout=timeout)
        else:
            await viewer.open(url)
        surface = viewer.surface
        current = viewer.current
        resources = []
        if current is not None:
            for ref, kind in surface.references():
                resources.append(
                    {"url": ref, "kind": kind.value, "loaded": surface.has_resource(ref, kind)}
                )
        return {
            "requested": url,
            "url": current.url if current else None,
            "size": len(current.data) if current else 0,
            "text": surface.text() if current else "",
            "resources": resources,
            "status": list(viewer.status_log),
            "failures": list(viewer.failures),
        }
