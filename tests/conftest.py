# File: tests/conftest.py
from __future__ import annotations

import itertools
from typing import Dict, List, Optional, Tuple

import pytest

from help_view.config import ViewerConfig
from help_view.coordinator import ResourceFetchCoordinator
from help_view.errors import Canceled, TransportError
from help_view.models import FetchHandle, FetchStatus
from help_view.surface import HtmlSurface


class FakeTransport:
    """
    In-memory transport. Fetches stay pending until the test completes them,
    unless *responses* is given: then issue() completes synchronously.
    """

    def __init__(self, responses: Optional[Dict[str, bytes]] = None) -> None:
        self._ids = itertools.count(1)
        self.responses = responses
        self.issued: List[FetchHandle] = []
        self.canceled: List[FetchHandle] = []
        self.listener = None

    def subscribe(self, listener) -> None:
        self.listener = listener

    def unsubscribe(self, listener) -> None:
        if self.listener is listener:
            self.listener = None

    def supports(self, url: str) -> bool:
        return True

    def issue(self, url: str) -> FetchHandle:
        handle = FetchHandle(next(self._ids), url)
        self.issued.append(handle)
        if self.responses is not None:
            if url in self.responses:
                self.complete(handle, self.responses[url])
            else:
                self.fail(handle, "not found")
        return handle

    def cancel(self, handle: FetchHandle) -> None:
        self.canceled.append(handle)

    # helpers driving the listener ------------------------------------------

    def complete(self, handle: FetchHandle, data: bytes = b"") -> None:
        if self.listener is not None:
            self.listener.on_fetch_completed(handle, FetchStatus.OK, data, None)

    def fail(self, handle: FetchHandle, reason: str = "connection refused") -> None:
        if self.listener is not None:
            self.listener.on_fetch_completed(
                handle, FetchStatus.ERROR, b"", TransportError(handle.url, reason)
            )

    def abort(self, handle: FetchHandle) -> None:
        if self.listener is not None:
            self.listener.on_fetch_completed(
                handle, FetchStatus.CANCELED, b"partial", Canceled(handle.url)
            )

    def last(self, url: str) -> FetchHandle:
        return [h for h in self.issued if h.url == url][-1]

    def urls(self) -> List[str]:
        return [h.url for h in self.issued]


class RecordingSurface(HtmlSurface):
    """HtmlSurface that remembers every display() and add_resource() call."""

    def __init__(self) -> None:
        super().__init__()
        self.displayed: List[Tuple[str, bytes]] = []
        self.added: List[Tuple[str, object, bytes]] = []

    def display(self, url: str, data: bytes) -> None:
        self.displayed.append((url, data))
        super().display(url, data)

    def add_resource(self, url, kind, data) -> None:
        self.added.append((url, kind, data))
        super().add_resource(url, kind, data)


class SignalRecorder:
    def __init__(self, signals) -> None:
        self.events: List[Tuple[str, tuple]] = []
        for name in (
            "navigation_state_changed",
            "status_text_changed",
            "external_browser_requested",
            "load_failed",
            "fetch_progress",
        ):
            getattr(signals, name).connect(lambda *args, _n=name: self.events.append((_n, args)))

    def of(self, name: str) -> List[tuple]:
        return [args for n, args in self.events if n == name]


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture()
def config() -> ViewerConfig:
    return ViewerConfig(credentials={"secure.example": {"user": "alice", "password": "s3cret"}})


@pytest.fixture()
def coordinator(transport, surface, config) -> ResourceFetchCoordinator:
    coord = ResourceFetchCoordinator(transport, surface, config)
    yield coord
    coord.teardown()


@pytest.fixture()
def recorder(coordinator) -> SignalRecorder:
    return SignalRecorder(coordinator.signals)
