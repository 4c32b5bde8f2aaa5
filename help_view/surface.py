# help_view/surface.py
"""
Rendering surface contract and a headless HTML implementation.

The surface owns the displayed markup, the resource cache and the
back/forward history cursor. While laying out a document it asks its
resource provider for every referenced resource and expects an answer
within the same call.
"""
from __future__ import annotations

from typing import Callable, Dict, List, Optional, Protocol, Tuple
from urllib.parse import urldefrag, urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from help_view.logger import logger
from help_view.models import ResourceKind

ResourceProvider = Callable[[str, ResourceKind], bytes]
HistoryListener = Callable[[bool, bool], None]


class RenderingSurface(Protocol):
    """What the coordinator needs from a document display component."""

    @property
    def current_url(self) -> Optional[str]: ...

    def set_resource_provider(self, provider: Optional[ResourceProvider]) -> None: ...

    def set_history_listener(self, listener: Optional[HistoryListener]) -> None: ...

    def display(self, url: str, data: bytes) -> None: ...

    def set_html(self, data: bytes) -> None: ...

    def add_resource(self, url: str, kind: ResourceKind, data: bytes) -> None: ...

    def go_back(self) -> Optional[str]: ...

    def go_forward(self) -> Optional[str]: ...

    def home(self) -> Optional[str]: ...


# (tag, attribute, kind); <link> additionally requires rel=stylesheet
_REFERENCES: Tuple[Tuple[str, str, ResourceKind], ...] = (
    ("img", "src", ResourceKind.IMAGE),
    ("link", "href", ResourceKind.STYLE),
    ("iframe", "src", ResourceKind.MARKUP),
    ("object", "data", ResourceKind.MARKUP),
)


def extract_references(markup: bytes | str, base_url: str) -> List[Tuple[str, ResourceKind]]:
    """Return ``(absolute_url, kind)`` for every embedded resource, in document order."""
    soup = BeautifulSoup(markup, "html.parser")
    found: Dict[Tuple[str, ResourceKind], None] = {}
    for tag in soup.find_all([name for name, _, _ in _REFERENCES]):
        if not isinstance(tag, Tag):
            continue
        for name, attr, kind in _REFERENCES:
            if tag.name != name:
                continue
            if name == "link":
                rel = tag.get("rel") or []
                if isinstance(rel, str):
                    rel = rel.split()
                if "stylesheet" not in [r.lower() for r in rel]:
                    continue
            value = tag.get(attr)
            if not isinstance(value, str) or not value.strip():
                continue
            absolute, _ = urldefrag(urljoin(base_url, value.strip()))
            found[(absolute, kind)] = None
    return list(found)


class HtmlSurface:
    """Headless rendering surface for HTML documents."""

    def __init__(self) -> None:
        self._provider: Optional[ResourceProvider] = None
        self._history_listener: Optional[HistoryListener] = None
        self._history: List[str] = []
        self._cursor = -1
        self._url: Optional[str] = None
        self.markup: bytes = b""
        self._resources: Dict[Tuple[ResourceKind, str], bytes] = {}
        self._placeholders: Dict[Tuple[ResourceKind, str], bytes] = {}
        self.layout_count = 0
        self.repaint_count = 0

    # ----------------------------------------------------------------- wiring

    @property
    def current_url(self) -> Optional[str]:
        return self._url

    def set_resource_provider(self, provider: Optional[ResourceProvider]) -> None:
        self._provider = provider

    def set_history_listener(self, listener: Optional[HistoryListener]) -> None:
        self._history_listener = listener

    # ---------------------------------------------------------------- content

    def display(self, url: str, data: bytes) -> None:
        """Show *data* as the document at *url* and lay it out."""
        self._url = url
        self.markup = data
        self._resources.clear()
        self._push_history(url)
        self._layout()

    def set_html(self, data: bytes) -> None:
        """Show markup that has no location of its own."""
        self._url = None
        self.markup = data
        self._resources.clear()
        self._layout()

    def reload_current(self) -> None:
        """Ask the provider for the current document again and re-layout."""
        if self._url is None:
            return
        self.markup = self._request(self._url, ResourceKind.MARKUP)
        self._layout()

    def add_resource(self, url: str, kind: ResourceKind, data: bytes) -> None:
        self._resources[(kind, url)] = data
        self._placeholders.pop((kind, url), None)
        self.repaint()

    def resource(self, url: str, kind: ResourceKind) -> Optional[bytes]:
        """Real data if it arrived, else the placeholder shown for it."""
        key = (kind, url)
        if key in self._resources:
            return self._resources[key]
        return self._placeholders.get(key)

    def has_resource(self, url: str, kind: ResourceKind) -> bool:
        return (kind, url) in self._resources

    def pending_placeholders(self) -> List[Tuple[str, ResourceKind]]:
        return [(url, kind) for kind, url in self._placeholders]

    def references(self) -> List[Tuple[str, ResourceKind]]:
        return extract_references(self.markup, self._url or "")

    def text(self) -> str:
        soup = BeautifulSoup(self.markup, "html.parser")
        return soup.get_text(" ", strip=True)

    def repaint(self) -> None:
        self.repaint_count += 1

    # ---------------------------------------------------------------- history

    def go_back(self) -> Optional[str]:
        if self._cursor <= 0:
            return None
        self._cursor -= 1
        self._notify_history()
        return self._history[self._cursor]

    def go_forward(self) -> Optional[str]:
        if self._cursor + 1 >= len(self._history):
            return None
        self._cursor += 1
        self._notify_history()
        return self._history[self._cursor]

    def home(self) -> Optional[str]:
        if not self._history:
            return None
        if self._cursor != 0:
            self._cursor = 0
            self._notify_history()
        return self._history[0]

    @property
    def history(self) -> List[str]:
        return list(self._history)

    # ---------------------------------------------------------------- helpers

    def _push_history(self, url: str) -> None:
        if 0 <= self._cursor < len(self._history) and self._history[self._cursor] == url:
            return
        del self._history[self._cursor + 1:]
        self._history.append(url)
        self._cursor = len(self._history) - 1
        self._notify_history()

    def _notify_history(self) -> None:
        if self._history_listener is not None:
            self._history_listener(self._cursor > 0, self._cursor + 1 < len(self._history))

    def _layout(self) -> None:
        self.layout_count += 1
        self._placeholders.clear()
        for url, kind in self.references():
            if (kind, url) in self._resources:
                continue
            data = self._request(url, kind)
            # a synchronous transport may already have delivered the real data
            if (kind, url) not in self._resources:
                self._placeholders[(kind, url)] = data
        logger.debug("Laid out %s: %d placeholder(s)", self._url, len(self._placeholders))
        self.repaint()

    def _request(self, url: str, kind: ResourceKind) -> bytes:
        if self._provider is None:
            return b""
        return self._provider(url, kind)


__all__ = ["HtmlSurface", "RenderingSurface", "ResourceProvider", "extract_references"]
