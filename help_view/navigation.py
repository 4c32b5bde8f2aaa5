# help_view/navigation.py
"""
Navigation state: current location plus back/forward availability.

History itself lives in the rendering surface. This class mirrors the
surface's availability flags outward and turns history moves into fresh
page loads, so embedded resources are fetched again after every move.
"""
from __future__ import annotations

from enum import Enum
from typing import Callable, Optional

from help_view.logger import logger
from help_view.models import NavigationState
from help_view.signals import ViewerSignals
from help_view.surface import RenderingSurface


class NavState(Enum):
    IDLE = "idle"
    LOADED = "loaded"


class NavigationStateMachine:
    """Idle until the first page is promoted, Loaded afterwards."""

    def __init__(
        self,
        surface: RenderingSurface,
        navigate: Callable[[str], None],
        signals: ViewerSignals,
        *,
        home_page: Optional[str] = None,
    ) -> None:
        self.surface = surface
        self.signals = signals
        self.home_page = home_page
        self._navigate = navigate
        self.state = NavState.IDLE
        self.location: Optional[str] = None
        self._flags = NavigationState()
        surface.set_history_listener(self.on_history_availability)

    @property
    def flags(self) -> NavigationState:
        return self._flags

    @property
    def can_go_back(self) -> bool:
        return self._flags.can_go_back

    @property
    def can_go_forward(self) -> bool:
        return self._flags.can_go_forward

    def on_history_availability(self, can_go_back: bool, can_go_forward: bool) -> None:
        flags = NavigationState(can_go_back=can_go_back, can_go_forward=can_go_forward)
        if flags == self._flags:
            return
        self._flags = flags
        self.signals.navigation_state_changed.emit(flags)

    def document_loaded(self, url: str) -> None:
        """Called by the coordinator once a page has been promoted."""
        self.state = NavState.LOADED
        self.location = url

    def go_back(self) -> bool:
        return self._traverse(self.surface.go_back(), "back")

    def go_forward(self) -> bool:
        return self._traverse(self.surface.go_forward(), "forward")

    def home(self) -> bool:
        return self._traverse(self.surface.home() or self.home_page, "home")

    def reload(self) -> bool:
        return self._traverse(self.location, "reload")

    def detach(self) -> None:
        self.surface.set_history_listener(None)

    def _traverse(self, url: Optional[str], how: str) -> bool:
        if url is None:
            logger.debug("Navigation %s: nothing to go to", how)
            return False
        logger.info("Navigation %s -> %s", how, url)
        self._navigate(url)
        return True


__all__ = ["NavState", "NavigationStateMachine"]
