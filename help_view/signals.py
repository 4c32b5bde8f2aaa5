"""Outward notifications consumed by the viewer chrome (toolbar, status bar)."""

from __future__ import annotations

from psygnal import Signal

from help_view.models import NavigationState

_SIGNAL_NAMES = (
    "navigation_state_changed",
    "status_text_changed",
    "external_browser_requested",
    "load_failed",
    "fetch_progress",
)


class ViewerSignals:
    """Everything the coordinator reports outward.

    Each attribute is a :class:`psygnal.SignalInstance`; slots are called
    synchronously, in connection order, from :meth:`emit`.
    """

    navigation_state_changed = Signal(NavigationState)
    status_text_changed = Signal(str)
    # url handed to the system browser
    external_browser_requested = Signal(str)
    # (url, error)
    load_failed = Signal(str, object)
    # (url, done, total); total is -1 when unknown
    fetch_progress = Signal(str, int, int)

    def disconnect_all(self) -> None:
        for name in _SIGNAL_NAMES:
            getattr(self, name).disconnect()


__all__ = ["ViewerSignals"]
