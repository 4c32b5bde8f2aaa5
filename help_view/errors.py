"""Exception hierarchy for help_view."""

from __future__ import annotations

from typing import Optional


class HelpViewError(Exception):
    """Base help_view error."""


class TransportError(HelpViewError):
    """Network or file failure reported by the transport."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(reason)
        self.url = url
        self.reason = reason
        self.status = status

    def __str__(self) -> str:
        if self.status is not None:
            return f"HTTP {self.status}: {self.reason}"
        return self.reason


class Canceled(HelpViewError):
    """Deliberate abort of a fetch. Not a failure."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Download of {url} canceled")
        self.url = url


class DuplicateHandle(HelpViewError):
    """A fetch handle was registered twice. Indicates a broken transport."""


class ResourceUnavailable(HelpViewError):
    """An embedded resource could not be fetched; its placeholder stays."""

    def __init__(self, url: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(f"Resource {url} is unavailable: {cause}")
        self.url = url
        self.cause = cause


__all__ = [
    "Canceled",
    "DuplicateHandle",
    "HelpViewError",
    "ResourceUnavailable",
    "TransportError",
]
