# help_view/models.py
"""
Data models shared by the transport, the registry and the coordinator.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


class ResourceKind(Enum):
    """Category of a resource the rendering surface asks for."""

    MARKUP = "markup"
    IMAGE = "image"
    STYLE = "style"
    OTHER = "other"


class FetchStatus(Enum):
    """Terminal state of one transport operation."""

    OK = "ok"
    ERROR = "error"
    CANCELED = "canceled"


@dataclass(frozen=True, slots=True)
class FetchHandle:
    """Opaque identity of one in-flight fetch. Issued by the transport."""

    id: int
    url: str


@dataclass(frozen=True, slots=True)
class SourceTag:
    """The fetch will become the current document."""

    # Navigation sequence number, only compared when stale completions are discarded.
    seq: int = 0


@dataclass(frozen=True, slots=True)
class EmbeddedTag:
    """The fetch feeds an embedded resource slot of the given kind."""

    kind: ResourceKind


PurposeTag = Union[SourceTag, EmbeddedTag]


@dataclass(frozen=True, slots=True)
class PendingEntry:
    handle: FetchHandle
    url: str
    tag: PurposeTag


@dataclass(frozen=True, slots=True)
class CurrentDocument:
    """Most recently promoted primary document. Replaced, never mutated."""

    url: str
    data: bytes


@dataclass(frozen=True, slots=True)
class NavigationState:
    can_go_back: bool = False
    can_go_forward: bool = False


@dataclass(frozen=True, slots=True)
class Credentials:
    """Answer to an authentication challenge."""

    user: str
    password: str

    def __repr__(self) -> str:
        return f"Credentials(user={self.user!r}, password='***')"


@dataclass(slots=True)
class FetchResult:
    """What a transport task hands to its done-callback."""

    status: FetchStatus
    data: bytes = b""
    error: Optional[Exception] = None
