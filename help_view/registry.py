# help_view/registry.py
"""
Pending-fetch registry: maps each in-flight fetch handle to the URL it was
issued for and the purpose its result will serve.

Lookups consume the entry, so each completion is handled at most once.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from help_view.errors import DuplicateHandle
from help_view.logger import logger
from help_view.models import FetchHandle, PendingEntry, PurposeTag


class PendingFetchRegistry:
    """Key-value store from fetch handle to :class:`PendingEntry`."""

    def __init__(self) -> None:
        self._entries: Dict[FetchHandle, PendingEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, handle: object) -> bool:
        return handle in self._entries

    def register(self, handle: FetchHandle, url: str, tag: PurposeTag) -> None:
        """Record a freshly issued fetch. Raises DuplicateHandle if already known."""
        if handle in self._entries:
            logger.error("Fetch handle %s registered twice", handle)
            raise DuplicateHandle(f"handle {handle!r} is already registered")
        self._entries[handle] = PendingEntry(handle=handle, url=url, tag=tag)

    def resolve(self, handle: FetchHandle) -> Optional[PendingEntry]:
        """Look up and remove the entry for *handle*; None if unknown."""
        return self._entries.pop(handle, None)

    def peek(self, handle: FetchHandle) -> Optional[PendingEntry]:
        """Look up without consuming. Used for progress notifications."""
        return self._entries.get(handle)

    def handles(self) -> List[FetchHandle]:
        return list(self._entries)

    def cancel_all(self) -> List[PendingEntry]:
        """Drain the registry and return every entry that was pending."""
        drained = list(self._entries.values())
        self._entries.clear()
        return drained


__all__ = ["PendingFetchRegistry"]
