# help_view/__init__.py
"""
help_view package initializer.
Defines the package version and exposes the main building blocks.
"""
__version__ = "0.1.0"

from help_view.coordinator import ResourceFetchCoordinator
from help_view.models import CurrentDocument, FetchHandle, FetchStatus, ResourceKind
from help_view.viewer import HelpViewer

__all__ = [
    "CurrentDocument",
    "FetchHandle",
    "FetchStatus",
    "HelpViewer",
    "ResourceFetchCoordinator",
    "ResourceKind",
    "__version__",
]
