# File: help_view/placeholders.py
"""help_view.placeholders: stand-in content returned while a real resource is in flight.

* :func:`image_placeholder` - a square, single-colour PNG.
* :func:`unavailable_page` - HTML page naming a URL that is not available (yet).
* :func:`command_help_page` - HTML page with the description of a dropped command.

Pages are rendered with Jinja2 from ``help_view/templates``.
"""

from __future__ import annotations

import io
from functools import lru_cache

from jinja2 import Environment, PackageLoader, select_autoescape
from PIL import Image

from help_view.models import ResourceKind

_env = Environment(
    loader=PackageLoader("help_view", "templates"),
    autoescape=select_autoescape(["html", "xml", "j2"]),
)


@lru_cache(maxsize=8)
def image_placeholder(size: int = 24, color: str = "#C0C0C0") -> bytes:
    """Return a *size* x *size* PNG filled with *color* (``#RRGGBB``)."""
    image = Image.new("RGB", (size, size), color)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def unavailable_page(url: str, reason: str | None = None) -> bytes:
    """Markup explaining that *url* cannot be shown right now."""
    html = _env.get_template("unavailable.html.j2").render(url=url, reason=reason)
    return html.encode("utf-8")


def command_help_page(command: str, info: str) -> bytes:
    """Markup for a command's help text; *info* is trusted rich text."""
    html = _env.get_template("command_help.html.j2").render(command=command, info=info)
    return html.encode("utf-8")


def placeholder_for(
    kind: ResourceKind,
    url: str,
    *,
    size: int = 24,
    color: str = "#C0C0C0",
    reason: str | None = None,
) -> bytes:
    """Synchronous stand-in for a resource of *kind*. Never None."""
    if kind is ResourceKind.IMAGE:
        return image_placeholder(size, color)
    if kind is ResourceKind.MARKUP:
        return unavailable_page(url, reason)
    return b""


__all__ = ["command_help_page", "image_placeholder", "placeholder_for", "unavailable_page"]
