# File: tests/test_placeholders.py
import io

from PIL import Image

from help_view.models import ResourceKind
from help_view.placeholders import (
    command_help_page,
    image_placeholder,
    placeholder_for,
    unavailable_page,
)


def test_image_placeholder_is_gray_square_png():
    data = image_placeholder(24, "#C0C0C0")
    assert data.startswith(b"\x89PNG\r\n\x1a\n")
    image = Image.open(io.BytesIO(data))
    assert image.format == "PNG"
    assert image.size == (24, 24)
    assert image.convert("RGB").getpixel((0, 0)) == (0xC0, 0xC0, 0xC0)
    assert image.convert("RGB").getpixel((23, 23)) == (0xC0, 0xC0, 0xC0)


def test_image_placeholder_honours_size_and_color():
    image = Image.open(io.BytesIO(image_placeholder(8, "#FF0000")))
    assert image.size == (8, 8)
    assert image.convert("RGB").getpixel((4, 4)) == (255, 0, 0)


def test_unavailable_page_names_url_and_escapes_it():
    page = unavailable_page("doc://a?x=<b>", "HTTP 404: Not Found").decode("utf-8")
    assert "doc://a?x=&lt;b&gt;" in page
    assert "currently unavailable" in page
    assert "HTTP 404: Not Found" in page


def test_command_help_page():
    assert b"<p>Opens a file</p>" in command_help_page("Std_Open", "<p>Opens a file</p>")
    empty = command_help_page("Std_Open", "").decode("utf-8")
    assert "No description for" in empty
    assert "Std_Open" in empty


def test_placeholder_for_each_kind():
    assert placeholder_for(ResourceKind.IMAGE, "doc://x.png").startswith(b"\x89PNG")
    assert b"doc://x.html" in placeholder_for(ResourceKind.MARKUP, "doc://x.html")
    assert placeholder_for(ResourceKind.STYLE, "doc://x.css") == b""
    assert placeholder_for(ResourceKind.OTHER, "doc://x.bin") == b""
