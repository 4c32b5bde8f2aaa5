# File: tests/test_surface.py
from help_view.models import ResourceKind
from help_view.surface import HtmlSurface, extract_references

PAGE = b"""<html><head>
<link rel="stylesheet" href="style.css">
<link rel="icon" href="favicon.ico">
</head><body>
<img src="img/logo.png"><img src="img/logo.png#top">
<iframe src="/frame.html"></iframe>
<img src="">
</body></html>"""


def test_extract_references_resolves_and_dedupes():
    refs = extract_references(PAGE, "http://example.com/docs/index.html")
    assert refs == [
        ("http://example.com/docs/style.css", ResourceKind.STYLE),
        ("http://example.com/docs/img/logo.png", ResourceKind.IMAGE),
        ("http://example.com/frame.html", ResourceKind.MARKUP),
    ]


def test_layout_requests_resources_and_keeps_placeholders_apart():
    requests = []

    def provider(url, kind):
        requests.append((url, kind))
        return b"placeholder"

    surface = HtmlSurface()
    surface.set_resource_provider(provider)
    surface.display("http://example.com/docs/index.html", PAGE)

    logo = "http://example.com/docs/img/logo.png"
    assert (logo, ResourceKind.IMAGE) in requests
    assert surface.resource(logo, ResourceKind.IMAGE) == b"placeholder"
    assert not surface.has_resource(logo, ResourceKind.IMAGE)

    repaints = surface.repaint_count
    surface.add_resource(logo, ResourceKind.IMAGE, b"PNG")
    assert surface.has_resource(logo, ResourceKind.IMAGE)
    assert surface.resource(logo, ResourceKind.IMAGE) == b"PNG"
    assert surface.repaint_count == repaints + 1
    assert surface.layout_count == 1


def test_history_cursor():
    flags = []
    surface = HtmlSurface()
    surface.set_history_listener(lambda b, f: flags.append((b, f)))

    surface.display("doc://a", b"a")
    surface.display("doc://b", b"b")
    assert flags[-1] == (True, False)

    assert surface.go_back() == "doc://a"
    assert flags[-1] == (False, True)
    assert surface.go_back() is None

    # showing the entry under the cursor does not grow history
    surface.display("doc://a", b"a")
    assert surface.history == ["doc://a", "doc://b"]

    surface.display("doc://c", b"c")
    assert surface.history == ["doc://a", "doc://c"]
    assert surface.go_forward() is None
    assert surface.home() == "doc://a"


def test_set_html_has_no_location():
    surface = HtmlSurface()
    surface.set_html(b"<p>Hello <b>there</b></p>")
    assert surface.current_url is None
    assert surface.text() == "Hello there"
    assert surface.history == []
