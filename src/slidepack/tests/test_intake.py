"""Tests for slidepack.intake — reference scanning, HTML uploads and slide bundles."""

import io
import zipfile

import pytest

from slidepack.errors import FormatError
from slidepack.intake.html import (
    parse_html_upload,
    parse_html_uploads,
    parse_slide_bundle,
    slide_name_for,
)
from slidepack.intake.references import (
    find_references,
    is_data_uri,
    is_remote,
    scan_asset_references,
)


def make_zip(files: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buf.getvalue()


SAMPLE_HTML = """<!DOCTYPE html>
<html><head>
<link rel="stylesheet" href="css/slide.css">
<link rel="icon" href="favicon.ico">
<script src="js/app.js"></script>
</head><body>
<img src="img/chart.png">
<img SRC='data:image/png;base64,AAAA'>
<img src="https://cdn.example.com/logo.svg">
<a href="next.html">next</a>
</body></html>"""


# ── Reference scanning ─────────────────────────────────────────────────

class TestReferences:
    def test_find_references_order(self):
        assert find_references(SAMPLE_HTML) == [
            "js/app.js",
            "img/chart.png",
            "https://cdn.example.com/logo.svg",
            "css/slide.css",
        ]

    def test_no_references(self):
        assert find_references("<p>plain</p>") == []

    def test_data_uri(self):
        assert is_data_uri("data:image/png;base64,xx")
        assert is_data_uri("  DATA:text/plain,hi")
        assert not is_data_uri("img/data.png")

    @pytest.mark.parametrize("ref", [
        "http://example.com/a.png",
        "https://example.com/a.css",
        "//cdn.example.com/a.js",
        "data:image/png;base64,xx",
        "mailto:someone@example.com",
    ])
    def test_remote(self, ref):
        assert is_remote(ref)

    @pytest.mark.parametrize("ref", ["img/a.png", "../theme.css", "/abs/a.js", "a.png?x=1"])
    def test_local(self, ref):
        assert not is_remote(ref)

    def test_scan_records_unresolved_assets(self):
        assets = scan_asset_references(SAMPLE_HTML)
        assert [(a.filename, a.type) for a in assets] == [
            ("js/app.js", "js"),
            ("img/chart.png", "image"),
            ("https://cdn.example.com/logo.svg", "image"),
            ("css/slide.css", "css"),
        ]
        assert all(not a.is_resolved for a in assets)


# ── HTML uploads ───────────────────────────────────────────────────────

class TestHtmlUpload:
    def test_slide_name_for(self):
        assert slide_name_for("decks/Intro.html") == "Intro"
        assert slide_name_for("C:\\slides\\outro.HTML") == "outro"

    def test_parse_text(self):
        s = parse_html_upload("intro.html", SAMPLE_HTML)
        assert s.name == "intro"
        assert s.html == SAMPLE_HTML
        assert len(s.assets) == 4
        assert s.resolved_assets == []

    def test_parse_bytes_drops_bom(self):
        s = parse_html_upload("a.html", "\ufeff<p>héllo</p>".encode("utf-8"))
        assert s.html == "<p>héllo</p>"

    def test_parse_invalid_utf8(self):
        s = parse_html_upload("a.html", b"<p>\xff</p>")
        assert s.html == "<p>\ufffd</p>"

    def test_parse_uploads_skips_non_html(self):
        slides = parse_html_uploads([
            ("b.html", "<p>b</p>"),
            ("notes.txt", "ignore me"),
            ("a.HTML", "<p>a</p>"),
        ])
        assert [s.name for s in slides] == ["b", "a"]
        assert [s.order for s in slides] == [0, 1]

    def test_parse_uploads_empty(self):
        assert parse_html_uploads([]) == []


# ── Slide bundles ──────────────────────────────────────────────────────

class TestSlideBundle:
    def test_bundle_order_and_assets(self):
        data = make_zip({
            "deck/two.html": '<img src="img/a.png"><img src="missing.png">',
            "deck/img/a.png": b"PNGDATA",
            "deck/one.html": "<p>one</p>",
            "deck/readme.txt": "not a slide",
        })
        slides = parse_slide_bundle(data)
        assert [s.name for s in slides] == ["two", "one"]
        assert [s.order for s in slides] == [0, 1]

        assets = {a.filename: a for a in slides[0].assets}
        assert assets["img/a.png"].content == b"PNGDATA"
        assert assets["img/a.png"].type == "image"
        assert not assets["missing.png"].is_resolved

    def test_bundle_skips_remote_refs(self):
        data = make_zip({"a.html": '<script src="https://cdn.example.com/x.js"></script>'})
        (slide,) = parse_slide_bundle(data)
        assert slide.assets == []

    def test_empty_bundle(self):
        assert parse_slide_bundle(make_zip({"notes.txt": "x"})) == []

    def test_not_a_zip(self):
        with pytest.raises(FormatError):
            parse_slide_bundle(b"definitely not a zip")
