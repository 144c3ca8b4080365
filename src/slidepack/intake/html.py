"""Turn user-supplied HTML uploads into slides."""

import logging
from typing import Iterable

from ..archive.entries import ZipEntries
from ..archive.layout import basename, decode_text, is_html, strip_html_suffix
from ..core.slides import Slide
from .references import scan_asset_references

logger = logging.getLogger("SlidePackMCP.intake.html")


def slide_name_for(filename: str) -> str:
    """Slide name for an uploaded file: its basename without the .html extension."""
    return strip_html_suffix(basename(filename))


def parse_html_upload(filename: str, html: str | bytes) -> Slide:
    """Build a slide from one uploaded document.

    Assets are recorded from a reference scan with empty content; resolving
    them is left to whoever has access to the files.
    """
    if isinstance(html, bytes):
        html = decode_text(html)
    return Slide(
        name=slide_name_for(filename),
        html=html,
        assets=scan_asset_references(html),
    )


def parse_html_uploads(files: Iterable[tuple[str, str | bytes]]) -> list[Slide]:
    """Parse every `.html` upload, skipping anything else, in the given order."""
    slides = []
    for filename, content in files:
        if not is_html(filename):
            logger.debug(f"Skipping non-HTML upload {filename}")
            continue
        slides.append(parse_html_upload(filename, content).model_copy(update={"order": len(slides)}))
    return slides


def parse_slide_bundle(data: bytes) -> list[Slide]:
    """Read every HTML document in a plain ZIP of slides.

    Unlike a project archive there is no manifest or fixed layout: documents
    are taken in archive order and their local assets are resolved relative
    to each document. Raises FormatError if the bundle cannot be opened.
    """
    slides = []
    with ZipEntries.open(data) as entries:
        for path in entries.names:
            if not is_html(path):
                continue
            html = entries.read_text(path)
            if html is None:
                continue
            slides.append(Slide(
                name=slide_name_for(path),
                html=html,
                order=len(slides),
                assets=entries.resolve_assets(path, html),
            ))
    logger.info(f"Read {len(slides)} slides from bundle")
    return slides
