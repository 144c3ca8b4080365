"""Best-effort scan of the resources a slide's HTML refers to."""

import re

from ..core.slides import Asset

SRC_RE = re.compile(r"""src=["']([^"']+)["']""", re.IGNORECASE)
HREF_RE = re.compile(r"""href=["']([^"']+\.(?:css|js))["']""", re.IGNORECASE)
SCHEME_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")


def is_data_uri(ref: str) -> bool:
    return ref.strip().lower().startswith("data:")


def is_remote(ref: str) -> bool:
    """True for refs that carry a scheme (http:, data:, ...) or are protocol-relative."""
    ref = ref.strip()
    return ref.startswith("//") or bool(SCHEME_RE.match(ref))


def find_references(html: str) -> list[str]:
    """All src refs except data URIs, then all stylesheet/script hrefs, in document order."""
    refs = [m.group(1) for m in SRC_RE.finditer(html) if not is_data_uri(m.group(1))]
    refs.extend(m.group(1) for m in HREF_RE.finditer(html))
    return refs


def scan_asset_references(html: str) -> list[Asset]:
    """Record every reference as an unresolved Asset typed by its extension."""
    return [Asset.unresolved(ref) for ref in find_references(html)]
