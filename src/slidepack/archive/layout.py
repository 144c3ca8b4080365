"""Entry names shared by archive reading and writing.

```
project.json                      editable save only
config.json                       optional
theme.css                         optional
slides/<name>.html                one per slide
slides/<name>_assets/<filename>   resolved assets only
index.html                        standalone export only
```
"""

import posixpath
from dataclasses import dataclass
from typing import Optional

from ..core.slides import file_stem

PROJECT_ENTRY = "project.json"
CONFIG_ENTRY = "config.json"
THEME_ENTRY = "theme.css"
INDEX_ENTRY = "index.html"
NOTES_ENTRY = "README.txt"
PLAYBACK_NOTES_ENTRY = "HOW_TO_PLAY.txt"

SLIDES_DIR = "slides/"
ASSETS_MARKER = "_assets"
HTML_SUFFIX = ".html"


@dataclass(frozen=True, order=True)
class SlideKey:
    """Case-folded, separator-normalized filename used to match manifest entries."""
    value: str

    @classmethod
    def of(cls, filename: str) -> "SlideKey":
        path = posixpath.normpath(filename.replace("\\", "/")).lstrip("/")
        return cls(path.casefold())


def is_html(path: str) -> bool:
    return path.lower().endswith(HTML_SUFFIX)


def strip_html_suffix(filename: str) -> str:
    return filename[: -len(HTML_SUFFIX)] if is_html(filename) else filename


def basename(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


def normalize_asset_path(filename: str) -> str:
    """Drop leading slashes and `.`/`..` segments so the path stays inside its directory."""
    parts = [p for p in filename.replace("\\", "/").split("/") if p not in ("", ".", "..")]
    return "/".join(parts)


def slide_filename(name: str) -> str:
    return f"{file_stem(name)}{HTML_SUFFIX}"


def slide_entry(name: str) -> str:
    return SLIDES_DIR + slide_filename(name)


def assets_dir(name: str) -> str:
    return f"{SLIDES_DIR}{file_stem(name)}{ASSETS_MARKER}/"


def in_assets_dir(path: str) -> bool:
    """True when some directory of `path` is a `<name>_assets` directory."""
    parts = path.replace("\\", "/").split("/")[:-1]
    return any(p.lower().endswith(ASSETS_MARKER) for p in parts)


def asset_entry(slide_name: str, filename: str) -> str:
    return assets_dir(slide_name) + normalize_asset_path(filename)


def resolve_relative(slide_path: str, ref: str) -> Optional[str]:
    """Resolve `ref` against the directory of `slide_path` within the archive.

    Returns None when the result would leave the archive root.
    """
    ref = ref.split("#", 1)[0].split("?", 1)[0].replace("\\", "/")
    if not ref:
        return None
    if ref.startswith("/"):
        resolved = posixpath.normpath(ref.lstrip("/"))
    else:
        base = posixpath.dirname(slide_path)
        resolved = posixpath.normpath(posixpath.join(base, ref))
    if resolved == ".." or resolved.startswith("../"):
        return None
    return resolved


def decode_text(data: bytes) -> str:
    """Decode entry bytes as UTF-8, dropping a BOM and replacing bad sequences."""
    return data.decode("utf-8-sig", errors="replace")
