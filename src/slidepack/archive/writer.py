"""Serialize a project into a ZIP archive.

Two modes share the entry construction:

- EDITABLE writes everything the reader needs to rebuild the project
  (project.json, config.json, theme.css, slides and resolved assets).
- STANDALONE writes a package that plays by itself: slides with the theme
  inlined, their assets, and a generated index.html player. It carries no
  editor metadata.

The archive is assembled in memory. Any failure raises ExportError and no
bytes are returned.
"""

import io
import json
import logging
import zipfile
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from jinja2 import TemplateError

from ..core.project import Project
from ..core.slides import file_stem
from ..errors import ExportError
from ..theme.compiler import inject_stylesheet, strip_theme_links, stylesheet_for
from .layout import (
    CONFIG_ENTRY,
    INDEX_ENTRY,
    NOTES_ENTRY,
    PLAYBACK_NOTES_ENTRY,
    PROJECT_ENTRY,
    THEME_ENTRY,
    asset_entry,
    normalize_asset_path,
    slide_entry,
)
from .player import generate_player

logger = logging.getLogger("SlidePackMCP.archive.writer")

Entries = dict[str, bytes | str]


class ArchiveMode(str, Enum):
    EDITABLE = "editable"
    STANDALONE = "standalone"


def _put(entries: Entries, path: str, content: bytes | str):
    if path in entries:
        logger.warning(f"Duplicate archive entry {path}; the later one replaces it")
    entries[path] = content


def _add_slides(entries: Entries, project: Project, transform: Callable[[str], str]):
    for slide in project.slides:
        if file_stem(slide.name) != slide.name:
            logger.warning(f"Slide name {slide.name!r} is not a plain file name; writing {slide.filename}")
        _put(entries, slide_entry(slide.name), transform(slide.html))
        for asset in slide.resolved_assets:
            if not normalize_asset_path(asset.filename):
                logger.warning(f"Skipping asset with unusable path {asset.filename!r} in {slide.name}")
                continue
            _put(entries, asset_entry(slide.name, asset.filename), asset.content)


def project_descriptor(project: Project) -> str:
    return json.dumps({
        "id": project.id,
        "name": project.name,
        "createdAt": project.created_at.isoformat(),
        "updatedAt": project.updated_at.isoformat(),
    }, indent=2, ensure_ascii=False)


def project_notes(project: Project) -> str:
    return (
        f"Slide project - {project.name}\n"
        "\n"
        "This archive is an editable slide project.\n"
        "\n"
        "Contents:\n"
        f"- {PROJECT_ENTRY}: project id, name and timestamps\n"
        f"- {CONFIG_ENTRY}: project settings, theme colours and slide order\n"
        f"- {THEME_ENTRY}: custom theme stylesheet\n"
        "- slides/: one HTML file per slide\n"
        "- slides/*_assets/: files referenced by each slide\n"
        "\n"
        "To continue editing, open this archive (or the folder it unpacks to)\n"
        "in the slide editor.\n"
        "\n"
        f"Slides: {len(project.slides)}\n"
        f"Created: {project.created_at.isoformat()}\n"
        f"Last modified: {project.updated_at.isoformat()}\n"
    )


def playback_notes(project: Project) -> str:
    return (
        f"{project.name} - standalone presentation\n"
        "\n"
        "This package plays in any modern browser without extra software.\n"
        "\n"
        "How to play:\n"
        "1. Unpack the archive into a folder\n"
        f"2. Open {INDEX_ENTRY}\n"
        "3. Use the arrow keys, space, mouse wheel, swipe or on-screen buttons\n"
        "\n"
        "Keys: Left/Right/Space navigate, Home/End jump, F toggles fullscreen,\n"
        "D switches the pen/eraser, Ctrl+C clears the annotations of a slide.\n"
        "Double-click places a red marker dot.\n"
        "\n"
        "Keep all files in the same folder. External resources referenced by\n"
        "slides still need a network connection.\n"
        "\n"
        f"Generated: {datetime.now(timezone.utc).isoformat(timespec='seconds')}\n"
    )


def build_entries(project: Project, mode: ArchiveMode) -> Entries:
    """Map of entry path to content for `project` in the given mode."""
    entries: Entries = {}
    if mode is ArchiveMode.EDITABLE:
        _put(entries, PROJECT_ENTRY, project_descriptor(project))
        if project.config is not None:
            _put(entries, CONFIG_ENTRY, project.config.to_json())
        if project.theme:
            _put(entries, THEME_ENTRY, project.theme)
        _add_slides(entries, project, lambda html: html)
        _put(entries, NOTES_ENTRY, project_notes(project))
    else:
        stylesheet = stylesheet_for(project)

        def inline_theme(html: str) -> str:
            html = strip_theme_links(html)
            return html if stylesheet is None else inject_stylesheet(html, stylesheet)

        _add_slides(entries, project, inline_theme)
        _put(entries, INDEX_ENTRY, generate_player(project))
        _put(entries, PLAYBACK_NOTES_ENTRY, playback_notes(project))
    return entries


def write_archive(project: Project, mode: ArchiveMode) -> bytes:
    """Assemble the archive for `project` and return its bytes."""
    mode = ArchiveMode(mode)
    buffer = io.BytesIO()
    try:
        entries = build_entries(project, mode)
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for path, content in entries.items():
                zf.writestr(path, content)
    except (OSError, ValueError, TypeError, zipfile.LargeZipFile, TemplateError) as e:
        raise ExportError(f"Could not write {mode.value} archive for '{project.name}': {e}") from e

    logger.info(f"Wrote {mode.value} archive for '{project.name}': {len(entries)} entries")
    return buffer.getvalue()


def save_project(project: Project) -> bytes:
    """Editable archive that `import_from_archive` reads back."""
    return write_archive(project, ArchiveMode.EDITABLE)


def export_project(project: Project) -> bytes:
    """Self-playing archive with a generated index.html."""
    return write_archive(project, ArchiveMode.STANDALONE)
