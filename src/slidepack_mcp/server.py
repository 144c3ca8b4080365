"""SlidePack MCP Server - MCP tools for assembling, saving and exporting HTML slide decks."""

from mcp.server.fastmcp import FastMCP, Context
import json
import logging
import os
import re
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, Dict, Any, Optional

from slidepack.archive import export_project as build_export
from slidepack.archive import import_from_archive, import_from_file_set
from slidepack.archive import save_project as build_save
from slidepack.archive.layout import normalize_asset_path
from slidepack.archive.reader import parse_config
from slidepack.core.project import Project
from slidepack.core.slides import Asset, Slide
from slidepack.core.state import SessionState
from slidepack.errors import ConfigError, ExportError, FormatError
from slidepack.intake.html import parse_html_upload, parse_slide_bundle
from slidepack.intake.references import is_remote
from slidepack.theme import render_preview

# Configure logging
logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("SlidePackMCP")

# Default configuration
DEFAULT_PROJECTS_DIR = os.environ.get("SLIDEPACK_PROJECTS_DIR", "./projects")
NEW_PROJECT_NAME = "New Project"
NO_PROJECT = "Error: No project is open. Use create_project, import_html_files, open_archive or open_folder first."


# ── Global State ────────────────────────────────────────────────────────

_session_state = SessionState()


def _current() -> Optional[Project]:
    return _session_state.project


def _archive_path(output_path: str, project: Project, suffix: str) -> Path:
    if output_path:
        return Path(output_path)
    safe_name = re.sub(r"[^\w.\- ]+", "_", project.name).strip() or "project"
    return Path(DEFAULT_PROJECTS_DIR) / f"{safe_name}{suffix}.zip"


def _read_folder(folder: Path) -> dict[str, bytes]:
    """All files under `folder`, keyed by their path relative to it."""
    return {
        p.relative_to(folder).as_posix(): p.read_bytes()
        for p in sorted(folder.rglob("*"))
        if p.is_file()
    }


def _resolve_local_assets(slide: Slide, base_dir: Path) -> Slide:
    """Fill in asset content from files next to an uploaded document."""
    assets = []
    for asset in slide.assets:
        path = base_dir / normalize_asset_path(asset.filename)
        if not is_remote(asset.filename) and path.is_file():
            asset = Asset(filename=asset.filename, content=path.read_bytes(), type=asset.type)
        else:
            logger.debug(f"Asset {asset.filename} for slide {slide.name} not found under {base_dir}")
        assets.append(asset)
    return slide.model_copy(update={"assets": assets})


def _status(project: Project) -> dict:
    return {
        "project_loaded": True,
        "id": project.id,
        "name": project.name,
        "source_path": project.source_path,
        "slide_count": len(project.slides),
        "asset_count": sum(len(s.assets) for s in project.slides),
        "resolved_asset_count": sum(len(s.resolved_assets) for s in project.slides),
        "has_config": project.config is not None,
        "has_theme": project.theme is not None,
        "created_at": project.created_at.isoformat(),
        "updated_at": project.updated_at.isoformat(),
        "undo_depth": len(_session_state.undo_stack),
    }


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    try:
        logger.info("SlidePackMCP server starting up")
        yield {}
    finally:
        logger.info("SlidePackMCP server shut down")


mcp = FastMCP("SlidePackMCP", lifespan=server_lifespan)


# ═══════════════════════════════════════════════════════════════════════
# PROJECT TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def create_project(ctx: Context, project_name: str = NEW_PROJECT_NAME) -> str:
    """Start a new, empty slide project.

    Parameters:
    - project_name: Name for the project
    """
    project = _session_state.apply("Create project", Project(name=project_name))
    return json.dumps(_status(project), indent=2)


@mcp.tool()
def open_archive(ctx: Context, archive_path: str) -> str:
    """Open a saved project archive (.zip).

    Parameters:
    - archive_path: Path to the archive file
    """
    path = Path(archive_path)
    try:
        project = import_from_archive(path.read_bytes(), source_path=str(path))
    except FormatError as e:
        return f"Error opening archive: {str(e)}"
    except OSError as e:
        return f"Error reading {path}: {str(e)}"
    _session_state.apply(f"Open archive {path.name}", project)
    return json.dumps({"status": "opened", **_status(project)}, indent=2)


@mcp.tool()
def open_folder(ctx: Context, folder_path: str) -> str:
    """Open a project from an unpacked folder (config.json, theme.css, slides/*.html).

    Parameters:
    - folder_path: Path to the project folder
    """
    folder = Path(folder_path)
    if not folder.is_dir():
        return f"Error: {folder} is not a directory."
    try:
        files = _read_folder(folder)
    except OSError as e:
        return f"Error reading {folder}: {str(e)}"
    project = import_from_file_set(files, source_path=str(folder))
    _session_state.apply(f"Open folder {folder.name}", project)
    return json.dumps({"status": "opened", **_status(project)}, indent=2)


@mcp.tool()
def save_project(ctx: Context, output_path: str = "") -> str:
    """Save the project as an editable archive that can be opened again.

    Parameters:
    - output_path: Destination .zip (defaults to <projects dir>/<name>.zip)
    """
    project = _current()
    if project is None:
        return NO_PROJECT
    destination = _archive_path(output_path, project, "")
    try:
        data = build_save(project)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except ExportError as e:
        return f"Error saving project: {str(e)}"
    except OSError as e:
        return f"Error writing {destination}: {str(e)}"
    return f"Project '{project.name}' saved to {destination} ({len(data)} bytes)."


@mcp.tool()
def export_project(ctx: Context, output_path: str = "") -> str:
    """Export the project as a standalone, self-playing package.

    Parameters:
    - output_path: Destination .zip (defaults to <projects dir>/<name>-player.zip)
    """
    project = _current()
    if project is None:
        return NO_PROJECT
    if not project.slides:
        return "Error: The project has no slides to export."
    destination = _archive_path(output_path, project, "-player")
    try:
        data = build_export(project)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(data)
    except ExportError as e:
        return f"Error exporting project: {str(e)}"
    except OSError as e:
        return f"Error writing {destination}: {str(e)}"
    return f"Project '{project.name}' exported to {destination} ({len(data)} bytes). Open index.html to play."


@mcp.tool()
def get_project_status(ctx: Context) -> str:
    """Get the current project status including slide count, assets, etc."""
    project = _current()
    if project is None:
        return json.dumps({
            "project_loaded": False,
            "message": "No project loaded. Use create_project, open_archive or open_folder.",
        }, indent=2)
    return json.dumps(_status(project), indent=2)


@mcp.tool()
def set_project_config(ctx: Context, config_json: str) -> str:
    """Replace the project configuration (title, theme colours, playback settings, manifest).

    Parameters:
    - config_json: config.json content; camelCase keys as written by the editor
    """
    project = _current()
    if project is None:
        return NO_PROJECT
    try:
        config = parse_config(config_json)
    except ConfigError as e:
        return f"Error: {str(e)}"
    project = _session_state.apply("Change project config", project.with_config(config))
    return json.dumps({
        "status": "updated",
        "name": project.name,
        "config": config.model_dump(by_alias=True),
    }, indent=2)


@mcp.tool()
def set_theme(ctx: Context, css: str = "", file_path: str = "") -> str:
    """Set a free-form theme stylesheet. It takes precedence over the palette.

    Parameters:
    - css: Stylesheet text
    - file_path: Alternatively, a .css file to read
    """
    project = _current()
    if project is None:
        return NO_PROJECT
    if file_path:
        try:
            css = Path(file_path).read_text(encoding="utf-8")
        except OSError as e:
            return f"Error reading {file_path}: {str(e)}"
    if not css:
        return "Error: Provide css or file_path."
    _session_state.apply("Set theme", project.with_theme(css))
    return f"Theme set ({len(css)} characters)."


@mcp.tool()
def clear_theme(ctx: Context) -> str:
    """Remove the free-form theme so the palette (if any) applies again."""
    project = _current()
    if project is None:
        return NO_PROJECT
    _session_state.apply("Clear theme", project.with_theme(None))
    return "Theme cleared."


@mcp.tool()
def sync_manifest(ctx: Context) -> str:
    """Write the current slide order into the config manifest so a saved archive reopens in this order."""
    project = _current()
    if project is None:
        return NO_PROJECT
    project = _session_state.apply("Sync manifest", project.with_manifest_synced())
    return json.dumps([e.model_dump() for e in project.config.slides], indent=2)


# ═══════════════════════════════════════════════════════════════════════
# SLIDE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def import_html_files(ctx: Context, file_paths: list[str]) -> str:
    """Add HTML files as slides, appended in the given order. Creates a project if none is open.

    Parameters:
    - file_paths: Paths to .html files; assets next to each file are picked up
    """
    slides = []
    for file_path in file_paths:
        path = Path(file_path)
        if path.suffix.lower() != ".html":
            logger.info(f"Skipping non-HTML file {path}")
            continue
        try:
            slide = parse_html_upload(path.name, path.read_bytes())
        except OSError as e:
            return f"Error reading {path}: {str(e)}"
        slides.append(_resolve_local_assets(slide, path.parent))
    if not slides:
        return "Error: No .html files given."

    project = _current() or Project(name=NEW_PROJECT_NAME)
    project = _session_state.apply(f"Import {len(slides)} slides", project.add_slides(slides))
    return json.dumps({
        "status": "imported",
        "added": [s.name for s in slides],
        "slides": project.to_summary(),
    }, indent=2)


@mcp.tool()
def import_slide_bundle(ctx: Context, bundle_path: str) -> str:
    """Add every HTML document of a plain .zip of slides (not a saved project).

    Parameters:
    - bundle_path: Path to the .zip bundle
    """
    path = Path(bundle_path)
    try:
        slides = parse_slide_bundle(path.read_bytes())
    except FormatError as e:
        return f"Error reading bundle: {str(e)}"
    except OSError as e:
        return f"Error reading {path}: {str(e)}"
    if not slides:
        return "Error: The bundle contains no .html files."

    project = _current() or Project(name=NEW_PROJECT_NAME)
    project = _session_state.apply(f"Import bundle {path.name}", project.add_slides(slides))
    return json.dumps({
        "status": "imported",
        "added": [s.name for s in slides],
        "slides": project.to_summary(),
    }, indent=2)


@mcp.tool()
def get_slides(ctx: Context) -> str:
    """List all slides with their IDs, order and asset counts."""
    project = _current()
    if project is None:
        return NO_PROJECT
    if not project.slides:
        return "No slides yet. Use import_html_files to add slides."
    return json.dumps(project.to_summary(), indent=2)


@mcp.tool()
def get_slide(ctx: Context, slide_id: str) -> str:
    """Get a slide's HTML source and asset list.

    Parameters:
    - slide_id: The ID of the slide to retrieve
    """
    project = _current()
    slide = project.get_slide(slide_id) if project else None
    if not slide:
        return f"Error: Slide '{slide_id}' not found."
    return json.dumps({
        "id": slide.id,
        "name": slide.name,
        "order": slide.order,
        "html": slide.html,
        "assets": [
            {"filename": a.filename, "type": a.type, "resolved": a.is_resolved}
            for a in slide.assets
        ],
    }, indent=2)


@mcp.tool()
def update_slide_html(ctx: Context, slide_id: str, html: str) -> str:
    """Replace a slide's HTML source.

    Parameters:
    - slide_id: The slide to edit
    - html: New HTML source
    """
    project = _current()
    slide = project.get_slide(slide_id) if project else None
    if not slide:
        return f"Error: Slide '{slide_id}' not found."
    _session_state.apply(f"Edit slide {slide.name}",
                         project.update_slide(slide.model_copy(update={"html": html})))
    return f"Slide '{slide.name}' updated ({len(html)} characters)."


@mcp.tool()
def rename_slide(ctx: Context, slide_id: str, name: str) -> str:
    """Rename a slide. The name is also its file name inside archives.

    Parameters:
    - slide_id: The slide to rename
    - name: New name, without .html
    """
    project = _current()
    slide = project.get_slide(slide_id) if project else None
    if not slide:
        return f"Error: Slide '{slide_id}' not found."
    if not name.strip():
        return "Error: Slide name cannot be empty."
    _session_state.apply(f"Rename slide {slide.name}",
                         project.update_slide(slide.model_copy(update={"name": name.strip()})))
    return f"Slide '{slide.name}' renamed to '{name.strip()}'."


@mcp.tool()
def remove_slide(ctx: Context, slide_id: str) -> str:
    """Remove a slide from the project.

    Parameters:
    - slide_id: The ID of the slide to remove
    """
    project = _current()
    updated = project.remove_slide(slide_id) if project else None
    if updated is None:
        return f"Error: Slide '{slide_id}' not found."
    _session_state.apply(f"Remove slide {slide_id}", updated)
    return f"Slide '{slide_id}' removed. {len(updated.slides)} slides remaining."


@mcp.tool()
def move_slide(ctx: Context, slide_id: str, new_index: int) -> str:
    """Move a slide to a new position (0-based).

    Parameters:
    - slide_id: The slide to move
    - new_index: Target position
    """
    project = _current()
    updated = project.move_slide(slide_id, new_index) if project else None
    if updated is None:
        return f"Error: Slide '{slide_id}' not found."
    _session_state.apply(f"Move slide {slide_id}", updated)
    return json.dumps({"status": "moved", "slides": updated.to_summary()}, indent=2)


@mcp.tool()
def reorder_slides(ctx: Context, slide_id_list: list[str]) -> str:
    """Reorder slides by providing the complete list of slide IDs in desired order.

    Parameters:
    - slide_id_list: List of all slide IDs in the new order
    """
    project = _current()
    updated = project.reorder_slides(slide_id_list) if project else None
    if updated is None:
        return "Error: The provided slide ID list doesn't match the current slides."
    _session_state.apply("Reorder slides", updated)
    return json.dumps({"status": "reordered", "slides": updated.to_summary()}, indent=2)


@mcp.tool()
def preview_slide(ctx: Context, slide_id: str) -> str:
    """Get a slide's HTML with the project theme applied, as the preview shows it.

    Parameters:
    - slide_id: The slide to preview
    """
    project = _current()
    slide = project.get_slide(slide_id) if project else None
    if not slide:
        return f"Error: Slide '{slide_id}' not found."
    return render_preview(slide, project)


@mcp.tool()
def undo(ctx: Context) -> str:
    """Undo the last project change."""
    description = _session_state.undo()
    if description:
        project = _current()
        count = len(project.slides) if project else 0
        return f"Undone: {description}. Slide count: {count}"
    return "Nothing to undo."


# ═══════════════════════════════════════════════════════════════════════
# MCP PROMPT
# ═══════════════════════════════════════════════════════════════════════

@mcp.prompt()
def slide_deck_workflow() -> str:
    """Recommended workflow for assembling a slide deck"""
    return """You are helping the user assemble a deck of HTML slides. Follow this workflow:

1. **Start**: Use import_html_files() with the user's .html files, or
   open_archive() / open_folder() to continue a saved project.

2. **Arrange**: Use get_slides() to see the order, then move_slide(),
   reorder_slides(), rename_slide() or remove_slide().

3. **Edit**: Use get_slide() to read a slide's HTML and update_slide_html()
   to change it. Use preview_slide() to see it with the theme applied.

4. **Theme**: Use set_project_config() for title and palette, or set_theme()
   for a hand-written stylesheet (it wins over the palette).

5. **Save**: Use sync_manifest() to record the current order, then
   save_project() for an editable archive.

6. **Publish**: Use export_project() for a self-playing package with
   keyboard, swipe and annotation support.

Tips:
- Use undo() if you make a mistake
- Assets referenced by a slide are only packaged when they were found on import
- get_project_status() shows how many assets were resolved
"""


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
