"""Read a project back from an archive or from a flat collection of files.

Both sources go through the same reconciliation: slides named in the config
manifest come first, in manifest order; every other HTML document follows,
sorted by filename. Only an archive that cannot be opened is fatal. Bad
metadata, unreadable entries and missing assets are logged and skipped.
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Iterable, Mapping, Optional

from pydantic import ValidationError

from ..core.project import DEFAULT_PROJECT_NAME, ManifestEntry, Project, ProjectConfig, utc_now
from ..core.slides import Asset, Slide
from ..errors import ConfigError
from .entries import ZipEntries
from .layout import (
    CONFIG_ENTRY,
    PROJECT_ENTRY,
    SLIDES_DIR,
    THEME_ENTRY,
    SlideKey,
    basename,
    decode_text,
    in_assets_dir,
    is_html,
    slide_filename,
    strip_html_suffix,
)

logger = logging.getLogger("SlidePackMCP.archive.reader")

FileSet = Mapping[str, bytes | str] | Iterable[tuple[str, bytes | str]]
SlideLoader = Callable[[], Optional[tuple[str, list[Asset]]]]


@dataclass
class HtmlCandidate:
    """An HTML document that may become a slide."""
    filename: str
    load: SlideLoader = field(repr=False)

    @property
    def key(self) -> SlideKey:
        return SlideKey.of(self.filename)

    @property
    def stem(self) -> str:
        return strip_html_suffix(self.filename)


@dataclass
class ProjectMetadata:
    config: Optional[ProjectConfig] = None
    theme: Optional[str] = None
    descriptor: dict = field(default_factory=dict)


# ── Reconciliation ─────────────────────────────────────────────────────

def _sort_key(candidate: HtmlCandidate) -> tuple[SlideKey, str]:
    return candidate.key, candidate.filename


def reconcile_order(manifest: list[ManifestEntry],
                    candidates: list[HtmlCandidate]) -> list[tuple[HtmlCandidate, str]]:
    """Order candidates against the manifest and pick each slide's name.

    Manifest entries come first, in their listed order, named by their title
    when they have one. Entries without a matching document are dropped.
    Unreferenced candidates follow in ascending filename order.
    """
    first_by_key: dict[SlideKey, HtmlCandidate] = {}
    for c in candidates:
        first_by_key.setdefault(c.key, c)

    ordered: list[tuple[HtmlCandidate, str]] = []
    matched: set[int] = set()
    for entry in manifest:
        candidate = first_by_key.get(SlideKey.of(entry.file))
        if candidate is None and entry.title:
            # a saved slide is stored under its title
            candidate = first_by_key.get(SlideKey.of(slide_filename(entry.title)))
        if candidate is None:
            logger.debug(f"Manifest entry {entry.file!r} has no matching slide")
            continue
        matched.add(id(candidate))
        ordered.append((candidate, entry.title or candidate.stem))

    remaining = sorted((c for c in candidates if id(c) not in matched), key=_sort_key)
    ordered.extend((c, c.stem) for c in remaining)
    return ordered


def materialize_slides(ordered: list[tuple[HtmlCandidate, str]]) -> list[Slide]:
    slides = []
    for candidate, name in ordered:
        loaded = candidate.load()
        if loaded is None:
            logger.warning(f"Skipping unreadable slide {candidate.filename}")
            continue
        html, assets = loaded
        slides.append(Slide(name=name, html=html, order=len(slides), assets=assets))
    return slides


# ── Metadata ───────────────────────────────────────────────────────────

def parse_config(text: str) -> ProjectConfig:
    """Parse config.json text, raising ConfigError when it is malformed."""
    try:
        return ProjectConfig.model_validate_json(text)
    except ValidationError as e:
        raise ConfigError(f"Invalid {CONFIG_ENTRY}: {e}") from e


def parse_timestamp(value) -> Optional[datetime]:
    if not isinstance(value, str) or not value:
        return None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def read_metadata(read_text: Callable[[str], Optional[str]]) -> ProjectMetadata:
    """Load the optional config, theme and legacy descriptor entries."""
    meta = ProjectMetadata()

    config_text = read_text(CONFIG_ENTRY)
    if config_text is not None:
        try:
            meta.config = parse_config(config_text)
        except ConfigError as e:
            logger.warning(f"Ignoring project config: {e}")

    meta.theme = read_text(THEME_ENTRY)

    descriptor_text = read_text(PROJECT_ENTRY)
    if descriptor_text is not None:
        try:
            descriptor = json.loads(descriptor_text)
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring {PROJECT_ENTRY}: {e}")
        else:
            if isinstance(descriptor, dict):
                meta.descriptor = descriptor
            else:
                logger.warning(f"Ignoring {PROJECT_ENTRY}: expected an object")
    return meta


def _timestamp(config_value: Optional[str], descriptor_value) -> datetime:
    return parse_timestamp(config_value) or parse_timestamp(descriptor_value) or utc_now()


def build_project(meta: ProjectMetadata, candidates: list[HtmlCandidate],
                  source_path: Optional[str] = None) -> Project:
    config = meta.config
    manifest = config.slides if config is not None else []
    slides = materialize_slides(reconcile_order(manifest, candidates))

    legacy_name = meta.descriptor.get("name")
    if config is not None and config.title:
        name = config.title
    elif isinstance(legacy_name, str) and legacy_name:
        name = legacy_name
    else:
        name = DEFAULT_PROJECT_NAME

    return Project(
        name=name,
        slides=slides,
        created_at=_timestamp(config.created if config else None, meta.descriptor.get("createdAt")),
        updated_at=_timestamp(config.modified if config else None, meta.descriptor.get("updatedAt")),
        config=config,
        theme=meta.theme,
        source_path=source_path,
    )


# ── Archive ────────────────────────────────────────────────────────────

def _is_archive_slide(path: str) -> bool:
    return path.startswith(SLIDES_DIR) and is_html(path) and not in_assets_dir(path)


def _load_archive_slide(entries: ZipEntries, path: str, stem: str) -> Optional[tuple[str, list[Asset]]]:
    html = entries.read_text(path)
    if html is None:
        return None
    return html, entries.resolve_assets(path, html, slide_name=stem)


def import_from_archive(data: bytes, source_path: Optional[str] = None) -> Project:
    """Read a project archive. Raises FormatError if `data` is not a readable archive."""
    with ZipEntries.open(data) as entries:
        meta = read_metadata(entries.read_text)
        candidates = []
        for path in entries.names:
            if not _is_archive_slide(path):
                continue
            filename = path[len(SLIDES_DIR):]
            loader = partial(_load_archive_slide, entries, path, strip_html_suffix(filename))
            candidates.append(HtmlCandidate(filename, loader))
        project = build_project(meta, candidates, source_path)

    logger.info(f"Imported archive project '{project.name}' with {len(project.slides)} slides")
    return project


# ── Flat file collection ───────────────────────────────────────────────

def _as_text(content: bytes | str) -> str:
    return decode_text(content) if isinstance(content, bytes) else content


def _load_file_slide(content: bytes | str) -> tuple[str, list[Asset]]:
    return _as_text(content), []


def _depth(path: str) -> int:
    return path.replace("\\", "/").strip("/").count("/")


def import_from_file_set(files: FileSet, source_path: Optional[str] = None) -> Project:
    """Read a project from named files, e.g. the contents of an opened folder.

    Files are matched by basename, shallowest path first. Slide assets are
    left empty; resolving them is up to the caller.
    """
    items = files.items() if isinstance(files, Mapping) else files
    by_name: dict[str, tuple[str, bytes | str]] = {}
    for path, content in sorted(items, key=lambda item: (_depth(item[0]), item[0])):
        name = basename(path)
        if in_assets_dir(path):
            continue
        if name.lower() in by_name:
            if is_html(name):
                logger.warning(f"Ignoring {path}: another file named {name} was already read")
            continue
        by_name[name.lower()] = (name, content)

    def read_text(entry_name: str) -> Optional[str]:
        found = by_name.get(entry_name.lower())
        return None if found is None else _as_text(found[1])

    meta = read_metadata(read_text)
    candidates = [
        HtmlCandidate(name, partial(_load_file_slide, content))
        for name, content in by_name.values()
        if is_html(name)
    ]
    project = build_project(meta, candidates, source_path)
    logger.info(f"Imported project '{project.name}' with {len(project.slides)} slides from files")
    return project
