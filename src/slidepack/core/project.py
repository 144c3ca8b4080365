"""Project and project configuration models."""

from datetime import date, datetime, timezone
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from .slides import Slide, new_id

DEFAULT_PROJECT_NAME = "Untitled Project"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _today() -> str:
    return date.today().isoformat()


class ThemeColors(BaseModel):
    """The eight colour roles of a project palette.

    Values are passed through to the stylesheet untouched. Wire names follow
    the editor's config.json (primaryColor, textPrimary, ...).
    """
    model_config = ConfigDict(populate_by_name=True)

    primary: str = Field("#1976d2", alias="primaryColor")
    secondary: str = Field("#dc004e", alias="secondaryColor")
    accent: str = Field("#00bcd4", alias="accentColor")
    background: str = Field("#ffffff", alias="backgroundColor")
    surface: str = Field("#f5f5f5", alias="surfaceColor")
    text_primary: str = Field("#212121", alias="textPrimary")
    text_secondary: str = Field("#757575", alias="textSecondary")
    border: str = Field("#e0e0e0", alias="borderColor")


class PlaybackSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auto_play: bool = Field(False, alias="autoPlay")
    loop: bool = False
    show_controls: bool = Field(True, alias="showControls")
    transition: Literal["fade", "slide", "none"] = "fade"


class ManifestEntry(BaseModel):
    """One line of the ordering manifest: which file, its title, its duration."""
    file: str
    title: str = ""
    duration: float = 0


class ProjectConfig(BaseModel):
    """Human-editable project metadata stored as config.json.

    `slides` is the ordering manifest. It expresses intended order and
    per-file titles and is consulted only when a project is read back.
    Unknown top-level keys are kept so a load/save cycle does not drop them.
    """
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str = ""
    description: str = ""
    author: str = ""
    company: str = ""
    version: str = "1.0.0"
    created: str = Field(default_factory=_today)
    modified: str = Field(default_factory=_today)
    theme_colors: ThemeColors = Field(default_factory=ThemeColors, alias="themeColors")
    settings: PlaybackSettings = Field(default_factory=PlaybackSettings)
    slides: list[ManifestEntry] = Field(default_factory=list)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)

    def duration_for(self, filename: str) -> float:
        """Manifest duration for a slide file, 0 when unlisted."""
        wanted = filename.casefold()
        for entry in self.slides:
            if entry.file.casefold() == wanted:
                return entry.duration
        return 0


def renumber(slides: list[Slide]) -> list[Slide]:
    """Return slides whose `order` equals their position."""
    return [
        s if s.order == i else s.model_copy(update={"order": i})
        for i, s in enumerate(slides)
    ]


class Project(BaseModel):
    """A named, ordered deck of slides with optional theme and metadata.

    Projects are values: every edit returns a new Project with the slide
    sequence renumbered so that `slides[i].order == i`.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = DEFAULT_PROJECT_NAME
    slides: list[Slide] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    config: Optional[ProjectConfig] = None
    theme: Optional[str] = None
    source_path: Optional[str] = Field(default=None, exclude=True)

    @field_validator("slides")
    @classmethod
    def _renumber_slides(cls, slides: list[Slide]) -> list[Slide]:
        return renumber(slides)

    # ── Queries ──────────────────────────────────────────────────────────

    def get_slide(self, slide_id: str) -> Optional[Slide]:
        for s in self.slides:
            if s.id == slide_id:
                return s
        return None

    def index_of(self, slide_id: str) -> Optional[int]:
        for i, s in enumerate(self.slides):
            if s.id == slide_id:
                return i
        return None

    # ── Edits (copy-on-write) ────────────────────────────────────────────

    def _with(self, **update) -> "Project":
        if "slides" in update:
            update["slides"] = renumber(update["slides"])
        update.setdefault("updated_at", utc_now())
        return self.model_copy(update=update)

    def add_slide(self, slide: Slide, index: Optional[int] = None) -> "Project":
        slides = list(self.slides)
        if index is None:
            slides.append(slide)
        else:
            slides.insert(max(0, min(index, len(slides))), slide)
        return self._with(slides=slides)

    def add_slides(self, new_slides: list[Slide]) -> "Project":
        return self._with(slides=[*self.slides, *new_slides])

    def remove_slide(self, slide_id: str) -> Optional["Project"]:
        slides = [s for s in self.slides if s.id != slide_id]
        if len(slides) == len(self.slides):
            return None
        return self._with(slides=slides)

    def move_slide(self, slide_id: str, new_index: int) -> Optional["Project"]:
        idx = self.index_of(slide_id)
        if idx is None:
            return None
        slides = list(self.slides)
        slide = slides.pop(idx)
        slides.insert(max(0, min(new_index, len(slides))), slide)
        return self._with(slides=slides)

    def reorder_slides(self, slide_id_list: list[str]) -> Optional["Project"]:
        id_to_slide = {s.id: s for s in self.slides}
        if len(slide_id_list) != len(self.slides) or set(slide_id_list) != set(id_to_slide):
            return None
        return self._with(slides=[id_to_slide[sid] for sid in slide_id_list])

    def update_slide(self, slide: Slide) -> Optional["Project"]:
        idx = self.index_of(slide.id)
        if idx is None:
            return None
        slides = list(self.slides)
        slides[idx] = slide
        return self._with(slides=slides)

    def with_config(self, config: Optional[ProjectConfig]) -> "Project":
        name = config.title if config and config.title else self.name
        return self._with(config=config, name=name)

    def with_theme(self, theme: Optional[str]) -> "Project":
        return self._with(theme=theme or None)

    def with_manifest_synced(self) -> "Project":
        """Rewrite the config manifest to match the current slide order."""
        config = self.config or ProjectConfig(title=self.name)
        entries = [
            ManifestEntry(
                file=s.filename,
                title=s.name,
                duration=config.duration_for(s.filename),
            )
            for s in self.slides
        ]
        return self._with(config=config.model_copy(update={"slides": entries}))

    def to_summary(self) -> list[dict]:
        return [
            {
                "id": s.id,
                "order": s.order,
                "name": s.name,
                "html_length": len(s.html),
                "asset_count": len(s.assets),
                "resolved_assets": len(s.resolved_assets),
            }
            for s in self.slides
        ]
