"""Slide data model."""

import uuid
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from .asset import Asset


def new_id() -> str:
    return uuid.uuid4().hex[:8]


FALLBACK_FILE_STEM = "slide"


def file_stem(name: str) -> str:
    """A slide name made safe for use as a single path segment.

    Path separators become underscores, so the result never leaves the
    directory it is written to.
    """
    stem = name.replace("/", "_").replace("\\", "_").strip()
    if stem in ("", ".", ".."):
        return FALLBACK_FILE_STEM
    return stem


class Slide(BaseModel):
    """One HTML document plus the local resources it references.

    Slides are immutable; edits go through `model_copy(update=...)` or the
    `Project` edit operations, which renumber `order`.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_id)
    name: str = ""
    html: str = ""
    order: int = 0
    assets: list[Asset] = Field(default_factory=list)
    thumbnail: Optional[str] = None

    @property
    def filename(self) -> str:
        """Entry filename used inside archives."""
        return f"{file_stem(self.name)}.html"

    @property
    def resolved_assets(self) -> list[Asset]:
        return [a for a in self.assets if a.is_resolved]
