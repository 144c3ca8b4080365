"""Asset model — a resource referenced from a slide's HTML."""

from typing import Literal
from pydantic import BaseModel, ConfigDict

AssetType = Literal["image", "css", "js", "other"]

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "svg", "webp"}


def infer_asset_type(filename: str) -> AssetType:
    """Infer the asset type from the file extension only (case-insensitive)."""
    path = filename.split("?", 1)[0].split("#", 1)[0]
    ext = path.rsplit(".", 1)[-1].lower() if "." in path else ""
    if ext in IMAGE_EXTENSIONS:
        return "image"
    if ext == "css":
        return "css"
    if ext == "js":
        return "js"
    return "other"


class Asset(BaseModel):
    """A file referenced by a slide.

    `filename` is the path exactly as it appeared in the src/href attribute.
    Empty `content` means the resource was not found; that is a valid state.
    """
    model_config = ConfigDict(frozen=True)

    filename: str
    content: bytes | str = b""
    type: AssetType = "other"

    @classmethod
    def unresolved(cls, filename: str) -> "Asset":
        return cls(filename=filename, type=infer_asset_type(filename))

    @property
    def is_resolved(self) -> bool:
        return len(self.content) > 0
