"""Slides package — public API re-exports."""

from .asset import Asset, AssetType, infer_asset_type
from .slide import Slide, file_stem, new_id

__all__ = [
    "Asset",
    "AssetType",
    "Slide",
    "file_stem",
    "infer_asset_type",
    "new_id",
]
