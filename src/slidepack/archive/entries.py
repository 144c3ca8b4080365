"""Read-only view over the entries of an in-memory ZIP archive."""

import io
import logging
import zipfile
import zlib
from typing import Optional

from ..core.slides import Asset, infer_asset_type
from ..errors import AssetUnresolved, FormatError
from ..intake.references import find_references, is_remote
from .layout import asset_entry, decode_text, resolve_relative

logger = logging.getLogger("SlidePackMCP.archive.entries")


class ZipEntries:
    """File entries of a ZIP archive, read lazily one at a time."""

    def __init__(self, zf: zipfile.ZipFile):
        self._zf = zf
        self._infos = {
            info.filename: info for info in zf.infolist() if not info.is_dir()
        }

    @classmethod
    def open(cls, data: bytes) -> "ZipEntries":
        """Open archive bytes, raising FormatError if they are not a readable ZIP."""
        try:
            return cls(zipfile.ZipFile(io.BytesIO(data)))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, TypeError, ValueError, OSError) as e:
            raise FormatError(f"Not a valid project archive: {e}") from e

    @property
    def names(self) -> list[str]:
        return list(self._infos)

    def __contains__(self, path: str) -> bool:
        return path in self._infos

    def read_bytes(self, path: str) -> Optional[bytes]:
        """Entry bytes, or None when the entry is missing or unreadable."""
        info = self._infos.get(path)
        if info is None:
            return None
        try:
            return self._zf.read(info)
        except (zipfile.BadZipFile, zlib.error, NotImplementedError, RuntimeError, OSError) as e:
            logger.warning(f"Could not read archive entry {path}: {e}")
            return None

    def read_text(self, path: str) -> Optional[str]:
        data = self.read_bytes(path)
        return None if data is None else decode_text(data)

    def close(self):
        self._zf.close()

    def __enter__(self) -> "ZipEntries":
        return self

    def __exit__(self, *exc):
        self.close()

    # ── Assets ───────────────────────────────────────────────────────────

    def find_asset(self, slide_path: str, ref: str, slide_name: Optional[str] = None) -> bytes:
        """Look `ref` up next to the slide, then in the slide's `_assets` directory."""
        candidates = [resolve_relative(slide_path, ref)]
        if slide_name is not None:
            candidates.append(asset_entry(slide_name, ref))
        for path in candidates:
            if path and path in self:
                content = self.read_bytes(path)
                if content:
                    return content
        raise AssetUnresolved(ref)

    def resolve_assets(self, slide_path: str, html: str,
                       slide_name: Optional[str] = None) -> list[Asset]:
        """Scan `html` for local references and load each one from the archive.

        Remote and data-URI references are skipped. A reference that cannot be
        found is kept as an Asset with empty content.
        """
        assets = []
        for ref in find_references(html):
            if is_remote(ref):
                continue
            try:
                content = self.find_asset(slide_path, ref, slide_name)
            except AssetUnresolved as e:
                logger.debug(f"{slide_path}: {e}")
                assets.append(Asset.unresolved(ref))
                continue
            assets.append(Asset(filename=ref, content=content, type=infer_asset_type(ref)))
        return assets
