"""Error taxonomy for project import and export.

Only FormatError and ExportError are meant to reach callers. ConfigError and
AssetUnresolved are raised internally, logged and absorbed.
"""


class SlidePackError(Exception):
    """Base class for all slidepack errors."""


class FormatError(SlidePackError):
    """An archive could not be opened or parsed at all."""


class ConfigError(SlidePackError):
    """A config entry exists but is malformed."""


class AssetUnresolved(SlidePackError):
    """A referenced asset could not be located."""

    def __init__(self, filename: str, message: str = ""):
        self.filename = filename
        super().__init__(message or f"Asset not found: {filename}")


class ExportError(SlidePackError):
    """Assembling output bytes failed; no partial archive is returned."""
