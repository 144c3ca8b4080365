"""slidepack — package HTML slide decks as editable or self-playing archives."""

from .archive import export_project, import_from_archive, import_from_file_set, save_project
from .core.project import Project, ProjectConfig
from .core.slides import Asset, Slide
from .errors import AssetUnresolved, ConfigError, ExportError, FormatError

__all__ = [
    "Asset",
    "AssetUnresolved",
    "ConfigError",
    "ExportError",
    "FormatError",
    "Project",
    "ProjectConfig",
    "Slide",
    "export_project",
    "import_from_archive",
    "import_from_file_set",
    "save_project",
]
