"""Archive package — reading, writing and the standalone player."""

from .player import generate_player
from .reader import import_from_archive, import_from_file_set, reconcile_order
from .writer import ArchiveMode, build_entries, export_project, save_project, write_archive

__all__ = [
    "ArchiveMode",
    "build_entries",
    "export_project",
    "generate_player",
    "import_from_archive",
    "import_from_file_set",
    "reconcile_order",
    "save_project",
    "write_archive",
]
