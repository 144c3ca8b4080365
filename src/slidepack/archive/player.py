"""Standalone player page for exported projects."""

from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.project import PlaybackSettings, Project

TEMPLATE_DIR = Path(__file__).parent / "templates"

SWIPE_THRESHOLD_PX = 50
WHEEL_DEBOUNCE_MS = 50
DEFAULT_SLIDE_SECONDS = 5

PEN_COLORS = [
    {"name": "red", "value": "#f44336"},
    {"name": "blue", "value": "#2196f3"},
    {"name": "green", "value": "#4caf50"},
    {"name": "yellow", "value": "#ff9800"},
]

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def generate_player(project: Project) -> str:
    """Render index.html for a project's ordered slides.

    The page loads `slides/<name>.html` into a frame and carries all of its
    own navigation and annotation script. An empty project renders a shell
    with navigation disabled.
    """
    filenames = [s.filename for s in project.slides]
    config = project.config
    settings = config.settings if config is not None else PlaybackSettings()
    durations = [config.duration_for(f) if config is not None else 0 for f in filenames]

    return _env.get_template("player.html").render(
        title=project.name,
        slides=filenames,
        first_slide=filenames[0] if filenames else None,
        durations=durations,
        settings=settings,
        colors=PEN_COLORS,
        default_seconds=DEFAULT_SLIDE_SECONDS,
        swipe_threshold=SWIPE_THRESHOLD_PX,
        wheel_debounce_ms=WHEEL_DEBOUNCE_MS,
    )
