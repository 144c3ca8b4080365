"""Theme compilation and stylesheet injection.

Two sources can style a slide: a free-form stylesheet the user supplied
(`Project.theme`) or a palette (`ProjectConfig.theme_colors`) compiled into
CSS. The free-form stylesheet wins when both exist.
"""

import re
from pathlib import Path
from typing import Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..core.project import Project, ThemeColors
from ..core.slides import Slide

TEMPLATE_DIR = Path(__file__).parent / "templates"
HEAD_CLOSE = "</head>"
PREVIEW_TITLE = "Slide Preview"

THEME_LINK_RE = re.compile(
    r"""<link[^>]*href=["'](?:\.\./)?theme\.css["'][^>]*>""", re.IGNORECASE
)

_env = Environment(
    loader=FileSystemLoader(TEMPLATE_DIR),
    autoescape=select_autoescape(["html"]),
)


def compile_palette(colors: ThemeColors) -> str:
    """Render the base stylesheet with each colour role as a custom property."""
    return _env.get_template("palette.css").render(colors=colors)


def inject_stylesheet(html: str, stylesheet: str) -> str:
    """Add `stylesheet` to a slide document.

    A full document gets a <style> block right before its first </head>.
    Anything else is treated as a body fragment and wrapped in a minimal
    document. Calling this twice stacks two style blocks.
    """
    style = f"<style>{stylesheet}</style>"
    if HEAD_CLOSE in html:
        return html.replace(HEAD_CLOSE, style + HEAD_CLOSE, 1)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        '  <meta charset="UTF-8">\n'
        '  <meta name="viewport" content="width=device-width, initial-scale=1.0">\n'
        f"  <title>{PREVIEW_TITLE}</title>\n"
        f"  {style}\n"
        "</head>\n"
        "<body>\n"
        f"{html}\n"
        "</body>\n"
        "</html>"
    )


def stylesheet_for(project: Project) -> Optional[str]:
    """The stylesheet that applies to a project's slides, if any."""
    if project.theme:
        return project.theme
    if project.config is not None and project.config.theme_colors is not None:
        return compile_palette(project.config.theme_colors)
    return None


def apply_project_theme(html: str, project: Project) -> str:
    """Inject the project's stylesheet into `html`, or return it unchanged."""
    stylesheet = stylesheet_for(project)
    if stylesheet is None:
        return html
    return inject_stylesheet(html, stylesheet)


def strip_theme_links(html: str) -> str:
    """Remove <link> tags pointing at theme.css or ../theme.css."""
    return THEME_LINK_RE.sub("", html)


def render_preview(slide: Slide, project: Project) -> str:
    """HTML for previewing a slide with the project theme applied inline."""
    return apply_project_theme(strip_theme_links(slide.html), project)
