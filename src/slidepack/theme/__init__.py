"""Theme package — public API re-exports."""

from .compiler import (
    apply_project_theme,
    compile_palette,
    inject_stylesheet,
    render_preview,
    strip_theme_links,
    stylesheet_for,
)

__all__ = [
    "apply_project_theme",
    "compile_palette",
    "inject_stylesheet",
    "render_preview",
    "strip_theme_links",
    "stylesheet_for",
]
