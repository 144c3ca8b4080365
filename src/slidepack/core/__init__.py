"""Core data model: projects, slides, assets and editor session state."""
