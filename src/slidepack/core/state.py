"""Editor session state: the live project plus an undo history."""

from typing import Optional
from pydantic import BaseModel, Field

from .project import Project

MAX_UNDO = 50


class UndoEntry(BaseModel):
    """A snapshot of the project before an edit.

    Projects are immutable values, so the snapshot is the previous value itself.
    """
    description: str
    project: Optional[Project] = None


class SessionState(BaseModel):
    """State a collaborator keeps for its one open project."""
    project: Optional[Project] = None
    undo_stack: list[UndoEntry] = Field(default_factory=list)

    def checkpoint(self, description: str):
        """Save the current project to the undo stack."""
        self.undo_stack.append(UndoEntry(description=description, project=self.project))
        if len(self.undo_stack) > MAX_UNDO:
            self.undo_stack = self.undo_stack[-MAX_UNDO:]

    def apply(self, description: str, project: Project) -> Project:
        """Checkpoint, then make `project` the current one."""
        self.checkpoint(description)
        self.project = project
        return project

    def undo(self) -> Optional[str]:
        """Revert to the last checkpoint. Returns description of what was undone."""
        if not self.undo_stack:
            return None
        entry = self.undo_stack.pop()
        self.project = entry.project
        return entry.description
