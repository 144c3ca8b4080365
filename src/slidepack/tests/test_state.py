"""Tests for slidepack.core.state — SessionState and undo."""

from slidepack.core.project import Project
from slidepack.core.slides import Slide
from slidepack.core.state import MAX_UNDO, SessionState, UndoEntry


class TestSessionStateBasics:
    def test_default_state(self):
        state = SessionState()
        assert state.project is None
        assert state.undo_stack == []

    def test_apply_sets_project(self):
        state = SessionState()
        p = Project(name="A")
        assert state.apply("Create", p) is p
        assert state.project is p
        assert len(state.undo_stack) == 1
        assert state.undo_stack[0].project is None


# ── Undo ────────────────────────────────────────────────────────────────

class TestUndo:
    def test_undo_empty(self):
        assert SessionState().undo() is None

    def test_undo_restores_previous_value(self):
        state = SessionState()
        p1 = state.apply("Create", Project(name="A"))
        state.apply("Add slide", p1.add_slide(Slide(name="s")))
        assert len(state.project.slides) == 1

        assert state.undo() == "Add slide"
        assert state.project is p1
        assert state.project.slides == []

    def test_undo_back_to_nothing(self):
        state = SessionState()
        state.apply("Create", Project())
        assert state.undo() == "Create"
        assert state.project is None

    def test_multiple_undos(self):
        state = SessionState()
        p = state.apply("Create", Project())
        for i in range(3):
            p = state.apply(f"Add {i}", p.add_slide(Slide(name=str(i))))
        assert state.undo() == "Add 2"
        assert state.undo() == "Add 1"
        assert len(state.project.slides) == 1

    def test_checkpoint_is_bounded(self):
        state = SessionState()
        for i in range(MAX_UNDO + 10):
            state.apply(f"step {i}", Project(name=str(i)))
        assert len(state.undo_stack) == MAX_UNDO
        assert state.undo_stack[0].description == "step 10"

    def test_snapshots_are_unaffected_by_later_edits(self):
        state = SessionState()
        p = state.apply("Create", Project(slides=[Slide(name="a")]))
        state.apply("Remove", p.remove_slide(p.slides[0].id))
        state.undo()
        assert [s.name for s in state.project.slides] == ["a"]


class TestUndoEntry:
    def test_entry(self):
        e = UndoEntry(description="x")
        assert e.project is None
