"""Tests for slidepack_mcp.server — MCP tools driven directly, without a client."""

import io
import json
import zipfile

import pytest

from slidepack.core.state import SessionState
from slidepack_mcp import server


@pytest.fixture(autouse=True)
def fresh_session(monkeypatch, tmp_path):
    monkeypatch.setattr(server, "_session_state", SessionState())
    monkeypatch.setattr(server, "DEFAULT_PROJECTS_DIR", str(tmp_path / "projects"))


@pytest.fixture
def html_files(tmp_path):
    src = tmp_path / "src"
    (src / "img").mkdir(parents=True)
    (src / "img" / "logo.png").write_bytes(b"PNG")
    (src / "intro.html").write_text('<img src="img/logo.png"><img src="https://x.test/a.png">')
    (src / "outro.html").write_text("<p>bye</p>")
    return [str(src / "intro.html"), str(src / "outro.html")]


def slide_ids() -> list[str]:
    return [s.id for s in server._session_state.project.slides]


# ── Project tools ───────────────────────────────────────────────────────

class TestProjectTools:
    def test_no_project(self):
        assert json.loads(server.get_project_status(None))["project_loaded"] is False
        assert server.save_project(None).startswith("Error")
        assert server.get_slides(None).startswith("Error")

    def test_create_project(self):
        status = json.loads(server.create_project(None, "Launch"))
        assert status["name"] == "Launch"
        assert status["slide_count"] == 0

    def test_set_project_config(self):
        server.create_project(None)
        result = json.loads(server.set_project_config(None, '{"title": "Renamed"}'))
        assert result["name"] == "Renamed"
        assert result["config"]["themeColors"]["primaryColor"] == "#1976d2"

    def test_set_project_config_invalid(self):
        server.create_project(None)
        assert server.set_project_config(None, "{oops").startswith("Error")

    def test_set_and_clear_theme(self, tmp_path):
        server.create_project(None)
        css = tmp_path / "theme.css"
        css.write_text("h1{}")
        server.set_theme(None, file_path=str(css))
        assert server._session_state.project.theme == "h1{}"
        server.clear_theme(None)
        assert server._session_state.project.theme is None
        assert server.set_theme(None).startswith("Error")


# ── Slide tools ─────────────────────────────────────────────────────────

class TestSlideTools:
    def test_import_html_files_resolves_local_assets(self, html_files):
        result = json.loads(server.import_html_files(None, html_files))
        assert result["added"] == ["intro", "outro"]
        intro = result["slides"][0]
        assert intro["asset_count"] == 2
        assert intro["resolved_assets"] == 1

    def test_import_skips_non_html(self, tmp_path):
        other = tmp_path / "notes.txt"
        other.write_text("x")
        assert server.import_html_files(None, [str(other)]).startswith("Error")

    def test_import_slide_bundle(self, tmp_path):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, "w") as zf:
            zf.writestr("one.html", "1")
            zf.writestr("two.html", "2")
        bundle = tmp_path / "bundle.zip"
        bundle.write_bytes(buf.getvalue())
        result = json.loads(server.import_slide_bundle(None, str(bundle)))
        assert result["added"] == ["one", "two"]

    def test_edit_tools(self, html_files):
        server.import_html_files(None, html_files)
        intro, outro = slide_ids()

        server.update_slide_html(None, intro, "<h1>hi</h1>")
        assert json.loads(server.get_slide(None, intro))["html"] == "<h1>hi</h1>"

        server.rename_slide(None, outro, "finale")
        assert json.loads(server.get_slide(None, outro))["name"] == "finale"

        moved = json.loads(server.move_slide(None, outro, 0))
        assert [s["id"] for s in moved["slides"]] == [outro, intro]

        reordered = json.loads(server.reorder_slides(None, [intro, outro]))
        assert [s["id"] for s in reordered["slides"]] == [intro, outro]

        server.remove_slide(None, intro)
        assert slide_ids() == [outro]

    def test_unknown_slide(self):
        server.create_project(None)
        assert server.get_slide(None, "nope").startswith("Error")
        assert server.remove_slide(None, "nope").startswith("Error")
        assert server.reorder_slides(None, ["nope"]).startswith("Error")

    def test_preview_slide(self, html_files):
        server.import_html_files(None, html_files)
        server.set_theme(None, css="p{}")
        preview = server.preview_slide(None, slide_ids()[1])
        assert "<style>p{}</style>" in preview

    def test_undo(self, html_files):
        server.import_html_files(None, html_files)
        server.remove_slide(None, slide_ids()[0])
        assert server.undo(None).startswith("Undone: Remove slide")
        assert len(slide_ids()) == 2


# ── Archives ────────────────────────────────────────────────────────────

class TestArchiveTools:
    def test_save_and_open(self, html_files, tmp_path):
        server.import_html_files(None, html_files)
        server.sync_manifest(None)
        server.move_slide(None, slide_ids()[1], 0)
        server.sync_manifest(None)
        target = tmp_path / "out" / "deck.zip"
        assert "saved" in server.save_project(None, str(target))

        server.create_project(None, "Other")
        status = json.loads(server.open_archive(None, str(target)))
        assert status["slide_count"] == 2
        assert status["resolved_asset_count"] == 1
        assert status["source_path"] == str(target)
        names = [s["name"] for s in json.loads(server.get_slides(None))]
        assert names == ["outro", "intro"]

    def test_default_save_location(self, html_files, tmp_path):
        server.import_html_files(None, html_files)
        server.save_project(None)
        assert (tmp_path / "projects" / "New Project.zip").is_file()

    def test_export(self, html_files, tmp_path):
        server.import_html_files(None, html_files)
        target = tmp_path / "player.zip"
        assert "exported" in server.export_project(None, str(target))
        with zipfile.ZipFile(target) as zf:
            assert "index.html" in zf.namelist()

    def test_export_empty(self):
        server.create_project(None)
        assert server.export_project(None).startswith("Error")

    def test_open_bad_archive(self, tmp_path):
        bad = tmp_path / "bad.zip"
        bad.write_bytes(b"nope")
        assert server.open_archive(None, str(bad)).startswith("Error opening archive")
        assert server.open_archive(None, str(tmp_path / "missing.zip")).startswith("Error reading")

    def test_open_folder(self, tmp_path):
        folder = tmp_path / "deck"
        (folder / "slides").mkdir(parents=True)
        (folder / "config.json").write_text(json.dumps({"title": "Folder", "slides": [{"file": "b.html"}]}))
        (folder / "slides" / "a.html").write_text("a")
        (folder / "slides" / "b.html").write_text("b")
        status = json.loads(server.open_folder(None, str(folder)))
        assert status["name"] == "Folder"
        names = [s["name"] for s in json.loads(server.get_slides(None))]
        assert names == ["b", "a"]

    def test_open_folder_missing(self, tmp_path):
        assert server.open_folder(None, str(tmp_path / "nope")).startswith("Error")
