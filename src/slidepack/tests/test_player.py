"""Tests for slidepack.archive.player — the generated standalone index.html."""

from slidepack.archive.player import PEN_COLORS, generate_player
from slidepack.core.project import ManifestEntry, PlaybackSettings, Project, ProjectConfig
from slidepack.core.slides import Slide


def deck(*names: str, **kwargs) -> Project:
    return Project(name="Deck", slides=[Slide(name=n) for n in names], **kwargs)


class TestPlayerPage:
    def test_title_and_first_slide(self):
        html = generate_player(deck("intro", "outro"))
        assert "<title>Deck - Player</title>" in html
        assert 'src="slides/intro.html"' in html
        assert 'const slides = ["intro.html", "outro.html"];' in html

    def test_first_slide_url_is_encoded(self):
        html = generate_player(Project(slides=[Slide(name="Q&A #1")]))
        assert 'src="slides/Q%26A%20%231.html"' in html
        assert "encodeURIComponent(slides[index])" in html

    def test_title_is_escaped(self):
        html = generate_player(Project(name="R&D <2024>", slides=[Slide(name="a")]))
        assert "<title>R&amp;D &lt;2024&gt; - Player</title>" in html

    def test_pen_colors(self):
        html = generate_player(deck("a"))
        for color in PEN_COLORS:
            assert color["value"] in html

    def test_single_slide_disables_navigation(self):
        html = generate_player(deck("only"))
        assert 'title="Previous" disabled' in html
        assert 'title="Next" disabled' in html

    def test_multiple_slides_enable_navigation(self):
        html = generate_player(deck("a", "b"))
        assert 'title="Next" disabled' not in html

    def test_deterministic(self):
        p = deck("a", "b")
        assert generate_player(p) == generate_player(p)


# ── Empty deck ──────────────────────────────────────────────────────────

class TestEmptyDeck:
    def test_placeholder(self):
        html = generate_player(Project(name="Empty"))
        assert 'id="emptyDeck"' in html
        assert 'id="slideFrame"' not in html
        assert "const slides = [];" in html


# ── Playback settings ──────────────────────────────────────────────────

class TestPlaybackSettings:
    def test_defaults_without_config(self):
        html = generate_player(deck("a"))
        assert "autoPlay: false" in html
        assert "loop: false" in html
        assert "controls-hidden" in html  # stylesheet rule only
        assert 'class="controls-hidden"' not in html

    def test_settings_from_config(self):
        config = ProjectConfig(settings=PlaybackSettings(auto_play=True, loop=True, show_controls=False))
        html = generate_player(deck("a", config=config))
        assert "autoPlay: true" in html
        assert "loop: true" in html
        assert '<body class="controls-hidden">' in html

    def test_durations_from_manifest(self):
        config = ProjectConfig(slides=[ManifestEntry(file="a.html", duration=3)])
        html = generate_player(deck("a", "b", config=config))
        assert "const durations = [3.0, 0];" in html
