"""
Rendering tests: draw frames on a recording console and inspect the text.
"""

import io

import pytest
from rich.console import Console

from conftest import SITE_URL, make_article
from ptlk.api import FetchResult
from ptlk.model import ListModel
from ptlk.screen import BANNER_HEIGHT, Frame, popup_geometry, render_footer


def draw(model, width=80, height=24):
    console = Console(
        file=io.StringIO(),
        width=width,
        height=height,
        record=True,
        color_system=None,
        legacy_windows=False,
    )
    console.print(Frame(model, SITE_URL))
    return console.export_text().splitlines()


class TestFrame:
    def test_frame_fills_terminal(self, model):
        lines = draw(model)
        assert len(lines) == 24

    def test_banner_then_content_then_footer(self, model):
        lines = draw(model)
        assert "██████╗" in lines[1]
        assert lines[BANNER_HEIGHT].startswith("[Tech] Article 1")
        assert lines[BANNER_HEIGHT + 1].startswith("   Source 1 • 2024-01-01 00:00")
        assert lines[-1].startswith("j/↓ Down k/↑ Up Enter Open Space Toggle q Quit")

    def test_site_row_is_drawn(self, model):
        lines = draw(model)
        assert any(f"Want more? Visit {SITE_URL} ↗" in line for line in lines)

    def test_loading_placeholder(self):
        lines = draw(ListModel())
        assert lines[BANNER_HEIGHT].startswith("Loading articles...")

    def test_load_error_screen(self):
        model = ListModel()
        model.load(FetchResult(error="HTTP 500"))
        lines = draw(model)
        assert lines[BANNER_HEIGHT].startswith("Failed to load articles")
        assert lines[BANNER_HEIGHT + 2].startswith("HTTP 500")
        assert lines[BANNER_HEIGHT + 4].startswith("Press 'r' to retry or 'q' to quit")

    def test_same_state_draws_same_frame(self, model):
        assert draw(model) == draw(model)

    def test_scrolls_to_selection(self):
        model = ListModel()
        model.load(FetchResult(articles=[make_article(n % 9 + 1, title=f"Story {n}") for n in range(20)]))
        model.go_to_last()
        lines = draw(model)
        assert any("Want more? Visit" in line for line in lines)
        assert not any(line.startswith("[Tech] Story 0 ") or line == "[Tech] Story 0" for line in lines)
        assert model.offset > 0

    def test_long_title_is_cropped(self):
        model = ListModel()
        model.load(FetchResult(articles=[make_article(1, title="y" * 200)]))
        lines = draw(model, width=60)
        assert all(len(line) <= 60 for line in lines)


class TestErrorPopup:
    def test_geometry(self):
        assert popup_geometry(80, 24) == (15, 9, 50, 5)
        assert popup_geometry(40, 20) == (2, 7, 36, 5)

    @pytest.mark.parametrize("width,height", [(5, 24), (80, 3)])
    def test_geometry_too_small(self, width, height):
        assert popup_geometry(width, height) is None

    def test_popup_drawn_centered(self, model):
        model.last_error = "Failed to open browser: no browser available"
        lines = draw(model)
        top = lines[9]
        assert top[15] == "╭"
        assert "Error" in top
        assert "Failed to open browser" in lines[10]
        assert lines[13][15] == "╰"
        assert lines[13][64] == "╯"

    def test_no_popup_without_error(self, model):
        lines = draw(model)
        assert not any("Error" in line for line in lines)


def test_footer_text():
    assert render_footer().plain == "j/↓ Down k/↑ Up Enter Open Space Toggle q Quit"
