from __future__ import annotations

from rich.console import Console, ConsoleOptions, RenderResult
from rich.layout import Layout
from rich.panel import Panel
from rich.segment import Segment
from rich.style import Style
from rich.text import Text

from ptlk.model import ListModel
from ptlk.view import Row, compose_rows, content_width, visible_rows

BANNER = r"""
██████╗  ██████╗ ████████╗██╗     ██╗   ██╗ ██████╗██╗  ██╗
██╔══██╗██╔═══██╗╚══██╔══╝██║     ██║   ██║██╔════╝██║ ██╔╝
██████╔╝██║   ██║   ██║   ██║     ██║   ██║██║     █████╔╝
██╔═══╝ ██║   ██║   ██║   ██║     ██║   ██║██║     ██╔═██╗
██║     ╚██████╔╝   ██║   ███████╗╚██████╔╝╚██████╗██║  ██╗
╚═╝      ╚═════╝    ╚═╝   ╚══════╝ ╚═════╝  ╚═════╝╚═╝  ╚═╝
"""
BANNER_HEIGHT = 8
FOOTER_HEIGHT = 1
POPUP_MAX_WIDTH = 50
POPUP_HEIGHT = 5

BANNER_STYLE = "white bold"
HIGHLIGHT_STYLE = Style(color="black", bgcolor="white", bold=True)
KEY_STYLE = "bright_white"

FOOTER_BINDINGS = (
    ("j/↓", "Down"),
    ("k/↑", "Up"),
    ("Enter", "Open"),
    ("Space", "Toggle"),
    ("q", "Quit"),
)


def render_banner() -> Text:
    return Text(BANNER.rstrip("\n"), style=BANNER_STYLE, no_wrap=True, overflow="crop")


def render_footer() -> Text:
    footer = Text(no_wrap=True, overflow="crop")
    for position, (key, label) in enumerate(FOOTER_BINDINGS):
        footer.append(key, style=KEY_STYLE)
        trailing = " " if position < len(FOOTER_BINDINGS) - 1 else ""
        footer.append(f" {label}{trailing}")
    return footer


def render_row(row: Row, width: int, highlighted: bool) -> Text:
    line = Text.assemble(*row.spans, no_wrap=True, overflow="crop")
    if highlighted:
        line.truncate(width, overflow="crop", pad=True)
        line.stylize(HIGHLIGHT_STYLE)
    else:
        line.truncate(width, overflow="crop")
    return line


class ArticleList:
    def __init__(self, model: ListModel, site_url: str) -> None:
        self.model = model
        self.site_url = site_url

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height if options.height is not None else options.size.height
        rows = compose_rows(self.model, content_width(width), self.site_url)
        shown, self.model.offset = visible_rows(rows, self.model.selected, height, self.model.offset)
        lines = [
            render_row(row, width, row.index is not None and row.index == self.model.selected)
            for row in shown
        ]
        yield Text("\n", no_wrap=True, overflow="crop").join(lines)


def build_layout(model: ListModel, site_url: str) -> Layout:
    layout = Layout(name="root")
    layout.split_column(
        Layout(render_banner(), name="banner", size=BANNER_HEIGHT),
        Layout(ArticleList(model, site_url), name="content"),
        Layout(render_footer(), name="footer", size=FOOTER_HEIGHT),
    )
    return layout


def popup_geometry(width: int, height: int) -> tuple[int, int, int, int] | None:
    popup_width = min(POPUP_MAX_WIDTH, width - 4)
    if popup_width < 3 or height < POPUP_HEIGHT:
        return None
    return (width - popup_width) // 2, (height - POPUP_HEIGHT) // 2, popup_width, POPUP_HEIGHT


def render_error_popup(message: str, width: int) -> Panel:
    return Panel(
        Text(message, style="bright_white"),
        title="Error",
        title_align="left",
        border_style="white",
        width=width,
        height=POPUP_HEIGHT,
    )


def overlay(
    lines: list[list[Segment]],
    patch: list[list[Segment]],
    x: int,
    y: int,
    total_width: int,
) -> list[list[Segment]]:
    out = list(lines)
    for offset, patch_line in enumerate(patch):
        row = y + offset
        if row >= len(out):
            break
        patch_width = Segment.get_line_length(patch_line)
        parts = list(Segment.divide(out[row], [x, x + patch_width, total_width]))
        right = parts[2] if len(parts) > 2 else []
        out[row] = [*parts[0], *patch_line, *right]
    return out


class Frame:
    def __init__(self, model: ListModel, site_url: str) -> None:
        self.model = model
        self.site_url = site_url

    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        width = options.max_width
        height = options.height if options.height is not None else console.size.height
        lines = console.render_lines(
            build_layout(self.model, self.site_url),
            options.update_dimensions(width, height),
        )
        if self.model.last_error:
            geometry = popup_geometry(width, height)
            if geometry is not None:
                x, y, popup_width, popup_height = geometry
                popup_lines = console.render_lines(
                    render_error_popup(self.model.last_error, popup_width),
                    options.update_dimensions(popup_width, popup_height),
                )
                lines = overlay(lines, popup_lines, x, y, width)

        new_line = Segment.line()
        for index, line in enumerate(lines):
            yield from line
            if index < len(lines) - 1:
                yield new_line
