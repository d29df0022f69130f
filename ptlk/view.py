from __future__ import annotations

from dataclasses import dataclass

from ptlk.api import Article
from ptlk.model import ListModel, Loaded, LoadError, Loading
from ptlk.wrapping import wrap_text

INDENT = "   "
MIN_CONTENT_WIDTH = 20
CONTENT_WIDTH_RATIO = 0.85

TAG_STYLE = "white"
TITLE_STYLE = "bold"
META_STYLE = "bright_black"
SUMMARY_STYLE = "white"
PLACEHOLDER_STYLE = "bright_black italic"
URL_STYLE = "bright_black underline"
HINT_STYLE = "bright_white"
LINK_STYLE = "blue underline"

Span = tuple[str, str]


@dataclass(frozen=True)
class Row:
    kind: str
    spans: tuple[Span, ...] = ()
    index: int | None = None

    @property
    def text(self) -> str:
        return "".join(text for text, _ in self.spans)


def blank_row(index: int | None = None) -> Row:
    return Row("blank", (), index)


def indented_row(kind: str, text: str, style: str, index: int | None) -> Row:
    return Row(kind, ((INDENT, ""), (text, style)), index)


def format_time(iso_time: str) -> str:
    if len(iso_time) >= 16:
        return f"{iso_time[0:10]} {iso_time[11:16]}"
    return iso_time


def content_width(terminal_width: int) -> int:
    return max(int(terminal_width * CONTENT_WIDTH_RATIO), MIN_CONTENT_WIDTH)


def article_rows(article: Article, index: int, expanded: bool, width: int) -> list[Row]:
    rows = [
        Row(
            "header",
            ((f"[{article.tag}]", TAG_STYLE), (" ", ""), (article.title, TITLE_STYLE)),
            index,
        ),
        indented_row(
            "meta",
            f"{article.source} • {format_time(article.published_at)}",
            META_STYLE,
            index,
        ),
    ]
    if not expanded:
        return rows

    text_width = max(width - 3, 0)
    rows.append(blank_row(index))
    if not article.summary:
        rows.append(indented_row("summary", "No summary available", PLACEHOLDER_STYLE, index))
    else:
        for line in wrap_text(article.summary, text_width):
            rows.append(indented_row("summary", line, SUMMARY_STYLE, index))
    rows.append(blank_row(index))
    for line in wrap_text(f"URL: {article.url}", text_width):
        rows.append(indented_row("url", line, URL_STYLE, index))
    rows.append(indented_row("hint", "Press Enter to open in browser", HINT_STYLE, index))
    return rows


def site_rows(site_url: str, index: int) -> list[Row]:
    return [
        blank_row(index),
        Row(
            "site",
            ((INDENT, ""), ("Want more? Visit ", ""), (f"{site_url} ↗", LINK_STYLE)),
            index,
        ),
        blank_row(index),
    ]


def compose_rows(model: ListModel, width: int, site_url: str) -> list[Row]:
    state = model.loading_state
    if isinstance(state, Loading):
        return [Row("info", (("Loading articles...", "white"),))]
    if isinstance(state, LoadError):
        return [
            Row("error-title", (("Failed to load articles", "bright_white bold"),)),
            blank_row(),
            Row("error-message", ((state.message, "bright_black"),)),
            blank_row(),
            Row("hint", (("Press 'r' to retry or 'q' to quit", ""),)),
        ]
    if not isinstance(state, Loaded):
        raise TypeError(f"Unknown loading state: {state!r}")

    rows: list[Row] = []
    for index, article in enumerate(model.items):
        rows.extend(article_rows(article, index, index in model.expanded, width))
    rows.extend(site_rows(site_url, model.trailing_index))
    return rows


def visible_rows(
    rows: list[Row],
    selected: int | None,
    height: int,
    offset: int = 0,
) -> tuple[list[Row], int]:
    """Window ``rows`` to ``height`` lines, keeping the selected item in view.

    Rows are grouped by ``Row.index``; ``offset`` is the first group drawn and
    is returned adjusted so callers can carry it into the next frame.
    """
    if height <= 0 or not rows:
        return [], 0

    groups: list[int] = []
    sizes: dict[int, int] = {}
    for row in rows:
        if row.index is None:
            return rows[:height], 0
        if row.index not in sizes:
            groups.append(row.index)
            sizes[row.index] = 0
        sizes[row.index] += 1

    offset = max(0, min(offset, groups[-1]))
    if selected is not None and selected in sizes:
        if selected < offset:
            offset = selected
        position = groups.index(selected)
        start = groups.index(offset) if offset in sizes else 0
        while start < position and sum(sizes[g] for g in groups[start : position + 1]) > height:
            start += 1
        offset = groups[start]

    first = next(i for i, row in enumerate(rows) if row.index is not None and row.index >= offset)
    return rows[first : first + height], offset
