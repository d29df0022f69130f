from __future__ import annotations

from dataclasses import dataclass, field

from ptlk.api import Article, FetchResult

PAGE_STEP = 10


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Loaded:
    pass


@dataclass(frozen=True)
class LoadError:
    message: str


LoadingState = Loading | Loaded | LoadError


@dataclass
class ListModel:
    """Articles plus selection and expansion state.

    The selectable range is ``[0, len(items)]``: the extra slot after the last
    article is the "visit website" row. ``selected`` is ``None`` only while
    ``items`` is empty.
    """

    items: list[Article] = field(default_factory=list)
    selected: int | None = None
    expanded: set[int] = field(default_factory=set)
    loading_state: LoadingState = field(default_factory=Loading)
    last_error: str | None = None
    offset: int = 0

    @property
    def trailing_index(self) -> int:
        return len(self.items)

    def next(self) -> None:
        if not self.items:
            return
        if self.selected is None or self.selected >= self.trailing_index:
            self.selected = 0
        else:
            self.selected += 1

    def previous(self) -> None:
        if not self.items:
            return
        if self.selected is None:
            self.selected = 0
        elif self.selected <= 0:
            self.selected = self.trailing_index
        else:
            self.selected -= 1

    def go_to_first(self) -> None:
        if self.items:
            self.selected = 0

    def go_to_last(self) -> None:
        if self.items:
            self.selected = self.trailing_index

    def page_down(self, step: int = PAGE_STEP) -> None:
        if not self.items:
            return
        current = self.selected or 0
        self.selected = min(current + step, self.trailing_index)

    def page_up(self, step: int = PAGE_STEP) -> None:
        if not self.items:
            return
        current = self.selected or 0
        self.selected = max(current - step, 0)

    def is_trailing_selected(self) -> bool:
        return self.selected is not None and self.selected == self.trailing_index

    def toggle_expand(self) -> None:
        if self.selected is None or self.is_trailing_selected():
            return
        if self.selected in self.expanded:
            self.expanded.discard(self.selected)
        else:
            self.expanded.add(self.selected)

    def collapse_all(self) -> None:
        self.expanded.clear()

    def is_selected_expanded(self) -> bool:
        return self.selected is not None and self.selected in self.expanded

    def selected_article(self) -> Article | None:
        if self.selected is None or self.selected >= len(self.items):
            return None
        return self.items[self.selected]

    def begin_loading(self) -> None:
        self.loading_state = Loading()

    def load(self, result: FetchResult) -> None:
        if result.error:
            self.loading_state = LoadError(result.error)
            return
        self.items = list(result.articles)
        self.loading_state = Loaded()
        # Every reload resets the selection so a shorter list never leaves it dangling.
        self.selected = 0 if self.items else None
        self.offset = 0

    def refresh(self, result: FetchResult) -> None:
        self.expanded.clear()
        self.load(result)


@dataclass
class RuntimeState:
    model: ListModel = field(default_factory=ListModel)
    should_quit: bool = False
    needs_refresh: bool = False
