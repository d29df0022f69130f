from __future__ import annotations

import logging
import os
import select
import subprocess
import sys
import termios
import tty
import webbrowser
from dataclasses import dataclass, field
from typing import Callable

from ptlk.model import RuntimeState

LOGGER = logging.getLogger(__name__)

CTRL = "ctrl"

ESCAPE_SEQUENCES = {
    "[A": "UP",
    "[B": "DOWN",
    "[C": "RIGHT",
    "[D": "LEFT",
    "OA": "UP",
    "OB": "DOWN",
    "OC": "RIGHT",
    "OD": "LEFT",
    "[H": "HOME",
    "[F": "END",
    "OH": "HOME",
    "OF": "END",
    "[1~": "HOME",
    "[4~": "END",
    "[5~": "PGUP",
    "[6~": "PGDN",
    "[Z": "BACKTAB",
}


@dataclass(frozen=True)
class KeyEvent:
    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @property
    def ctrl(self) -> bool:
        return CTRL in self.modifiers


def ctrl_key(letter: str) -> KeyEvent:
    return KeyEvent(letter, frozenset({CTRL}))


def decode_key(raw: str) -> KeyEvent | None:
    if not raw:
        return None
    if raw in {"\r", "\n"}:
        return KeyEvent("ENTER")
    if raw == "\t":
        return KeyEvent("TAB")
    if raw in {"\x7f", "\b"}:
        return KeyEvent("BACKSPACE")
    if raw.startswith("\x1b"):
        sequence = raw[1:]
        if not sequence:
            return KeyEvent("ESC")
        return KeyEvent(ESCAPE_SEQUENCES[sequence]) if sequence in ESCAPE_SEQUENCES else None
    if len(raw) == 1 and "\x01" <= raw <= "\x1a":
        return ctrl_key(chr(ord(raw) + 96))
    if len(raw) == 1 and raw.isprintable():
        return KeyEvent(raw)
    return None


class KeyReader:
    def __init__(self, stream=None) -> None:
        self.stream = stream if stream is not None else sys.stdin
        self.fd = self.stream.fileno()
        self._saved_settings = None

    def __enter__(self) -> KeyReader:
        if os.isatty(self.fd):
            self._saved_settings = termios.tcgetattr(self.fd)
            # cbreak leaves ISIG on: Ctrl+C arrives as SIGINT, not as "\x03".
            tty.setcbreak(self.fd)
        return self

    def __exit__(self, *exc_info) -> None:
        if self._saved_settings is not None:
            termios.tcsetattr(self.fd, termios.TCSADRAIN, self._saved_settings)
            self._saved_settings = None

    def _read_char(self) -> str:
        return os.read(self.fd, 1).decode("utf-8", errors="ignore")

    def poll(self, timeout: float) -> KeyEvent | None:
        ready, _, _ = select.select([self.fd], [], [], timeout)
        if not ready:
            return None
        key = self._read_char()
        if key == "\x1b":
            sequence = ""
            while select.select([self.fd], [], [], 0.001)[0]:
                sequence += self._read_char()
                if not sequence:
                    continue
                if sequence[-1].isalpha() or sequence.endswith("~") or len(sequence) >= 6:
                    break
            key += sequence
        return decode_key(key)


def open_link(url: str) -> str:
    clean_url = url.strip()
    if not clean_url:
        return "no URL available"
    try:
        if sys.platform == "darwin":
            subprocess.Popen(["open", clean_url], stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)
        elif not webbrowser.open(clean_url, new=2):
            return "no browser available"
    except (OSError, webbrowser.Error) as exc:
        return str(exc)
    return ""


Opener = Callable[[str], str]


def open_target(state: RuntimeState, url: str, label: str, opener: Opener) -> None:
    error = opener(url)
    if error:
        LOGGER.warning("Failed to open %s %s: %s", label, url, error)
        state.model.last_error = f"Failed to open {label}: {error}"
        return
    LOGGER.info("Opened %s", url)


def open_selected(state: RuntimeState, site_url: str, opener: Opener) -> None:
    model = state.model
    if model.is_trailing_selected():
        open_target(state, site_url, "website", opener)
        return
    article = model.selected_article()
    if article is not None:
        open_target(state, article.url, "browser", opener)


def handle_enter(state: RuntimeState, site_url: str, opener: Opener) -> None:
    model = state.model
    if model.selected is None:
        return
    if model.is_trailing_selected() or model.is_selected_expanded():
        open_selected(state, site_url, opener)
    else:
        model.toggle_expand()


def handle_key_event(
    state: RuntimeState,
    event: KeyEvent,
    site_url: str,
    opener: Opener = open_link,
) -> None:
    model = state.model
    # A key press closes the error box and still performs its own action.
    model.last_error = None

    code = event.code
    if code in {"q", "ESC"} or (event.ctrl and code == "c"):
        state.should_quit = True
    elif code in {"j", "DOWN"}:
        model.next()
    elif code in {"k", "UP"}:
        model.previous()
    elif code in {"g", "HOME"}:
        model.go_to_first()
    elif code in {"G", "END"}:
        model.go_to_last()
    elif code == "PGDN" or (event.ctrl and code == "d"):
        model.page_down()
    elif code == "PGUP" or (event.ctrl and code == "u"):
        model.page_up()
    elif code == "ENTER":
        handle_enter(state, site_url, opener)
    elif code == " ":
        model.toggle_expand()
    elif code == "o":
        open_selected(state, site_url, opener)
    elif code == "x":
        model.collapse_all()
    elif code == "r":
        state.needs_refresh = True
    else:
        LOGGER.debug("Ignoring key %r", event)
