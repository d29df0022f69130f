"""Width-aware text wrapping for terminal columns.

Characters in the CJK family occupy two terminal cells, everything else one.
The table below is the complete list of double-width ranges; lookups never
consult the Unicode database so the result is identical on every platform.
"""

from __future__ import annotations

MIN_WRAP_WIDTH = 10

WIDE_RANGES: tuple[tuple[int, int], ...] = (
    (0x1100, 0x115F),  # Hangul Jamo
    (0x2E80, 0x9FFF),  # CJK radicals through CJK Unified Ideographs
    (0xAC00, 0xD7A3),  # Hangul Syllables
    (0xF900, 0xFAFF),  # CJK Compatibility Ideographs
    (0xFE10, 0xFE1F),  # Vertical Forms
    (0xFE30, 0xFE6F),  # CJK Compatibility Forms
    (0xFF00, 0xFF60),  # Fullwidth ASCII and punctuation
    (0xFFE0, 0xFFE6),  # Fullwidth symbols
    (0x20000, 0x2FFFF),  # CJK Extension B-F
    (0x30000, 0x3FFFF),  # CJK Extension G+
)


def is_wide_char(ch: str) -> bool:
    cp = ord(ch)
    return any(low <= cp <= high for low, high in WIDE_RANGES)


def char_width(ch: str) -> int:
    return 2 if is_wide_char(ch) else 1


def display_width(text: str) -> int:
    return sum(char_width(ch) for ch in text)


def wrap_text(text: str, width: int) -> list[str]:
    """Split ``text`` into lines no wider than ``width`` display columns.

    Existing newlines are kept as hard breaks and blank lines survive as empty
    strings. An empty ``text`` gives no lines at all. ``width`` never drops
    below ``MIN_WRAP_WIDTH``.
    """
    if not text:
        return []

    width = max(width, MIN_WRAP_WIDTH)
    lines: list[str] = []
    for paragraph in text.split("\n"):
        if not paragraph:
            lines.append("")
            continue

        current: list[str] = []
        current_width = 0
        for ch in paragraph:
            ch_width = char_width(ch)
            if current_width + ch_width > width and current:
                lines.append("".join(current))
                current = []
                current_width = 0
            current.append(ch)
            current_width += ch_width

        if current:
            lines.append("".join(current))

    return lines
