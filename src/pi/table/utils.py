"""Text measurement helpers for table layout.

Two notions of width are used by the renderer:

* ``rune_width`` -- the number of Unicode code points, which is what column
  widths and in-cell padding are computed from.
* ``visible_width`` -- the number of terminal columns a string occupies once
  escape sequences are stripped and wide characters are counted as two. It is
  only used to center whole lines within the output width.
"""

from __future__ import annotations

import re
import unicodedata

import grapheme
import wcwidth as _wcwidth


# ---------------------------------------------------------------------------
# Escape sequences
# ---------------------------------------------------------------------------

_STRIP_RE = re.compile(
    r"\x1b\[[0-9;]*[mGKHJ]"        # CSI
    r"|\x1b\]8;;[^\x07]*\x07"       # OSC 8
    r"|\x1b_[^\x07\x1b]*(?:\x07|\x1b\\)"  # APC
)


def strip_ansi(text: str) -> str:
    """Remove CSI, OSC 8 and APC escape sequences from *text*."""
    return _STRIP_RE.sub("", text)


# ---------------------------------------------------------------------------
# Code point width
# ---------------------------------------------------------------------------


def rune_width(text: str) -> int:
    """Return the number of code points in *text*."""
    return len(text)


def split_lines(text: str) -> list[str]:
    """Split cell text on line breaks; an empty string yields one empty part."""
    return text.split("\n")


def line_count(text: str) -> int:
    return text.count("\n") + 1


# ---------------------------------------------------------------------------
# Terminal column width
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _grapheme_width(g: str) -> int:
    """Return the terminal display width of a single grapheme cluster."""
    if not g:
        return 0

    if len(g) == 1:
        cp = ord(g)
        if cp < 0x20 or (0x7F <= cp <= 0x9F):
            return 0
        return max(_wcwidth.wcwidth(g), 0)

    # VS16, ZWJ, skin tones and regional indicators all mean emoji presentation
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D) or 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:
            return 2

    first_cp = ord(g[0])
    if first_cp >= 0x1F000 or 0x2600 <= first_cp <= 0x27BF:
        return 2

    cat = unicodedata.category(g[0])
    if cat.startswith("M") or cat == "Cf":
        return 0

    return max(_wcwidth.wcwidth(g[0]), 0)


def visible_width(text: str) -> int:
    """Calculate the visible terminal width of *text*.

    Escape sequences are ignored and tabs count as three columns. Pure
    printable ASCII takes a fast path; other strings are measured per
    grapheme cluster and cached.
    """
    if not text:
        return 0

    stripped = strip_ansi(text)
    if not stripped:
        return 0

    stripped = stripped.replace("\t", "   ")

    if all(0x20 <= ord(ch) <= 0x7E for ch in stripped):
        return len(stripped)

    cached = _width_cache.get(stripped)
    if cached is not None:
        return cached

    total = sum(_grapheme_width(g) for g in grapheme.graphemes(stripped))
    return _cache_width(stripped, total)


# ---------------------------------------------------------------------------
# Padding
# ---------------------------------------------------------------------------


def center_padding(slot: int, length: int) -> tuple[int, int]:
    """Split the free space of a *slot* around content of *length*.

    The left side gets the floor of half the free space. Content longer than
    the slot gets no padding at all.
    """
    free = max(0, slot - length)
    left = free // 2
    return left, free - left


def center_offset(available: int | None, length: int) -> int:
    """Left offset that centers *length* columns within *available* columns."""
    if available is None:
        return 0
    return max(0, (available - length) // 2)
