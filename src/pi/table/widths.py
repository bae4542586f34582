"""Column width resolution."""

from __future__ import annotations

from typing import Mapping, Sequence

from pi.table.utils import rune_width, split_lines


def cell_width(text: str) -> int:
    """Width of the widest line of *text*, in code points."""
    return max(rune_width(part) for part in split_lines(text))


def resolve_widths(
    rows: Sequence[Sequence[str]],
    overrides: Mapping[int, int] | None = None,
    columns: int | None = None,
) -> list[int]:
    """Compute the content width of every column.

    Args:
        rows: Measured cell strings per row, indexed by output column. Every
            band (header, body, footer) should be included since they share
            one width vector. Rows may be ragged; missing cells count for
            nothing.
        overrides: Explicit content widths (without the cell margin) keyed by
            output column. They replace the computed width even when the
            content is wider.
        columns: Minimum length of the returned vector.

    Returns:
        One width per column. A width of 0 hides the column.
    """
    count = max((len(row) for row in rows), default=0)
    if columns is not None:
        count = max(count, columns)

    widths = [0] * count
    for row in rows:
        for j, text in enumerate(row):
            width = cell_width(text)
            if width > widths[j]:
                widths[j] = width

    for j, width in (overrides or {}).items():
        if 0 <= j < count:
            widths[j] = max(0, width)

    return widths
