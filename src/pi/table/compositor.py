"""Line compositor: turns one band's cells into literal text lines.

A band is drawn as an optional top border, one or more content lines and an
optional bottom border::

    ╔════╦════════╗   <- top     (left, fill, joint, right)
    ║ ID ║ Client ║   <- content (left, separator, right)
    ╠════╩════════╣   <- bottom  (left, fill, joint, right)

Every visible column is ``width + 2`` characters wide: the resolved content
width plus a one-space margin on each side. Columns of width 0 are dropped
from every line.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from pi.table.utils import (
    center_offset,
    center_padding,
    line_count,
    rune_width,
    split_lines,
    visible_width,
)

if TYPE_CHECKING:
    from pi.table.styles import BandGlyphs

CELL_MARGIN = 2


@dataclass(frozen=True)
class Layout:
    """Per-render layout values shared by every band of one render pass."""

    widths: tuple[int, ...] = ()
    center: bool = False
    output_width: int | None = None
    measure_transformed: bool = False
    print_transformed: bool = True

    @property
    def visible_columns(self) -> list[int]:
        return [i for i, width in enumerate(self.widths) if width > 0]

    @property
    def pads_from_measured(self) -> bool:
        """Whether in-cell padding follows the measured rather than printed part.

        Only raw measuring with transformed printing differs: the printed part
        may then carry invisible escape codes the measured part lacks.
        """
        return self.print_transformed and not self.measure_transformed

    @property
    def table_width(self) -> int:
        columns = self.visible_columns
        return sum(self.widths[j] + CELL_MARGIN for j in columns) + len(columns) + 1

    @property
    def offset(self) -> int:
        """Left offset shared by every border and content line."""
        if not self.center:
            return 0
        return center_offset(self.output_width, self.table_width)

    def indent(self, line: str) -> str:
        return " " * self.offset + line

    def center_line(self, line: str) -> str:
        """Prefix a free-standing *line* (e.g. a title) to center it on its own."""
        if not self.center:
            return line
        return " " * center_offset(self.output_width, visible_width(line)) + line


@dataclass
class Band:
    """Rendered pieces of one band, before the style decides what to keep."""

    top: str
    bottom: str
    lines: list[str] = field(default_factory=list)
    is_empty: bool = True


def border_line(glyphs: Sequence[str], widths: Sequence[int], columns: Sequence[int]) -> str:
    """Build a horizontal rule from ``(left, fill, joint, right)`` glyphs."""
    left, fill, joint, right = glyphs
    segments = [fill * (widths[j] + CELL_MARGIN) for j in columns]
    return left + joint.join(segments) + right


def _cell_segment(
    width: int,
    physical: int,
    total: int,
    measured: str,
    printed: str,
    pads_from_measured: bool,
) -> str:
    slot = width + CELL_MARGIN
    parts = split_lines(printed)

    # Shorter cells are vertically centered; odd padding goes below.
    pre = (total - len(parts)) // 2 if total > 1 else 0
    index = physical - pre
    if index < 0 or index >= len(parts):
        return " " * slot

    part = parts[index]
    reference = part
    if pads_from_measured:
        measured_parts = split_lines(measured)
        if index < len(measured_parts):
            reference = measured_parts[index]

    left, right = center_padding(slot, rune_width(reference))
    return " " * left + part + " " * right


def compose_band(
    glyphs: BandGlyphs,
    layout: Layout,
    measured: Sequence[str],
    printed: Sequence[str],
) -> Band:
    """Compose the border and content lines of a single row.

    *measured* and *printed* are parallel lists of cell strings indexed by
    output column. When raw strings are measured and transformed strings
    printed, padding is derived from the measured string so that invisible
    characters in the printed string (e.g. color codes) do not shift the
    content. Cells missing at the end of a row and cells of hidden columns
    count as absent.
    """
    columns = layout.visible_columns
    widths = layout.widths

    visible_measured = [measured[j] if j < len(measured) else "" for j in columns]
    visible_printed = [printed[j] if j < len(printed) else "" for j in columns]

    total = max((line_count(cell) for cell in visible_printed), default=1)

    left, separator, right = glyphs.content
    lines: list[str] = []
    for physical in range(total):
        segments = [
            _cell_segment(widths[j], physical, total, m, p, layout.pads_from_measured)
            for j, m, p in zip(columns, visible_measured, visible_printed)
        ]
        lines.append(layout.indent(left + separator.join(segments) + right))

    return Band(
        top=layout.indent(border_line(glyphs.top, widths, columns)),
        bottom=layout.indent(border_line(glyphs.bottom, widths, columns)),
        lines=lines,
        is_empty=not any(visible_printed),
    )
