"""Render orchestration: snapshot -> cell strings -> widths -> lines -> sink.

A render pass walks the bands in a fixed order::

    titles -> header -> body rows -> footer -> footnotes

The footer band is always rendered, with no cells when the table has no
footer, so that styles drawing a closing rule get one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Literal, Mapping, Protocol, Sequence

from pi.table.cell import DEFAULT_FORMAT, Cell
from pi.table.compositor import Layout
from pi.table.styles import Style, load_style
from pi.table.terminal import ProcessTerminal, Terminal
from pi.table.widths import resolve_widths

logger = logging.getLogger(__name__)

RowKind = Literal["header", "body", "footer"]


class Sink(Protocol):
    """Text destination; ``io.StringIO`` and ``sys.stdout`` qualify."""

    def write(self, data: str, /) -> object: ...


# ---------------------------------------------------------------------------
# Snapshot
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RowSnapshot:
    kind: RowKind
    cells: tuple[Cell, ...]
    name: str = ""


@dataclass(frozen=True)
class TableSnapshot:
    """Read-only copy of a table taken for a single render pass."""

    rows: tuple[RowSnapshot, ...] = ()
    formats: Mapping[int, str] = field(default_factory=dict)
    width_overrides: Mapping[int, int] = field(default_factory=dict)
    titles: tuple[str, ...] = ()
    footnotes: tuple[str, ...] = ()


@dataclass
class PreparedRow:
    """Measured and printed strings of one row, indexed by output column."""

    kind: RowKind
    measured: list[str]
    printed: list[str]


# ---------------------------------------------------------------------------
# Preparation
# ---------------------------------------------------------------------------


def _selection(row: RowSnapshot, columns: Sequence[int] | None) -> Sequence[int]:
    if columns:
        return columns
    return range(len(row.cells))


def prepare(
    snapshot: TableSnapshot,
    columns: Sequence[int] | None = None,
    measure_transformed: bool = False,
    print_transformed: bool = True,
) -> list[PreparedRow]:
    """Format every participating cell of every row.

    *columns* selects and orders the participating column indices; when empty
    or ``None`` each row contributes all of its cells. Formats are looked up
    by the real column index. Cells a row does not have are left out, or
    rendered blank when a later selected column is present.
    """
    prepared: list[PreparedRow] = []
    for row in snapshot.rows:
        measured: list[str] = []
        printed: list[str] = []
        present = 0
        for j in _selection(row, columns):
            if j < 0 or j >= len(row.cells):
                measured.append("")
                printed.append("")
                continue

            cell = row.cells[j]
            fmt = snapshot.formats.get(j, DEFAULT_FORMAT)
            raw = cell.render(fmt, transformed=False)
            modified = cell.render(fmt, transformed=True) if not cell.transform.is_identity else raw

            measured.append(modified if measure_transformed else raw)
            printed.append(modified if print_transformed else raw)
            present = len(measured)

        prepared.append(PreparedRow(row.kind, measured[:present], printed[:present]))
    return prepared


def _overrides_by_position(
    snapshot: TableSnapshot, columns: Sequence[int] | None
) -> dict[int, int]:
    if not columns:
        return dict(snapshot.width_overrides)
    return {
        position: snapshot.width_overrides[j]
        for position, j in enumerate(columns)
        if j in snapshot.width_overrides
    }


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_lines(
    snapshot: TableSnapshot,
    style: Style | str | None = None,
    *,
    measure_transformed: bool = False,
    print_transformed: bool = True,
    centered: bool = False,
    columns: Sequence[int] | None = None,
    output_width: int | None = None,
) -> list[str]:
    """Render *snapshot* into a list of text lines.

    Args:
        snapshot: Table contents to render.
        style: Style instance or registered style name.
        measure_transformed: Measure column widths using transformed strings.
            Leave unset when transforms add invisible characters such as
            ANSI color codes.
        print_transformed: Print transformed strings instead of raw ones.
        centered: Center every line within *output_width*.
        columns: Column indices to render, in order.
        output_width: Available output columns; ``None`` disables centering
            offsets.
    """
    if not isinstance(style, Style):
        style = load_style(style)

    prepared = prepare(snapshot, columns, measure_transformed, print_transformed)
    widths = resolve_widths(
        [row.measured for row in prepared],
        _overrides_by_position(snapshot, columns),
    )
    layout = Layout(
        widths=tuple(widths),
        center=centered,
        output_width=output_width,
        measure_transformed=measure_transformed,
        print_transformed=print_transformed,
    )

    header = next((row for row in prepared if row.kind == "header"), None)
    footer = next((row for row in prepared if row.kind == "footer"), None)
    body = [row for row in prepared if row.kind == "body"]

    lines: list[str] = []

    if snapshot.titles:
        lines.extend(style.render_titles(layout, snapshot.titles))

    if header is not None:
        lines.extend(style.render_header(layout, header.measured, header.printed))

    for ordinal, row in enumerate(body, start=1):
        lines.extend(style.render_row(layout, ordinal, len(body), row.measured, row.printed))

    if footer is not None:
        lines.extend(style.render_footer(layout, footer.measured, footer.printed))
    else:
        lines.extend(style.render_footer(layout, [], []))

    if snapshot.footnotes:
        lines.extend(style.render_footnotes(snapshot.footnotes))

    logger.debug(
        "Rendered %d body rows into %d lines with style %r (widths=%s)",
        len(body),
        len(lines),
        style.name,
        widths,
    )
    return lines


def render(
    sink: Sink,
    snapshot: TableSnapshot,
    style: Style | str | None = None,
    *,
    measure_transformed: bool = False,
    print_transformed: bool = True,
    centered: bool = False,
    columns: Sequence[int] | None = None,
    terminal: Terminal | None = None,
) -> None:
    """Render *snapshot* and write it to *sink* with a single ``write`` call.

    Lines are joined with line breaks. Errors raised by the sink propagate
    unchanged.
    """
    output_width = None
    if centered:
        output_width = (terminal or ProcessTerminal()).columns

    lines = render_lines(
        snapshot,
        style,
        measure_transformed=measure_transformed,
        print_transformed=print_transformed,
        centered=centered,
        columns=columns,
        output_width=output_width,
    )
    sink.write("\n".join(lines))
