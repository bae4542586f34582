"""Mutable table store.

A ``Table`` holds ordered rows of cells, an optional header and footer, and
per-column formats and width overrides. One re-entrant lock per table guards
all of it; rows share their table's lock, so chained row mutations and
table-level operations are serialized with each other and with the snapshot
taken at render time.

Rows know nothing about their table. Column names are resolved against the
header by the table and handed to rows as indices::

    table = Table("ID", "Client", "Amount")
    row = table.add_row().insert(1, "Acme", 100)
    table.modify(row, highlight, "Amount")
    table.render(sys.stdout, style="smooth")
"""

from __future__ import annotations

import io
import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Iterable, Sequence

from pi.table.cell import Cell, Transform
from pi.table.errors import ColumnNotFoundError, RowNotFoundError, TableError
from pi.table.render import RowSnapshot, Sink, TableSnapshot, render

if TYPE_CHECKING:
    from pi.table.styles import Style
    from pi.table.terminal import Terminal

logger = logging.getLogger(__name__)

HEADER = "header"
FOOTER = "footer"

Column = str | int
Modifier = Callable[[Any], Any] | Transform


def _as_transform(modifier: Modifier) -> Transform:
    if isinstance(modifier, Transform):
        return modifier
    return Transform.custom(modifier)


class Row:
    """An ordered list of cells.

    All mutators return the row itself so calls can be chained::

        row.insert(2015, 1.78).insert(-0.88).modify(red, 2)
    """

    def __init__(self, name: str = "", lock: threading.RLock | None = None) -> None:
        self.name = name
        self.cells: list[Cell] = []
        self._lock = lock or threading.RLock()

    def __len__(self) -> int:
        return len(self.cells)

    def __repr__(self) -> str:
        return f"Row(name={self.name!r}, values={self.values!r})"

    @property
    def values(self) -> list[Any]:
        with self._lock:
            return [cell.value for cell in self.cells]

    def insert(self, *values: Any) -> Row:
        """Append one cell per value."""
        with self._lock:
            self.cells.extend(Cell(value) for value in values)
        return self

    def change(self, index: int, value: Any) -> Row:
        """Replace the value at *index* and drop its transform."""
        with self._lock:
            if 0 <= index < len(self.cells):
                self.cells[index] = Cell(value)
        return self

    def modify(self, modifier: Modifier, *indices: int) -> Row:
        """Attach a display transform to the cells at *indices*.

        The transform is lazy: it only runs when the table is rendered or
        exported with transformed output.
        """
        transform = _as_transform(modifier)
        with self._lock:
            for index in indices:
                if 0 <= index < len(self.cells):
                    self.cells[index].transform = transform
        return self


class Table:
    """Rows of cells plus titles, footnotes, formats and width overrides."""

    def __init__(self, *columns: str, lock: threading.RLock | None = None) -> None:
        self._lock = lock or threading.RLock()
        self._rows: list[Row] = []
        self._header: Row | None = None
        self._footer: Row | None = None
        self._formats: dict[int, str] = {}
        self._width_overrides: dict[int, int] = {}
        self._titles: list[str] = []
        self._footnotes: list[str] = []

        if columns:
            self.add_header(columns)

    # -- titles / footnotes -------------------------------------------------

    def add_title(self, title: str) -> None:
        if not title:
            raise ValueError("cannot add an empty title")
        with self._lock:
            self._titles.append(title)

    def add_footnote(self, footnote: str) -> None:
        if not footnote:
            raise ValueError("cannot add an empty footnote")
        with self._lock:
            self._footnotes.append(footnote)

    @property
    def titles(self) -> list[str]:
        with self._lock:
            return list(self._titles)

    @property
    def footnotes(self) -> list[str]:
        with self._lock:
            return list(self._footnotes)

    # -- rows ---------------------------------------------------------------

    def add_header(self, columns: Iterable[Any]) -> Row:
        """Set the header row, replacing the cells of an existing one."""
        with self._lock:
            header = self.add_row(HEADER)
            header.cells = []
            return header.insert(*columns)

    def add_footer(self) -> Row:
        return self.add_row(FOOTER)

    def add_row(self, name: str = "") -> Row:
        """Append a row. Names are case-insensitive.

        ``"header"`` and ``"footer"`` return the existing special row when one
        is present.
        """
        name = name.lower()
        with self._lock:
            if name == HEADER and self._header is not None:
                return self._header
            if name == FOOTER and self._footer is not None:
                return self._footer

            row = Row(name, self._lock)
            self._rows.append(row)
            if name == HEADER:
                self._header = row
            elif name == FOOTER:
                self._footer = row
            return row

    @property
    def header(self) -> Row | None:
        return self._header

    @property
    def footer(self) -> Row | None:
        return self._footer

    @property
    def row_count(self) -> int:
        with self._lock:
            return len(self._rows)

    @property
    def row_names(self) -> list[str]:
        with self._lock:
            return [row.name for row in self._rows]

    def get_row(self, nth: int) -> Row:
        with self._lock:
            if 0 <= nth < len(self._rows):
                return self._rows[nth]
        raise RowNotFoundError(f"no such row: {nth}")

    def get_row_by_name(self, name: str) -> Row:
        name = name.lower()
        with self._lock:
            if name == HEADER and self._header is not None:
                return self._header
            if name == FOOTER and self._footer is not None:
                return self._footer
            if name not in (HEADER, FOOTER):
                for row in self._rows:
                    if row.name == name:
                        return row
        raise RowNotFoundError(f"no such row name: {name!r}")

    def _is_special(self, row: Row) -> bool:
        return row is self._header or row is self._footer

    # -- columns ------------------------------------------------------------

    def column_index(self, name: str) -> int | None:
        """Position of header column *name* (case-insensitive), if any."""
        with self._lock:
            if self._header is None:
                return None
            wanted = name.lower()
            for i, cell in enumerate(self._header.cells):
                if isinstance(cell.value, str) and cell.value.lower() == wanted:
                    return i
            return None

    def column_indices(self, *columns: Column) -> list[int]:
        """Resolve header names (and pass through non-negative indices).

        Unknown names are skipped.
        """
        indices: list[int] = []
        for column in columns:
            if isinstance(column, int):
                if column >= 0:
                    indices.append(column)
                continue
            index = self.column_index(column)
            if index is None:
                logger.debug("Skipping unknown column %r", column)
                continue
            indices.append(index)
        return indices

    def change(self, row: Row, column: Column, value: Any) -> Row:
        """Change the cell of *row* in the named column."""
        with self._lock:
            for index in self.column_indices(column):
                row.change(index, value)
        return row

    def modify(self, row: Row, modifier: Modifier, *columns: Column) -> Row:
        """Attach a display transform to the named columns of *row*."""
        with self._lock:
            row.modify(modifier, *self.column_indices(*columns))
        return row

    def set_format(self, fmt: str, *columns: Column) -> list[int]:
        """Set the printf-style format (default ``"%s"``) of columns.

        Returns the indices that were updated.
        """
        with self._lock:
            indices = self.column_indices(*columns)
            for index in indices:
                self._formats[index] = fmt
        return indices

    def set_column_width(self, width: int, *columns: Column) -> list[int]:
        """Override the computed content width of columns.

        Content wider than the override is printed as is, overflowing the
        border. A width of 0 hides the column.
        """
        with self._lock:
            indices = self.column_indices(*columns)
            for index in indices:
                self._width_overrides[index] = width
        return indices

    def transform(self, fn: Callable[[Any], Any], *columns: Column) -> list[int]:
        """Eagerly replace the values of body cells in columns with ``fn(value)``.

        List and tuple values are transformed element by element.
        """
        with self._lock:
            indices = self.column_indices(*columns)
            for row in self._rows:
                if self._is_special(row):
                    continue
                for index in indices:
                    if index >= len(row.cells):
                        continue
                    cell = row.cells[index]
                    if isinstance(cell.value, (list, tuple)):
                        cell.value = [fn(v) for v in cell.value]
                    else:
                        cell.value = fn(cell.value)
        return indices

    # -- filtering / removal ------------------------------------------------

    def _with_rows(self, rows: list[Row], inplace: bool) -> Table:
        header = self._header if any(row is self._header for row in rows) else None
        footer = self._footer if any(row is self._footer for row in rows) else None

        if inplace:
            self._rows = rows
            self._header = header
            self._footer = footer
            return self

        table = Table(lock=self._lock)
        table._rows = rows
        table._header = header
        table._footer = footer
        table._formats = dict(self._formats)
        table._width_overrides = dict(self._width_overrides)
        table._titles = list(self._titles)
        table._footnotes = list(self._footnotes)
        return table

    def filter(
        self,
        predicate: Callable[..., bool],
        *columns: Column,
        inplace: bool = False,
        keep_footer: bool = False,
    ) -> Table:
        """Keep body rows for which ``predicate(*values)`` is true.

        *values* are the row's values in *columns*, ``None`` where the row has
        no such cell. The header is always kept, the footer only with
        *keep_footer*. Without *inplace* the result is a new table sharing
        this table's rows and lock.
        """
        with self._lock:
            indices = self.column_indices(*columns)
            if not indices:
                raise ColumnNotFoundError(f"no such columns: {columns!r}")

            rows: list[Row] = []
            for row in self._rows:
                if row is self._header:
                    rows.append(row)
                elif row is self._footer:
                    if keep_footer:
                        rows.append(row)
                else:
                    values = [row.cells[i].value if i < len(row.cells) else None for i in indices]
                    if predicate(*values):
                        rows.append(row)

            return self._with_rows(rows, inplace)

    def filter_by_row_names(
        self,
        predicate: Callable[[str], bool],
        inplace: bool = False,
        keep_footer: bool = False,
    ) -> Table:
        """Keep rows whose name satisfies *predicate*; unnamed rows are ``""``."""
        with self._lock:
            rows = [
                row
                for row in self._rows
                if predicate(row.name)
                or row is self._header
                or (keep_footer and row is self._footer)
            ]
            return self._with_rows(rows, inplace)

    def remove_rows(self, *positions: int) -> None:
        """Remove rows by position. Duplicates are ignored."""
        if not positions:
            raise ValueError("no row positions given")

        with self._lock:
            selected: set[int] = set()
            for nth in positions:
                if nth < 0 or nth >= len(self._rows):
                    raise RowNotFoundError(f"no such row: {nth}")
                if self._is_special(self._rows[nth]):
                    raise TableError("cannot remove the header or footer")
                selected.add(nth)

            self._rows = [row for i, row in enumerate(self._rows) if i not in selected]

    def remove_rows_by_name(self, *names: str) -> None:
        """Remove every row carrying one of *names*; unknown names are ignored."""
        if not names:
            raise ValueError("no row names given")

        wanted = {name.lower() for name in names}
        with self._lock:
            doomed = [row for row in self._rows if row.name in wanted]
            if any(self._is_special(row) for row in doomed):
                raise TableError("cannot remove the header or footer")
            self._rows = [row for row in self._rows if row.name not in wanted]

    # -- rendering ----------------------------------------------------------

    def snapshot(self) -> TableSnapshot:
        """Copy the table's current state for a render pass."""
        with self._lock:
            rows = []
            for row in self._rows:
                if row is self._header:
                    kind = "header"
                elif row is self._footer:
                    kind = "footer"
                else:
                    kind = "body"
                rows.append(RowSnapshot(kind, tuple(cell.copy() for cell in row.cells), row.name))

            return TableSnapshot(
                rows=tuple(rows),
                formats=dict(self._formats),
                width_overrides=dict(self._width_overrides),
                titles=tuple(self._titles),
                footnotes=tuple(self._footnotes),
            )

    def render(
        self,
        sink: Sink,
        *,
        measure_transformed: bool = False,
        print_transformed: bool = True,
        centered: bool = False,
        style: Style | str | None = None,
        columns: Sequence[Column] | None = None,
        terminal: Terminal | None = None,
    ) -> None:
        """Render the table and write it to *sink* in one ``write`` call.

        Args:
            sink: Destination with a ``write(str)`` method.
            measure_transformed: Compute widths from transformed strings. Keep
                it off when transforms add ANSI color codes.
            print_transformed: Print transformed strings.
            centered: Center the output within the terminal width.
            style: Style or style name (default ``"classic"``).
            columns: Header names or indices to render, in order. Unknown
                names are skipped; when none resolve, all columns render.
            terminal: Source of the output width (default: stdout).
        """
        with self._lock:
            snapshot = self.snapshot()
            indices = self.column_indices(*columns) if columns else None

        render(
            sink,
            snapshot,
            style,
            measure_transformed=measure_transformed,
            print_transformed=print_transformed,
            centered=centered,
            columns=indices,
            terminal=terminal,
        )

    def render_to_string(self, **kwargs: Any) -> str:
        """Render into a string; accepts the keyword arguments of ``render``."""
        buf = io.StringIO()
        self.render(buf, **kwargs)
        return buf.getvalue()

    # -- JSON ---------------------------------------------------------------

    def to_rich_json(self) -> str:
        from pi.table.serialization import to_rich_json

        return to_rich_json(self)

    def to_vanilla_json(self) -> str:
        from pi.table.serialization import to_vanilla_json

        return to_vanilla_json(self)

    @classmethod
    def from_rich_json(cls, source: Any) -> Table:
        from pi.table.serialization import from_rich_json

        return from_rich_json(source)

    @classmethod
    def from_vanilla_json(cls, source: Any, missing_value: Any = None) -> Table:
        from pi.table.serialization import from_vanilla_json

        return from_vanilla_json(source, missing_value)
