"""JSON interchange for tables.

Two formats are supported:

* **Rich JSON** keeps everything needed to rebuild the table: row names (and
  so header/footer identity), formats, width overrides, titles, footnotes and
  the transformed string of every cell::

      {"rows": [{"cells": [{"value": 1, "modified": "1"}]}],
       "rownames": ["header"], "formats": {"0": "%s"}, "width": {"1": 15},
       "titles": [], "footnotes": []}

  Transform functions cannot be serialized; a cell whose transformed string
  differs from its raw string is restored with that string as a fixed
  transform.

* **Vanilla JSON** is a plain array of objects keyed by header value, one
  object per body row. Header and footer rows, names and transforms are lost.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticSerializationError

from pi.table.cell import DEFAULT_FORMAT, Cell, Transform
from pi.table.errors import TableJSONError
from pi.table.table import FOOTER, HEADER, Table


class CellModel(BaseModel):
    value: Any = None
    modified: str | None = None


class RowModel(BaseModel):
    cells: list[CellModel] = Field(default_factory=list)


class TableModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rows: list[RowModel] = Field(default_factory=list)
    row_names: list[str] = Field(default_factory=list, alias="rownames")
    formats: dict[int, str] = Field(default_factory=dict)
    titles: list[str] = Field(default_factory=list)
    footnotes: list[str] = Field(default_factory=list)
    width_overrides: dict[int, int] = Field(default_factory=dict, alias="width")


def _read(source: Any) -> str | bytes:
    if hasattr(source, "read"):
        return source.read()
    return source


# ---------------------------------------------------------------------------
# Rich JSON
# ---------------------------------------------------------------------------


def to_rich_json(table: Table) -> str:
    """Serialize *table* with all of its metadata."""
    snapshot = table.snapshot()

    rows = []
    for row in snapshot.rows:
        cells = [
            CellModel(
                value=cell.value,
                modified=cell.render(snapshot.formats.get(j, DEFAULT_FORMAT), transformed=True),
            )
            for j, cell in enumerate(row.cells)
        ]
        rows.append(RowModel(cells=cells))

    model = TableModel(
        rows=rows,
        row_names=[row.name for row in snapshot.rows],
        formats=dict(snapshot.formats),
        titles=list(snapshot.titles),
        footnotes=list(snapshot.footnotes),
        width_overrides=dict(snapshot.width_overrides),
    )
    try:
        return model.model_dump_json(by_alias=True)
    except PydanticSerializationError as e:
        raise TableJSONError(f"could not serialize table: {e}") from e


def from_rich_json(source: Any) -> Table:
    """Rebuild a table from rich JSON (a string, bytes or readable object)."""
    try:
        model = TableModel.model_validate_json(_read(source))
    except ValidationError as e:
        raise TableJSONError(f"could not decode rich JSON: {e}") from e

    if len(model.rows) != len(model.row_names):
        raise TableJSONError(
            f"rich JSON has {len(model.rows)} rows but {len(model.row_names)} row names"
        )
    names = [name.lower() for name in model.row_names]
    for special in (HEADER, FOOTER):
        if names.count(special) > 1:
            raise TableJSONError(f"rich JSON has more than one {special!r} row")

    table = Table()
    for name, row_model in zip(model.row_names, model.rows):
        row = table.add_row(name)
        for j, cell_model in enumerate(row_model.cells):
            row.insert(cell_model.value)
            if cell_model.modified is None:
                continue
            raw = Cell(cell_model.value).render(model.formats.get(j, DEFAULT_FORMAT))
            if cell_model.modified != raw:
                row.modify(Transform.restored(cell_model.modified), len(row) - 1)

    for index, fmt in model.formats.items():
        table.set_format(fmt, index)
    for index, width in model.width_overrides.items():
        table.set_column_width(width, index)
    for title in model.titles:
        if title:
            table.add_title(title)
    for footnote in model.footnotes:
        if footnote:
            table.add_footnote(footnote)

    return table


# ---------------------------------------------------------------------------
# Vanilla JSON
# ---------------------------------------------------------------------------


def _column_name(header: tuple[Cell, ...], j: int) -> str:
    if j < len(header):
        return str(header[j].value)
    return f"COL_{j}"


def to_vanilla_json(table: Table) -> str:
    """Serialize body rows as ``[{column: value, ...}, ...]``."""
    snapshot = table.snapshot()
    header = next((row.cells for row in snapshot.rows if row.kind == "header"), ())

    objects = [
        {_column_name(header, j): cell.value for j, cell in enumerate(row.cells)}
        for row in snapshot.rows
        if row.kind == "body"
    ]
    try:
        return json.dumps(objects)
    except (TypeError, ValueError) as e:
        raise TableJSONError(f"could not serialize table: {e}") from e


def from_vanilla_json(source: Any, missing_value: Any = None) -> Table:
    """Build a table from an array of objects.

    The header is taken from the keys of the first object; keys missing from
    later objects are filled with *missing_value*.
    """
    try:
        data = json.loads(_read(source))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise TableJSONError(f"could not decode vanilla JSON: {e}") from e

    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise TableJSONError("vanilla JSON must be an array of objects")

    table = Table()
    if not data:
        return table

    columns = list(data[0].keys())
    table.add_header(columns)
    for item in data:
        table.add_row().insert(*(item.get(column, missing_value) for column in columns))

    return table
