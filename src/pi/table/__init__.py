"""pi-table: box-drawn text tables for terminals and logs."""

# Cells and transforms
from pi.table.cell import DEFAULT_FORMAT, Cell, Transform

# Compositing
from pi.table.compositor import Band, Layout, compose_band

# Configuration
from pi.table.config import RenderOptions

# Errors
from pi.table.errors import (
    ColumnNotFoundError,
    RowNotFoundError,
    TableError,
    TableJSONError,
)

# Rendering
from pi.table.render import RowSnapshot, TableSnapshot, render, render_lines

# JSON interchange
from pi.table.serialization import (
    from_rich_json,
    from_vanilla_json,
    to_rich_json,
    to_vanilla_json,
)

# Styles
from pi.table.styles import (
    CLASSIC,
    MINIMAL,
    MODERN,
    SMOOTH,
    STYLES,
    BandGlyphs,
    Style,
    load_style,
    register_style,
)

# Table store
from pi.table.table import Row, Table

# Output width
from pi.table.terminal import FixedTerminal, ProcessTerminal, Terminal

# Utilities
from pi.table.utils import visible_width
from pi.table.widths import cell_width, resolve_widths

__all__ = [
    # Cells
    "DEFAULT_FORMAT",
    "Cell",
    "Transform",
    # Compositing
    "Band",
    "Layout",
    "compose_band",
    # Configuration
    "RenderOptions",
    # Errors
    "ColumnNotFoundError",
    "RowNotFoundError",
    "TableError",
    "TableJSONError",
    # Rendering
    "RowSnapshot",
    "TableSnapshot",
    "render",
    "render_lines",
    # JSON
    "from_rich_json",
    "from_vanilla_json",
    "to_rich_json",
    "to_vanilla_json",
    # Styles
    "CLASSIC",
    "MINIMAL",
    "MODERN",
    "SMOOTH",
    "STYLES",
    "BandGlyphs",
    "Style",
    "load_style",
    "register_style",
    # Table store
    "Row",
    "Table",
    # Terminal
    "FixedTerminal",
    "ProcessTerminal",
    "Terminal",
    # Utilities
    "cell_width",
    "resolve_widths",
    "visible_width",
]
