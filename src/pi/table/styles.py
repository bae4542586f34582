"""Visual styles: border glyphs and border-suppression flags per band.

A style is immutable. Everything that varies between render passes (column
widths, centering, output width) is passed in through a ``Layout``, so one
style instance can be shared by concurrent renders.

Glyph layout of the classic style::

    ╔════╦════════╗  <- header.top
    ║ ID ║ Client ║  <- header.content
    ╠════╪════════╣  <- header.bottom
    ║ 1  │  Acme  ║  <- body.content
    ╟────┼────────╢  <- body.bottom (between rows)
    ║ 2  │ Globex ║
    ╚════╧════════╝  <- footer.top
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from pi.table.compositor import Band, Layout, border_line, compose_band
from pi.table.utils import rune_width

logger = logging.getLogger(__name__)

Rule = tuple[str, str, str, str]
Walls = tuple[str, str, str]


@dataclass(frozen=True)
class BandGlyphs:
    """Glyphs for one band: ``(left, fill, joint, right)`` rules and
    ``(left, separator, right)`` content walls."""

    top: Rule
    content: Walls
    bottom: Rule


@dataclass(frozen=True)
class Style:
    """A named bundle of band glyphs and border-suppression flags."""

    name: str
    header: BandGlyphs
    body: BandGlyphs
    footer: BandGlyphs
    hr: str = "─"

    skip_header_top: bool = False
    skip_header_bottom: bool = False
    skip_body_top: bool = False
    skip_body_bottom: bool = False
    skip_first_body_top: bool = False
    skip_last_body_bottom: bool = False
    skip_footer_top: bool = False
    skip_footer_bottom: bool = False

    # Rule drawn instead of footer.top when the footer has no content.
    closing: Rule | None = None

    def render_header(
        self, layout: Layout, measured: Sequence[str], printed: Sequence[str]
    ) -> list[str]:
        band = compose_band(self.header, layout, measured, printed)

        lines: list[str] = []
        if not self.skip_header_top:
            lines.append(band.top)
        lines.extend(band.lines)
        if not self.skip_header_bottom:
            lines.append(band.bottom)
        return lines

    def render_row(
        self,
        layout: Layout,
        ordinal: int,
        count: int,
        measured: Sequence[str],
        printed: Sequence[str],
    ) -> list[str]:
        """Render body row number *ordinal* (1-based) out of *count*."""
        band = compose_band(self.body, layout, measured, printed)

        lines: list[str] = []
        if not self.skip_body_top and (ordinal != 1 or not self.skip_first_body_top):
            lines.append(band.top)
        lines.extend(band.lines)
        if not self.skip_body_bottom and (ordinal != count or not self.skip_last_body_bottom):
            lines.append(band.bottom)
        return lines

    def render_footer(
        self, layout: Layout, measured: Sequence[str], printed: Sequence[str]
    ) -> list[str]:
        band = compose_band(self.footer, layout, measured, printed)

        lines: list[str] = []
        if not self.skip_footer_top:
            lines.append(self._footer_top(layout, band))
        if band.is_empty:
            return lines

        lines.extend(band.lines)
        if not self.skip_footer_bottom:
            lines.append(band.bottom)
        return lines

    def _footer_top(self, layout: Layout, band: Band) -> str:
        if band.is_empty and self.closing is not None:
            rule = border_line(self.closing, layout.widths, layout.visible_columns)
            return layout.indent(rule)
        return band.top

    def render_titles(self, layout: Layout, titles: Sequence[str]) -> list[str]:
        return ["", *(layout.center_line(title) for title in titles), ""]

    def render_footnotes(self, footnotes: Sequence[str]) -> list[str]:
        numbered = [f"{i}. {note}" for i, note in enumerate(footnotes, start=1)]
        longest = max((rune_width(line) for line in numbered), default=0)
        return ["", self.hr * longest, *numbered, ""]


# ---------------------------------------------------------------------------
# Built-in styles
# ---------------------------------------------------------------------------

CLASSIC = Style(
    name="classic",
    header=BandGlyphs(
        top=("╔", "═", "╦", "╗"),
        content=("║", "║", "║"),
        bottom=("╠", "═", "╪", "╣"),
    ),
    body=BandGlyphs(
        top=("╟", "─", "┼", "╢"),
        content=("║", "│", "║"),
        bottom=("╟", "─", "┼", "╢"),
    ),
    footer=BandGlyphs(
        top=("╚", "═", "╧", "╝"),
        content=(" ", " ", " "),
        bottom=(" ", " ", " ", " "),
    ),
    skip_body_top=True,
    skip_last_body_bottom=True,
    skip_footer_bottom=True,
)

SMOOTH = Style(
    name="smooth",
    header=BandGlyphs(
        top=("╭", "─", "┬", "╮"),
        content=("│", "│", "│"),
        bottom=("├", "─", "┼", "┤"),
    ),
    body=BandGlyphs(
        top=("├", "─", "┼", "┤"),
        content=("│", "│", "│"),
        bottom=("├", "─", "┼", "┤"),
    ),
    footer=BandGlyphs(
        top=("├", "─", "┴", "┤"),
        content=("│", " ", "│"),
        bottom=("╰", "─", "─", "╯"),
    ),
    skip_body_top=True,
    skip_last_body_bottom=True,
    closing=("╰", "─", "┴", "╯"),
)

MODERN = Style(
    name="modern",
    header=BandGlyphs(
        top=(" ", " ", " ", " "),
        content=(" ", " ", " "),
        bottom=("━", "━", "━", "━"),
    ),
    body=BandGlyphs(
        top=(" ", " ", " ", " "),
        content=(" ", " ", " "),
        bottom=(" ", " ", " ", " "),
    ),
    footer=BandGlyphs(
        top=("━", "━", "━", "━"),
        content=(" ", " ", " "),
        bottom=(" ", " ", " ", " "),
    ),
    skip_header_top=True,
    skip_body_top=True,
    skip_last_body_bottom=True,
)

MINIMAL = Style(
    name="minimal",
    header=BandGlyphs(
        top=(" ", " ", " ", " "),
        content=(" ", " ", " "),
        bottom=("─", "─", "─", "─"),
    ),
    body=BandGlyphs(
        top=(" ", " ", " ", " "),
        content=(" ", " ", " "),
        bottom=(" ", " ", " ", " "),
    ),
    footer=BandGlyphs(
        top=("─", "─", "─", "─"),
        content=(" ", " ", " "),
        bottom=(" ", " ", " ", " "),
    ),
    skip_header_top=True,
    skip_body_top=True,
    skip_body_bottom=True,
    skip_footer_bottom=True,
)

DEFAULT_STYLE = CLASSIC.name

STYLES: dict[str, Style] = {style.name: style for style in (CLASSIC, SMOOTH, MODERN, MINIMAL)}


def register_style(style: Style) -> None:
    """Make *style* available to ``load_style`` under its (lower-cased) name."""
    STYLES[style.name.lower()] = style


def load_style(name: str | None = None) -> Style:
    """Return the named style; unknown or missing names give the default."""
    if name is None:
        return STYLES[DEFAULT_STYLE]
    style = STYLES.get(name.lower())
    if style is None:
        logger.debug("Unknown style %r, falling back to %r", name, DEFAULT_STYLE)
        return STYLES[DEFAULT_STYLE]
    return style
