"""Render configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from pi.table.styles import DEFAULT_STYLE

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class RenderOptions:
    """Keyword arguments for ``Table.render``.

    ``dataclasses.asdict(options)`` can be splatted into ``Table.render``.
    """

    measure_transformed: bool = False
    print_transformed: bool = True
    centered: bool = False
    style: str = DEFAULT_STYLE
    columns: list[str] = field(default_factory=list)

    @classmethod
    def from_env(cls) -> RenderOptions:
        """Defaults overridable through ``PI_TABLE_STYLE`` and ``PI_TABLE_CENTER``."""
        return cls(
            style=os.environ.get("PI_TABLE_STYLE", DEFAULT_STYLE),
            centered=os.environ.get("PI_TABLE_CENTER", "").strip().lower() in _TRUTHY,
        )
