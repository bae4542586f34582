"""Output width discovery.

Provides a ``Terminal`` protocol exposing the number of columns available for
output, a ``ProcessTerminal`` backed by the process's stdout, and a
``FixedTerminal`` for non-interactive destinations such as log files.
"""

from __future__ import annotations

import os
import sys
from typing import Protocol


class Terminal(Protocol):
    """Anything that can report the output width in columns."""

    @property
    def columns(self) -> int | None: ...


class ProcessTerminal:
    """Terminal backed by ``sys.stdout``.

    ``columns`` is ``None`` when stdout is not attached to a terminal, e.g.
    when output is piped or redirected. Centering then degrades to no offset.
    """

    @property
    def columns(self) -> int | None:
        try:
            return os.get_terminal_size(sys.stdout.fileno()).columns
        except (AttributeError, ValueError, OSError):
            return None


class FixedTerminal:
    """Terminal with a constant width."""

    def __init__(self, columns: int | None) -> None:
        self._columns = columns

    @property
    def columns(self) -> int | None:
        return self._columns

    @columns.setter
    def columns(self, value: int | None) -> None:
        self._columns = value
