"""Cells and their deferred display transforms."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%s"

TransformKind = Literal["identity", "custom", "restored"]


def format_value(fmt: str, value: Any) -> str:
    """Apply a printf-style single-value format, falling back to ``str``."""
    try:
        return fmt % (value,)
    except (TypeError, ValueError, KeyError) as e:
        logger.debug("Format %r does not apply to %r: %s", fmt, value, e)
        return str(value)


@dataclass(frozen=True)
class Transform:
    """Display transform attached to a cell.

    The transform is only invoked at render/export time:

    * ``identity`` leaves the value untouched.
    * ``custom`` wraps a caller-supplied ``value -> value`` function.
    * ``restored`` carries an already transformed string read back from rich
      JSON, since transform functions cannot be serialized.
    """

    kind: TransformKind = "identity"
    fn: Callable[[Any], Any] | None = None
    text: str | None = None

    @classmethod
    def identity(cls) -> Transform:
        return _IDENTITY

    @classmethod
    def custom(cls, fn: Callable[[Any], Any]) -> Transform:
        return cls(kind="custom", fn=fn)

    @classmethod
    def restored(cls, text: str) -> Transform:
        return cls(kind="restored", text=text)

    @property
    def is_identity(self) -> bool:
        return self.kind == "identity"

    def apply(self, value: Any) -> Any:
        if self.kind == "custom" and self.fn is not None:
            return self.fn(value)
        if self.kind == "restored":
            return self.text
        return value


_IDENTITY = Transform()


@dataclass
class Cell:
    """A raw value plus its deferred transform."""

    value: Any = None
    transform: Transform = field(default_factory=Transform.identity)

    def render(self, fmt: str = DEFAULT_FORMAT, transformed: bool = False) -> str:
        """Return the formatted raw or transformed string.

        Strings are formatted line by line and lists/tuples element by element,
        the parts joined with line breaks. When *transformed* is set, the
        transform is applied to every part before formatting.
        """
        if transformed and self.transform.kind == "restored":
            return self.transform.text or ""

        apply = self.transform.apply if transformed else _unchanged

        value = self.value
        if isinstance(value, str):
            parts: list[Any] = value.split("\n")
        elif isinstance(value, (list, tuple)):
            parts = list(value)
        else:
            return format_value(fmt, apply(value))

        return "\n".join(format_value(fmt, apply(part)) for part in parts)

    def copy(self) -> Cell:
        value = self.value
        if isinstance(value, list):
            value = list(value)
        return Cell(value=value, transform=self.transform)


def _unchanged(value: Any) -> Any:
    return value
