"""
Indentation-aware string accumulation.

Both emitters append text to an IndentedStringBuilder: ``append`` adds raw
text, ``newline`` starts a new line at the current indentation, and
``indented()`` raises the indentation for a scoped region.

Example:
    >>> builder = IndentedStringBuilder("  ")
    >>> builder.append("Person(")
    >>> with builder.indented():
    ...     builder.newline()
    ...     builder.append("name: str,")
    >>> builder.newline()
    >>> builder.append(")")
    >>> print(builder)
    Person(
      name: str,
    )
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Callable, Iterator


class IndentedStringBuilder:
    """Accumulates text with a current indentation level."""

    def __init__(self, tab: str = "  ") -> None:
        self._tab = tab
        self._parts: list[str] = []
        self._indentation = 0

    @property
    def indentation(self) -> int:
        return self._indentation

    def append(self, obj: Any) -> None:
        self._parts.append(str(obj))

    def newline(self) -> None:
        self._parts.append("\n")
        self._parts.append(self._tab * self._indentation)

    @contextmanager
    def indented(self) -> Iterator[IndentedStringBuilder]:
        self._indentation += 1
        try:
            yield self
        finally:
            self._indentation -= 1

    def __str__(self) -> str:
        return "".join(self._parts)


def build_indented_string(
    build: Callable[[IndentedStringBuilder], None],
    tab: str = "  ",
) -> str:
    """Run ``build`` against a fresh builder and return the accumulated text."""
    builder = IndentedStringBuilder(tab)
    build(builder)
    return str(builder)
