"""Document element types produced by the parser.

Every element records ``start``, the corpus index of its first line, and
keeps the raw lines it was made from so the fuser can rebuild the document
exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from litorg.parameters import ParameterSet


@dataclass(frozen=True, slots=True)
class Section:
    """Section marker, a new branch of the document tree."""

    start: int
    level: int
    title: str
    raw: str

    def __post_init__(self) -> None:
        if self.level <= 0:
            raise ValueError(f"level must be > 0, got {self.level}")


@dataclass(frozen=True, slots=True)
class Prose:
    """Content meant for human consumption."""

    start: int
    lines: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class Metadata:
    """``#+name: value`` line holding metadata about the document."""

    start: int
    name: str
    raw_value: str
    raw: str


@dataclass(frozen=True, slots=True)
class GenericBlock:
    """``#+begin_<kind>`` ... ``#+end_<kind>`` block other than source code."""

    start: int
    kind: str
    opening: str
    lines: tuple[str, ...]
    closing: str


@dataclass(frozen=True, slots=True)
class CodeBlock:
    """``#+begin_src`` block, content meant for machine consumption."""

    start: int
    language: str
    parameters: ParameterSet
    opening: str
    lines: tuple[str, ...]
    closing: str


@dataclass(frozen=True, slots=True)
class Whitespace:
    """Run of blank lines."""

    start: int
    lines: tuple[str, ...]


Element: TypeAlias = Section | Prose | Metadata | GenericBlock | CodeBlock | Whitespace
