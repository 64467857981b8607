"""Rule-based parser turning corpus lines into document elements.

A ``Rule`` says how many lines it takes from the front of the remaining
input and how to make an element out of them. Rules are tried in order and
the first one taking a non-zero number of lines wins, so rule order matters
more than content: Org code blocks must be tried before generic blocks,
which must be tried before single metadata lines.

Fusing is the dual of parsing: ``fuse_elements(parse_lines(x)) == x``.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, TypeAlias, assert_never, overload

from litorg.errors import UnparsableLine
from litorg.parameters import ParameterSet, fuse_parameters, parse_parameters
from litorg.types import (
    CodeBlock,
    Element,
    GenericBlock,
    Metadata,
    Prose,
    Section,
    Whitespace,
)

Predicate: TypeAlias = Callable[[str], bool]
Taker: TypeAlias = Callable[[Sequence[str]], int]
Maker: TypeAlias = Callable[[Sequence[str], int], Element]


@dataclass(frozen=True, slots=True)
class Rule:
    """Smallest parsing entity: how many lines to take, how to make an element."""

    name: str
    take: Taker
    make: Maker


# ---------------------------------------------------------------------------
# Taker builders
# ---------------------------------------------------------------------------


def greedy_take(pred: Predicate) -> Taker:
    """Take every consecutive line satisfying ``pred``."""

    def take(lines: Sequence[str]) -> int:
        for i, line in enumerate(lines):
            if not pred(line):
                return i
        return len(lines)

    return take


def first_take(pred: Predicate) -> Taker:
    """Take only the first line, when it satisfies ``pred``."""

    def take(lines: Sequence[str]) -> int:
        return 1 if pred(lines[0]) else 0

    return take


def between_take(first: Predicate, last: Callable[[str, str], bool]) -> Taker:
    """Take from a ``first`` line up to and including the closing line.

    ``last`` receives the opening line along with the candidate so that the
    closing pattern can depend on it (``#+begin_quote`` / ``#+end_quote``).
    Returns 0 when the span is never closed.
    """

    def take(lines: Sequence[str]) -> int:
        if not first(lines[0]):
            return 0
        for i in range(1, len(lines)):
            if last(lines[0], lines[i]):
                return i + 1
        return 0

    return take


def trailing_take(maybe: Predicate, otherwise: Predicate) -> Taker:
    """Take ``otherwise`` lines, plus ``maybe`` lines only when more follow.

    ``maybe`` lines are never the last line taken, so trailing blank lines
    stay attached to the next element. A line matching both predicates is
    treated as ``maybe``.
    """

    def take(lines: Sequence[str]) -> int:
        last_core = -1
        for i, line in enumerate(lines):
            if maybe(line):
                continue
            if not otherwise(line):
                break
            last_core = i
        return last_core + 1

    return take


# ---------------------------------------------------------------------------
# Org matching
# ---------------------------------------------------------------------------

_SECTION_RE = re.compile(r"^(\*+) (.+)$")
_BEGIN_SRC_RE = re.compile(r"^\s*#\+begin_src\b", re.IGNORECASE)
_END_SRC_RE = re.compile(r"^\s*#\+end_src\b", re.IGNORECASE)
_BEGIN_BLOCK_RE = re.compile(r"^\s*#\+begin_(\w+)", re.IGNORECASE)
_END_BLOCK_RE = re.compile(r"^\s*#\+end_(\w+)", re.IGNORECASE)
_PROPERTY_RE = re.compile(r"^\s*#\+")
_PARAMS_START_RE = re.compile(r"(?<=\s):")


def _chomp(line: str) -> str:
    return line.rstrip("\r\n")


def is_blank(line: str) -> bool:
    return line.strip() == ""


def is_section(line: str) -> bool:
    return _SECTION_RE.match(_chomp(line)) is not None


def is_property(line: str) -> bool:
    return _PROPERTY_RE.match(line) is not None


def is_begin_src(line: str) -> bool:
    return _BEGIN_SRC_RE.match(line) is not None


def is_end_src(line: str) -> bool:
    return _END_SRC_RE.match(line) is not None


def _block_kind(line: str) -> str | None:
    match = _BEGIN_BLOCK_RE.match(line)
    return match.group(1).lower() if match else None


def _closes_block(opening: str, line: str) -> bool:
    match = _END_BLOCK_RE.match(line)
    return match is not None and match.group(1).lower() == _block_kind(opening)


def parse_begin_src(line: str) -> tuple[str, ParameterSet]:
    """Split a ``#+begin_src`` line into its language and parameters.

    Anything between the language and the first ``:`` parameter (Org
    switches such as ``-n``) is ignored.
    """
    rest = _BEGIN_SRC_RE.sub("", _chomp(line), count=1).strip()
    if not rest:
        return "", ParameterSet()
    language = rest.split()[0]
    params_start = _PARAMS_START_RE.search(rest)
    if params_start is None:
        return language, ParameterSet()
    return language, parse_parameters(rest[params_start.start():])


# ---------------------------------------------------------------------------
# Makers
# ---------------------------------------------------------------------------


def _make_section(lines: Sequence[str], start: int) -> Element:
    match = _SECTION_RE.match(_chomp(lines[0]))
    assert match is not None
    return Section(start=start, level=len(match.group(1)), title=match.group(2), raw=lines[0])


def _make_code(lines: Sequence[str], start: int) -> Element:
    language, params = parse_begin_src(lines[0])
    return CodeBlock(
        start=start,
        language=language,
        parameters=params,
        opening=lines[0],
        lines=tuple(lines[1:-1]),
        closing=lines[-1],
    )


def _make_generic(lines: Sequence[str], start: int) -> Element:
    return GenericBlock(
        start=start,
        kind=_block_kind(lines[0]) or "",
        opening=lines[0],
        lines=tuple(lines[1:-1]),
        closing=lines[-1],
    )


def _make_metadata(lines: Sequence[str], start: int) -> Element:
    body = _PROPERTY_RE.sub("", _chomp(lines[0]), count=1)
    name, sep, value = body.partition(":")
    return Metadata(start=start, name=name.strip(), raw_value=value.strip() if sep else "", raw=lines[0])


def _make_whitespace(lines: Sequence[str], start: int) -> Element:
    return Whitespace(start=start, lines=tuple(lines))


def _make_prose(lines: Sequence[str], start: int) -> Element:
    return Prose(start=start, lines=tuple(lines))


ORG_RULES: tuple[Rule, ...] = (
    Rule("section", first_take(is_section), _make_section),
    Rule("code", between_take(is_begin_src, lambda _opening, line: is_end_src(line)), _make_code),
    Rule("block", between_take(lambda line: _block_kind(line) is not None, _closes_block), _make_generic),
    Rule("metadata", first_take(is_property), _make_metadata),
    Rule("whitespace", greedy_take(is_blank), _make_whitespace),
    Rule(
        "prose",
        trailing_take(is_blank, lambda line: not is_section(line) and not is_property(line)),
        _make_prose,
    ),
)


# ---------------------------------------------------------------------------
# Parse / fuse
# ---------------------------------------------------------------------------


class LineView(Sequence[str]):
    """Read-only window onto ``lines[start:]`` that does not copy the lines."""

    __slots__ = ("_lines", "_start")

    def __init__(self, lines: Sequence[str], start: int = 0) -> None:
        self._lines = lines
        self._start = start

    def __len__(self) -> int:
        return max(len(self._lines) - self._start, 0)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> list[str]: ...

    def __getitem__(self, index: int | slice) -> str | list[str]:
        if isinstance(index, slice):
            return [self._lines[self._start + i] for i in range(len(self))[index]]
        if index < 0:
            index += len(self)
        if not 0 <= index < len(self):
            raise IndexError("line view index out of range")
        return self._lines[self._start + index]

    def __iter__(self) -> Iterator[str]:
        return (self._lines[i] for i in range(self._start, len(self._lines)))


def parse_lines(
    lines: Sequence[str],
    rules: Sequence[Rule] = ORG_RULES,
    *,
    offset: int = 0,
) -> list[Element]:
    """Parse ``lines`` into elements covering every line exactly once.

    ``offset`` is the corpus index of ``lines[0]``. Raises ``UnparsableLine``
    when no rule takes the current line.
    """
    elements: list[Element] = []
    pos = 0
    while pos < len(lines):
        remaining = LineView(lines, pos)
        for rule in rules:
            taken = rule.take(remaining)
            if taken > 0:
                elements.append(rule.make(remaining[:taken], offset + pos))
                pos += taken
                break
        else:
            raise UnparsableLine(offset + pos, lines[pos])
    return elements


def element_lines(element: Element) -> tuple[str, ...]:
    """Return the raw lines an element was made from."""
    match element:
        case Section(raw=raw) | Metadata(raw=raw):
            return (raw,)
        case Prose(lines=lines) | Whitespace(lines=lines):
            return lines
        case GenericBlock(opening=opening, lines=lines, closing=closing):
            return (opening, *lines, closing)
        case CodeBlock(opening=opening, lines=lines, closing=closing):
            return (opening, *lines, closing)
        case _:
            assert_never(element)


def fuse_elements(elements: Sequence[Element]) -> list[str]:
    """Rebuild the document lines from parsed elements."""
    fused: list[str] = []
    for element in elements:
        fused.extend(element_lines(element))
    return fused


def element_repr(element: Element) -> list[str]:
    """Short human-readable rendering used by ``--dump``."""
    match element:
        case Section(level=level, title=title):
            return [f"level={level}, title={title}"]
        case Metadata(name=name, raw_value=raw_value):
            return [f"{name}={raw_value}"]
        case Prose(lines=lines) | Whitespace(lines=lines):
            return [_chomp(line) for line in lines]
        case GenericBlock(kind=kind, lines=lines):
            return [f"type={kind}", *(_chomp(line) for line in lines)]
        case CodeBlock(language=language, parameters=params, lines=lines):
            return [f"lang={language}", f"Params={fuse_parameters(params)}", *(_chomp(line) for line in lines)]
        case _:
            assert_never(element)


def element_to_dict(element: Element) -> dict[str, Any]:
    """Serialize an element to a JSON-safe dict."""
    payload: dict[str, Any] = {
        "type": type(element).__name__,
        "start": element.start,
        "line_count": len(element_lines(element)),
    }
    match element:
        case Section(level=level, title=title):
            payload.update(level=level, title=title)
        case Metadata(name=name, raw_value=raw_value):
            payload.update(name=name, raw_value=raw_value)
        case GenericBlock(kind=kind):
            payload.update(kind=kind)
        case CodeBlock(language=language, parameters=params):
            payload.update(language=language, parameters=params.items())
        case Prose() | Whitespace():
            pass
        case _:
            assert_never(element)
    return payload


@dataclass(frozen=True, slots=True)
class Language:
    """Everything needed to parse and fuse one kind of literate document."""

    identifiers: tuple[str, ...]
    extensions: tuple[str, ...]
    rules: tuple[Rule, ...]

    def parse(self, lines: Sequence[str], *, offset: int = 0) -> list[Element]:
        return parse_lines(lines, self.rules, offset=offset)

    def fuse(self, elements: Sequence[Element]) -> list[str]:
        return fuse_elements(elements)


ORG_LANGUAGE = Language(identifiers=("org",), extensions=(".org",), rules=ORG_RULES)

LANGUAGES: tuple[Language, ...] = (ORG_LANGUAGE,)


def language_for_path(path: str | Path) -> Language:
    """Pick a language by file extension, defaulting to Org."""
    suffix = Path(path).suffix.lower()
    for language in LANGUAGES:
        if suffix in language.extensions:
            return language
    return ORG_LANGUAGE
