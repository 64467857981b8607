"""Weaver: expands nested block references into final text.

Inside a block body, a line holding a marker is replaced by the referenced
block::

        <<helpers>>                       naked marker
        <<include(":noweb a b")>>         self-inclusion of a fresh request

The whole line is replaced, including any text around the marker. Expanded
lines are prefixed with the whitespace directly before ``<<`` plus whatever
indentation enclosing markers already contributed. Blocks opened with
``:noweb no`` are copied verbatim. Every expansion entry checks the depth
ceiling (top-level blocks sit at depth 0), which turns cyclic references
into a ``DepthExceeded`` error.

Org escapes body lines starting with ``#+`` or ``*`` by prefixing a comma;
exactly one leading comma is removed on output.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from litorg.config import (
    BOOTSTRAP_NAME,
    DEFAULT_MAX_WEAVE_DEPTH,
    DEFAULT_RESOLUTION_DEPTH,
    EXTERNAL_REFS_KEY,
    INCLUSION_TEMPLATE,
    MAX_WEAVE_DEPTH_LIMIT,
    NESTED_REFS_KEY,
)
from litorg.errors import DepthExceeded, UnknownBlockName
from litorg.graph_types import BlockGraph
from litorg.parameters import parse_parameters
from litorg.resolver import Resolution, resolve

_MARKER_RE = re.compile(r"(\s*)<<(.+)>>")
_CALL_RE = re.compile(r'^([\w.-]+)\("(.*)"\)$')
_ESCAPED_RE = re.compile(r"^,(,*(?:#\+|\*))")


@dataclass(frozen=True, slots=True)
class WeaveOptions:
    max_depth: int = DEFAULT_MAX_WEAVE_DEPTH
    c_string: bool = False
    bootstrap_name: str = BOOTSTRAP_NAME
    inclusion_template: str = INCLUSION_TEMPLATE
    resolution_depth: int = DEFAULT_RESOLUTION_DEPTH

    def __post_init__(self) -> None:
        if not 0 <= self.max_depth <= MAX_WEAVE_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be between 0 and {MAX_WEAVE_DEPTH_LIMIT}, got {self.max_depth}",
            )
        if "{ref}" not in self.inclusion_template:
            raise ValueError("inclusion_template must contain {ref}")


@dataclass(slots=True)
class WeaveState:
    """Names already emitted by one top-level weave call."""

    emitted: set[str] = field(default_factory=set)

    def is_done(self, name: str) -> bool:
        return name in self.emitted

    def mark_done(self, graph: BlockGraph, name: str) -> None:
        self.emitted.add(name)
        self.emitted.update(graph.contributors(name))


def unescape_line(line: str) -> str:
    """Drop the first of the commas escaping a ``#+`` or ``*`` line."""
    return _ESCAPED_RE.sub(r"\1", line, count=1)


def quote_lines(lines: Iterable[str]) -> str:
    """Render woven lines as a single C string literal."""
    body = "".join(
        line.rstrip("\r\n").replace("\\", "\\\\").replace('"', '\\"') + "\\n"
        for line in lines
    )
    return f'"{body}"\n'


def _indent(prefix: str, line: str) -> str:
    if not prefix or line in ("\n", "\r\n", ""):
        return line
    return prefix + line


def inclusion_lines(refs: Iterable[str], options: WeaveOptions, *, prefix: str = "") -> list[str]:
    return [_indent(prefix, options.inclusion_template.format(ref=ref)) for ref in refs]


def _expand(
    graph: BlockGraph,
    name: str,
    out: list[str],
    options: WeaveOptions,
    *,
    prefix: str,
    depth: int,
) -> None:
    if not graph.is_known(name):
        raise UnknownBlockName(name, graph.known_names())
    if depth > options.max_depth:
        raise DepthExceeded("noweb inclusion", options.max_depth, name)

    for span in graph.spans(name):
        for line in graph.body_lines(span):
            marker = _MARKER_RE.search(line) if span.expand_markers else None
            if marker is None:
                out.append(_indent(prefix, unescape_line(line)))
                continue
            indent, target = marker.group(1), marker.group(2)
            call = _CALL_RE.match(target)
            if call is not None and call.group(1) == options.bootstrap_name:
                out.extend(
                    expand_self_inclusion(
                        graph,
                        call.group(2),
                        options,
                        prefix=prefix + indent,
                        depth=depth + 1,
                    ),
                )
            else:
                _expand(graph, target, out, options, prefix=prefix + indent, depth=depth + 1)


def expand_self_inclusion(
    graph: BlockGraph,
    flags: str,
    options: WeaveOptions,
    *,
    prefix: str = "",
    depth: int = 1,
) -> list[str]:
    """Expand ``<<include(":noweb a b :cpp x")>>`` as an independent request.

    The flags are resolved on their own; inclusion lines come first, then
    each resolved block. Deduplication is local to this call and does not
    see what the surrounding weave already emitted.
    """
    if depth > options.max_depth:
        raise DepthExceeded("noweb inclusion", options.max_depth, f"{options.bootstrap_name}({flags})")
    params = parse_parameters(flags)
    names = params.get(NESTED_REFS_KEY) or ()
    for name in names:
        if not graph.is_known(name):
            raise UnknownBlockName(name, graph.known_names())
    resolution = resolve(
        graph,
        names,
        params.get(EXTERNAL_REFS_KEY) or (),
        max_depth=options.resolution_depth,
    )

    out = inclusion_lines(resolution.external_refs, options, prefix=prefix)
    state = WeaveState()
    for name in resolution.block_names:
        if state.is_done(name):
            continue
        if graph.spans(name):
            _expand(graph, name, out, options, prefix=prefix, depth=depth)
        state.mark_done(graph, name)
    return out


def weave_block(graph: BlockGraph, name: str, options: WeaveOptions | None = None) -> list[str]:
    """Weave one block at depth 0, without any deduplication."""
    out: list[str] = []
    _expand(graph, name, out, options or WeaveOptions(), prefix="", depth=0)
    return out


def weave_blocks(
    graph: BlockGraph,
    names: Iterable[str],
    options: WeaveOptions | None = None,
    *,
    state: WeaveState | None = None,
) -> str:
    """Weave already-ordered top-level names into one text.

    A name (or any contributor of an aggregate name) emitted once is
    skipped afterwards. Names owning no body emit nothing.
    """
    options = options or WeaveOptions()
    state = state if state is not None else WeaveState()
    chunks: list[str] = []
    for name in names:
        if state.is_done(name):
            continue
        if graph.spans(name):
            lines = weave_block(graph, name, options)
            chunks.append(quote_lines(lines) if options.c_string else "".join(lines))
        state.mark_done(graph, name)
    return "".join(chunks)


def render_stream(
    graph: BlockGraph,
    resolution: Resolution,
    options: WeaveOptions | None = None,
) -> str:
    """Inclusion lines for every external reference, then the woven blocks."""
    options = options or WeaveOptions()
    return "".join(inclusion_lines(resolution.external_refs, options)) + weave_blocks(
        graph,
        resolution.block_names,
        options,
    )
