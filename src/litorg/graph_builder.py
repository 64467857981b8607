"""Block graph builder.

Recognized directives::

    #+name: greet               binds the next #+begin_src body to `greet`
    #+begin_src cpp :noweb-ref all
                                binds the body to `all` as well; when the
                                block is also named, the name becomes a
                                contributor of the `all` aggregate
    #+depends:greet :cpp iostream :noweb helpers
                                dependency record of `greet`
    #+tangle:greet src/greet.cpp
                                tangle target of `greet`

Two scanners feed the same accumulator: ``build_block_graph`` walks raw
corpus lines, ``build_block_graph_from_elements`` walks parsed elements
and therefore ignores directive-looking lines inside block bodies.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from litorg.config import (
    BOOTSTRAP_NAME,
    EXTERNAL_REFS_KEY,
    NESTED_REFS_KEY,
    REFERENCE_NAME_KEY,
)
from litorg.corpus import LineCorpus
from litorg.document import is_begin_src, is_end_src, parse_begin_src
from litorg.errors import DuplicateDeclaration
from litorg.graph_types import BlockGraph, BodySpan, DependencyRecord, graph_to_dict
from litorg.parameters import parse_parameters
from litorg.types import CodeBlock, Element, Metadata

log = logging.getLogger(__name__)

_NAME_RE = re.compile(r"^\s*#\+name:\s*(\S.*?)\s*$", re.IGNORECASE)
_DEPENDS_RE = re.compile(r"^\s*#\+depends:(\S+)\s+(.*?)\s*$", re.IGNORECASE)
_TANGLE_RE = re.compile(r"^\s*#\+tangle:(\S+)\s+(.*?)\s*$", re.IGNORECASE)


class _GraphAccumulator:
    """Mutable tables used only while scanning; ``finish`` freezes them."""

    def __init__(self, corpus: LineCorpus, *, collect_tangles: bool = True) -> None:
        self.corpus = corpus
        self.collect_tangles = collect_tangles
        self.blocks: dict[str, list[BodySpan]] = {}
        self.dependencies: dict[str, DependencyRecord] = {}
        self.aggregates: dict[str, list[str]] = {}
        self.tangles: dict[str, str] = {}
        self._names_by_opening: dict[int, str] = {}

    def _span_at(self, opening: int) -> BodySpan:
        lines = self.corpus.lines
        end = opening + 1
        while end < len(lines) and not is_end_src(lines[end]):
            end += 1
        _, params = parse_begin_src(lines[opening])
        return BodySpan(
            opening=opening,
            start=opening + 1,
            end=end,
            expand_markers=params.first(NESTED_REFS_KEY) != "no",
        )

    def _bind(self, name: str, span: BodySpan) -> None:
        spans = self.blocks.setdefault(name, [])
        if span not in spans:
            spans.append(span)

    def bind_name(self, name: str, opening: int) -> None:
        if name != BOOTSTRAP_NAME and name in self.blocks:
            raise DuplicateDeclaration(
                "named code block",
                name,
                location=self.corpus.describe(opening - 1),
            )
        log.debug("named block %s at %s", name, self.corpus.describe(opening))
        self._names_by_opening[opening] = name
        self._bind(name, self._span_at(opening))

    def open_block(self, opening: int) -> None:
        _, params = parse_begin_src(self.corpus.lines[opening])
        reference = params.first(REFERENCE_NAME_KEY)
        if reference is None:
            return
        log.debug("reference %s at %s", reference, self.corpus.describe(opening))
        self._bind(reference, self._span_at(opening))
        declared = self._names_by_opening.get(opening)
        if declared is not None and declared != reference:
            self.aggregates.setdefault(reference, []).append(declared)

    def declare_dependencies(self, name: str, parameter_string: str, index: int) -> None:
        if name in self.dependencies:
            raise DuplicateDeclaration("dependency", name, location=self.corpus.describe(index))
        params = parse_parameters(parameter_string)
        self.dependencies[name] = DependencyRecord(
            external_refs=params.get(EXTERNAL_REFS_KEY) or (),
            nested_refs=params.get(NESTED_REFS_KEY) or (),
        )

    def declare_tangle(self, name: str, destination: str, index: int) -> None:
        if name in self.tangles:
            raise DuplicateDeclaration("tangle target", name, location=self.corpus.describe(index))
        self.tangles[name] = destination

    def scan_line(self, index: int) -> None:
        """Apply the first directive matching the line at ``index``."""
        lines = self.corpus.lines
        line = lines[index]
        if match := _NAME_RE.match(line):
            if index + 1 < len(lines) and is_begin_src(lines[index + 1]):
                self.bind_name(match.group(1), index + 1)
        elif is_begin_src(line):
            self.open_block(index)
        elif match := _DEPENDS_RE.match(line):
            self.declare_dependencies(match.group(1), match.group(2), index)
        elif self.collect_tangles and (match := _TANGLE_RE.match(line)):
            self.declare_tangle(match.group(1), match.group(2), index)

    def finish(self) -> BlockGraph:
        # Aggregates carry their own record followed by every contributor's.
        dependencies = dict(self.dependencies)
        for reference, contributors in self.aggregates.items():
            record = dependencies.get(reference, DependencyRecord())
            for contributor in contributors:
                record = record.merged(self.dependencies.get(contributor, DependencyRecord()))
            dependencies[reference] = record
        return BlockGraph(
            corpus=self.corpus,
            blocks={name: tuple(spans) for name, spans in self.blocks.items()},
            dependencies=dependencies,
            aggregates={name: tuple(names) for name, names in self.aggregates.items()},
            tangles=self.tangles,
        )


def build_block_graph(corpus: LineCorpus, *, collect_tangles: bool = True) -> BlockGraph:
    """Build the block graph by scanning raw corpus lines once.

    With ``collect_tangles=False`` the ``#+tangle:`` lines are skipped
    entirely, duplicates included.
    """
    acc = _GraphAccumulator(corpus, collect_tangles=collect_tangles)
    for index in range(len(corpus)):
        acc.scan_line(index)
    return acc.finish()


def build_block_graph_from_elements(
    corpus: LineCorpus,
    elements: Sequence[Element],
    *,
    collect_tangles: bool = True,
) -> BlockGraph:
    """Build the block graph from parsed elements of ``corpus``.

    Only directive lines (metadata elements and code block openings) are
    inspected. An unterminated ``#+begin_src`` parses as metadata and is
    still treated as a block opening running to the end of the corpus.
    """
    acc = _GraphAccumulator(corpus, collect_tangles=collect_tangles)
    for element in elements:
        match element:
            case Metadata(start=start) | CodeBlock(start=start):
                acc.scan_line(start)
            case _:
                continue
    return acc.finish()


def graph_diagnostics_report(graph: BlockGraph) -> dict[str, object]:
    """Return deterministic summary counts for tests/reporting."""

    payload = graph_to_dict(graph)
    spontaneous = {
        name
        for record in graph.dependencies.values()
        for name in record.nested_refs
        if not graph.is_known(name)
    }
    return {
        "graph_stats": {
            "line_count": len(graph.corpus),
            "document_count": len(graph.corpus.documents),
            "block_name_count": len(graph.blocks),
            "body_span_count": sum(len(spans) for spans in graph.blocks.values()),
            "dependency_record_count": len(graph.dependencies),
            "aggregate_count": len(graph.aggregates),
            "tangle_target_count": len(graph.tangles),
        },
        "aggregates": payload["aggregates"],
        "tangles": payload["tangles"],
        "undeclared_nested_refs": sorted(spontaneous),
    }
