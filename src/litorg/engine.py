"""Run orchestration: request → corpus → graph → stream or tangle.

The corpus and the block graph are built once per run and stay read-only;
every resolution and every tangle target gets its own state.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from litorg.corpus import LineCorpus, corpus_from_texts, read_documents
from litorg.document import language_for_path
from litorg.errors import UnknownBlockName
from litorg.graph_builder import build_block_graph_from_elements
from litorg.graph_types import BlockGraph
from litorg.request import Request, parse_request
from litorg.resolver import Resolution, resolve
from litorg.tangle import tangle, write_tangles
from litorg.types import Element
from litorg.weaver import render_stream

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RunResult:
    request: Request
    stdout: str
    resolution: Resolution | None = None
    tangled: tuple[Path, ...] = ()


def parse_corpus(corpus: LineCorpus) -> list[Element]:
    """Parse each document of the corpus with the language its name implies."""
    elements: list[Element] = []
    for doc in corpus.documents:
        language = language_for_path(doc.name)
        elements.extend(language.parse(corpus.lines[doc.start:doc.end], offset=doc.start))
    return elements


def build_graph(corpus: LineCorpus, *, collect_tangles: bool = True) -> BlockGraph:
    return build_block_graph_from_elements(
        corpus,
        parse_corpus(corpus),
        collect_tangles=collect_tangles,
    )


def merge_document_names(documents: Sequence[str | Path], defs: Sequence[str]) -> list[str]:
    """Documents followed by ``:defs`` extras, first occurrence kept."""
    merged: list[str] = []
    for name in [*map(str, documents), *defs]:
        if name not in merged:
            merged.append(name)
    return merged


def execute(request: Request, corpus: LineCorpus, *, root: Path | None = None) -> RunResult:
    """Run a validated request against a loaded corpus.

    ``#+tangle:`` declarations are only read when tangling.
    """
    if request.debug:
        logging.getLogger("litorg").setLevel(logging.DEBUG)
    for flag in request.unknown_flags:
        log.warning("ignoring unknown flag :%s", flag)
    graph = build_graph(corpus, collect_tangles=request.tangle)
    log.debug(
        "graph: %d names, %d dependency records, %d aggregates, %d tangle targets",
        len(graph.blocks),
        len(graph.dependencies),
        len(graph.aggregates),
        len(graph.tangles),
    )
    options = request.weave_options()

    if request.tangle:
        outputs = tangle(graph, options)
        written = write_tangles(outputs, root)
        return RunResult(request=request, stdout="", tangled=tuple(written))

    for name in request.noweb:
        if not graph.is_known(name):
            raise UnknownBlockName(name, graph.known_names())
    resolution = resolve(graph, request.noweb, request.cpp)
    if resolution.spontaneous:
        log.debug("resolved without body: %s", ", ".join(resolution.spontaneous))
    return RunResult(
        request=request,
        stdout=render_stream(graph, resolution, options),
        resolution=resolution,
    )


def run(documents: Sequence[str | Path], flags: str, *, root: Path | None = None) -> RunResult:
    """Load ``documents`` (plus ``:defs``) from disk and run the request."""
    request = parse_request(flags)
    names = merge_document_names(documents, request.defs)
    corpus = corpus_from_texts(read_documents(names))
    return execute(request, corpus, root=root)


def run_texts(
    documents: Sequence[tuple[str, str]],
    flags: str,
    *,
    root: Path | None = None,
) -> RunResult:
    """Run the request on in-memory ``(name, text)`` documents.

    ``:defs`` extras are still read from disk.
    """
    request = parse_request(flags)
    names = [name for name, _ in documents]
    extras = [name for name in merge_document_names(names, request.defs) if name not in names]
    corpus = corpus_from_texts([*documents, *read_documents(extras)])
    return execute(request, corpus, root=root)
