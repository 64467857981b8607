"""litorg: block-dependency resolution and weaving for literate Org documents."""

from litorg.corpus import DocumentSource, LineCorpus, corpus_from_texts, load_corpus
from litorg.document import (
    ORG_LANGUAGE,
    Language,
    Rule,
    element_repr,
    fuse_elements,
    parse_lines,
)
from litorg.engine import RunResult, build_graph, execute, run, run_texts
from litorg.errors import (
    BadFilename,
    ConflictingFlags,
    DepthExceeded,
    DuplicateDeclaration,
    InvalidFlagValue,
    LitorgError,
    MalformedParameterString,
    MissingFlags,
    UnknownBlockName,
    UnparsableLine,
)
from litorg.graph_builder import (
    build_block_graph,
    build_block_graph_from_elements,
    graph_diagnostics_report,
)
from litorg.graph_types import BlockGraph, BodySpan, DependencyRecord, graph_to_dict
from litorg.parameters import Parameter, ParameterSet, fuse_parameters, parse_parameters
from litorg.request import Request, parse_request
from litorg.resolver import Resolution, resolution_to_dict, resolve
from litorg.tangle import TangleOutput, tangle, weave_target, write_tangles
from litorg.types import CodeBlock, Element, GenericBlock, Metadata, Prose, Section, Whitespace
from litorg.weaver import (
    WeaveOptions,
    expand_self_inclusion,
    render_stream,
    weave_block,
    weave_blocks,
)

__all__ = [
    "BadFilename",
    "BlockGraph",
    "BodySpan",
    "CodeBlock",
    "ConflictingFlags",
    "DependencyRecord",
    "DepthExceeded",
    "DocumentSource",
    "DuplicateDeclaration",
    "Element",
    "GenericBlock",
    "InvalidFlagValue",
    "Language",
    "LineCorpus",
    "LitorgError",
    "MalformedParameterString",
    "Metadata",
    "MissingFlags",
    "ORG_LANGUAGE",
    "Parameter",
    "ParameterSet",
    "Prose",
    "Request",
    "Resolution",
    "Rule",
    "RunResult",
    "Section",
    "TangleOutput",
    "UnknownBlockName",
    "UnparsableLine",
    "WeaveOptions",
    "Whitespace",
    "build_block_graph",
    "build_block_graph_from_elements",
    "build_graph",
    "corpus_from_texts",
    "element_repr",
    "execute",
    "expand_self_inclusion",
    "fuse_elements",
    "fuse_parameters",
    "graph_diagnostics_report",
    "graph_to_dict",
    "load_corpus",
    "parse_lines",
    "parse_parameters",
    "parse_request",
    "render_stream",
    "resolution_to_dict",
    "resolve",
    "run",
    "run_texts",
    "tangle",
    "weave_block",
    "weave_blocks",
    "weave_target",
    "write_tangles",
]
