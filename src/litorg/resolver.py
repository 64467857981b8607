"""Dependency closure resolver.

Depth-first, post-order traversal over ``:noweb`` edges: every name lands
in ``Resolution.block_names`` after all of its nested dependencies, and
``:cpp`` references are collected in first-discovery order. Names are
marked seen before their dependencies are visited, so duplicates and cycles
are visited once. A fresh ``ResolutionState`` is used per call and the
graph is never mutated.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from litorg.config import DEFAULT_RESOLUTION_DEPTH
from litorg.errors import DepthExceeded
from litorg.graph_types import BlockGraph


@dataclass(frozen=True, slots=True)
class Resolution:
    """Ordered, deduplicated closure of one request.

    ``spontaneous`` lists resolved names that own no block body, i.e. names
    resolved only as dependency carriers or never declared at all.
    """

    external_refs: tuple[str, ...]
    block_names: tuple[str, ...]
    spontaneous: tuple[str, ...] = ()


@dataclass(slots=True)
class ResolutionState:
    seen_external: set[str] = field(default_factory=set)
    seen_names: set[str] = field(default_factory=set)
    external_refs: list[str] = field(default_factory=list)
    block_names: list[str] = field(default_factory=list)
    spontaneous: list[str] = field(default_factory=list)

    def add_external(self, ref: str) -> None:
        if ref not in self.seen_external:
            self.seen_external.add(ref)
            self.external_refs.append(ref)

    def freeze(self) -> Resolution:
        return Resolution(
            external_refs=tuple(self.external_refs),
            block_names=tuple(self.block_names),
            spontaneous=tuple(self.spontaneous),
        )


def _visit(
    graph: BlockGraph,
    name: str,
    state: ResolutionState,
    *,
    depth: int,
    max_depth: int,
) -> None:
    if name in state.seen_names:
        return
    if depth > max_depth:
        raise DepthExceeded("dependency resolution", max_depth, name)
    state.seen_names.add(name)
    if not graph.spans(name):
        state.spontaneous.append(name)

    record = graph.dependencies_of(name)
    for ref in record.external_refs:
        state.add_external(ref)

    # Contributors are printed as part of their aggregate; never again on their own.
    state.seen_names.update(graph.contributors(name))

    for nested in record.nested_refs:
        _visit(graph, nested, state, depth=depth + 1, max_depth=max_depth)
    state.block_names.append(name)


def resolve(
    graph: BlockGraph,
    names: Iterable[str],
    external_refs: Iterable[str] = (),
    *,
    max_depth: int = DEFAULT_RESOLUTION_DEPTH,
) -> Resolution:
    """Resolve requested block names and external references.

    Requested external references are appended after the traversal,
    deduplicated against those the traversal discovered.
    """
    state = ResolutionState()
    for name in names:
        _visit(graph, name, state, depth=0, max_depth=max_depth)
    for ref in external_refs:
        state.add_external(ref)
    return state.freeze()


def resolution_to_dict(resolution: Resolution) -> dict[str, Any]:
    return {
        "external_refs": list(resolution.external_refs),
        "block_names": list(resolution.block_names),
        "spontaneous": list(resolution.spontaneous),
    }
