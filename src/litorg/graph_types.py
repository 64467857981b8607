"""Block graph types: named bodies, dependency records and aggregates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, TypeVar

from litorg.corpus import LineCorpus


@dataclass(frozen=True, slots=True)
class BodySpan:
    """Location of one block body in the corpus.

    ``opening`` is the ``#+begin_src`` line, ``[start, end)`` the body
    lines; ``end`` is the closing ``#+end_src`` line or the corpus length
    when the block is never closed.
    """

    opening: int
    start: int
    end: int
    expand_markers: bool = True

    def __post_init__(self) -> None:
        if self.opening < 0:
            raise ValueError(f"opening must be >= 0, got {self.opening}")
        if self.start != self.opening + 1:
            raise ValueError("start must directly follow opening")
        if self.end < self.start:
            raise ValueError(f"end must be >= start, got {self.end} < {self.start}")


@dataclass(frozen=True, slots=True)
class DependencyRecord:
    """Declared dependencies of one name, in declaration order."""

    external_refs: tuple[str, ...] = ()
    nested_refs: tuple[str, ...] = ()

    def merged(self, other: DependencyRecord) -> DependencyRecord:
        """Append ``other``'s lists after this record's own."""
        return DependencyRecord(
            external_refs=self.external_refs + other.external_refs,
            nested_refs=self.nested_refs + other.nested_refs,
        )


_EMPTY_RECORD = DependencyRecord()

V = TypeVar("V")


def _frozen(mapping: Mapping[str, V] | None) -> Mapping[str, V]:
    return MappingProxyType(dict(mapping or {}))


@dataclass(frozen=True, slots=True)
class BlockGraph:
    """Read-only tables built once per run from the whole corpus."""

    corpus: LineCorpus
    blocks: Mapping[str, tuple[BodySpan, ...]] = field(default_factory=dict)
    dependencies: Mapping[str, DependencyRecord] = field(default_factory=dict)
    aggregates: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    tangles: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blocks", _frozen(self.blocks))
        object.__setattr__(self, "dependencies", _frozen(self.dependencies))
        object.__setattr__(self, "aggregates", _frozen(self.aggregates))
        object.__setattr__(self, "tangles", _frozen(self.tangles))

    def is_known(self, name: str) -> bool:
        return name in self.blocks or name in self.dependencies or name in self.aggregates

    def dependencies_of(self, name: str) -> DependencyRecord:
        return self.dependencies.get(name, _EMPTY_RECORD)

    def contributors(self, name: str) -> tuple[str, ...]:
        return self.aggregates.get(name, ())

    def spans(self, name: str) -> tuple[BodySpan, ...]:
        return self.blocks.get(name, ())

    def body_lines(self, span: BodySpan) -> tuple[str, ...]:
        return self.corpus.lines[span.start:span.end]

    def known_names(self) -> list[str]:
        return sorted({*self.blocks, *self.dependencies, *self.aggregates})


def graph_to_dict(graph: BlockGraph) -> dict[str, Any]:
    """Serialize a graph to a deterministic JSON-safe dict."""

    return {
        "blocks": {
            name: [
                {
                    "opening": span.opening,
                    "start": span.start,
                    "end": span.end,
                    "expand_markers": span.expand_markers,
                    "location": graph.corpus.describe(span.opening),
                }
                for span in spans
            ]
            for name, spans in sorted(graph.blocks.items())
        },
        "dependencies": {
            name: {
                "external_refs": list(record.external_refs),
                "nested_refs": list(record.nested_refs),
            }
            for name, record in sorted(graph.dependencies.items())
        },
        "aggregates": {name: list(contributors) for name, contributors in sorted(graph.aggregates.items())},
        "tangles": [{"name": name, "destination": dest} for name, dest in graph.tangles.items()],
    }
