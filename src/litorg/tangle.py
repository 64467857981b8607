"""Tangle mode: write selected blocks out as standalone files.

Each ``#+tangle:<name> <destination>`` target is resolved and woven on its
own, with a fresh resolution and a fresh already-emitted set, so targets
never influence one another.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from litorg.errors import UnknownBlockName
from litorg.graph_types import BlockGraph
from litorg.io_utils import write_text
from litorg.resolver import resolve
from litorg.weaver import WeaveOptions, weave_blocks

log = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TangleOutput:
    name: str
    destination: str
    text: str


def weave_target(graph: BlockGraph, name: str, options: WeaveOptions | None = None) -> str:
    """Resolve ``name`` alone and weave its closure."""
    options = options or WeaveOptions()
    if not graph.is_known(name):
        raise UnknownBlockName(name, graph.known_names())
    resolution = resolve(graph, [name], max_depth=options.resolution_depth)
    return weave_blocks(graph, resolution.block_names, options)


def tangle(graph: BlockGraph, options: WeaveOptions | None = None) -> list[TangleOutput]:
    """Weave every declared tangle target, in declaration order."""
    return [
        TangleOutput(name=name, destination=destination, text=weave_target(graph, name, options))
        for name, destination in graph.tangles.items()
    ]


def write_tangles(outputs: list[TangleOutput], root: Path | None = None) -> list[Path]:
    """Write tangle outputs, relative destinations resolved against ``root``."""
    base = root if root is not None else Path.cwd()
    written: list[Path] = []
    for output in outputs:
        path = Path(output.destination)
        if not path.is_absolute():
            path = base / path
        write_text(path, output.text)
        log.info("wrote %s (%s)", path, output.name)
        written.append(path)
    return written
