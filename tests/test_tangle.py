"""Tests for tangle mode."""

from __future__ import annotations

from pathlib import Path

import pytest

from litorg.corpus import corpus_from_texts
from litorg.errors import UnknownBlockName
from litorg.graph_builder import build_block_graph
from litorg.graph_types import BlockGraph
from litorg.tangle import TangleOutput, tangle, weave_target, write_tangles


_DOC = (
    "#+tangle:lib out/lib.cpp\n"
    "#+tangle:app out/app.cpp\n"
    "#+depends:lib :cpp vector :noweb shared\n"
    "#+depends:app :noweb shared\n"
    "#+name: shared\n#+begin_src cpp\nshared();\n#+end_src\n"
    "#+name: lib\n#+begin_src cpp\nlib();\n#+end_src\n"
    "#+name: app\n#+begin_src cpp\napp();\n#+end_src\n"
)


def _graph(text: str = _DOC) -> BlockGraph:
    return build_block_graph(corpus_from_texts([("doc.org", text)]))


def test_targets_are_woven_in_isolation() -> None:
    outputs = tangle(_graph())
    assert outputs == [
        TangleOutput(name="lib", destination="out/lib.cpp", text="shared();\nlib();\n"),
        TangleOutput(name="app", destination="out/app.cpp", text="shared();\napp();\n"),
    ]


def test_tangled_text_has_no_inclusion_lines() -> None:
    assert "#include" not in weave_target(_graph(), "lib")


def test_unknown_target() -> None:
    graph = _graph("#+tangle:ghost out.cpp\n")
    with pytest.raises(UnknownBlockName, match="`ghost`"):
        tangle(graph)


def test_write_tangles_creates_directories(tmp_path: Path) -> None:
    written = write_tangles(tangle(_graph()), tmp_path)
    assert written == [tmp_path / "out" / "lib.cpp", tmp_path / "out" / "app.cpp"]
    assert (tmp_path / "out" / "lib.cpp").read_text(encoding="utf-8") == "shared();\nlib();\n"


def test_write_tangles_keeps_absolute_destinations(tmp_path: Path) -> None:
    target = tmp_path / "abs" / "x.cpp"
    output = TangleOutput(name="x", destination=str(target), text="x\n")
    assert write_tangles([output], tmp_path / "elsewhere") == [target]
    assert target.read_text(encoding="utf-8") == "x\n"
