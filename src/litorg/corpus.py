"""Line corpus: the immutable concatenation of every input document.

All positions used by the parser, the graph builder and the weaver are
0-based indices into ``LineCorpus.lines``. Lines keep their terminators so
woven output reproduces the source byte for byte.
"""

from __future__ import annotations

import bisect
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from litorg.errors import BadFilename
from litorg.io_utils import read_text


@dataclass(frozen=True, slots=True)
class DocumentSource:
    """Corpus range ``[start, end)`` occupied by one input document."""

    name: str
    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0:
            raise ValueError(f"start must be >= 0, got {self.start}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start, got {self.end} < {self.start}")


@dataclass(frozen=True, slots=True)
class LineCorpus:
    lines: tuple[str, ...]
    documents: tuple[DocumentSource, ...] = ()

    def __len__(self) -> int:
        return len(self.lines)

    def __getitem__(self, index: int) -> str:
        return self.lines[index]

    def text(self) -> str:
        return "".join(self.lines)

    def locate(self, index: int) -> tuple[str, int]:
        """Map a corpus index to ``(document name, 1-based line number)``."""
        if not 0 <= index < len(self.lines):
            raise IndexError(f"corpus index out of range: {index}")
        starts = [doc.start for doc in self.documents]
        # Empty documents share their start with the next one; bisect_right
        # lands on the last of them, which is the one holding the line.
        pos = bisect.bisect_right(starts, index) - 1
        if pos < 0 or self.documents[pos].end <= index:
            return "<corpus>", index + 1
        doc = self.documents[pos]
        return doc.name, index - doc.start + 1

    def describe(self, index: int) -> str:
        name, line_no = self.locate(index)
        return f"{name}:{line_no}"


def split_lines(text: str) -> list[str]:
    """Split on newlines only, keeping terminators; form feeds stay inside lines."""
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def corpus_from_texts(documents: Iterable[tuple[str, str]]) -> LineCorpus:
    """Build a corpus from ``(name, text)`` pairs, in order."""
    lines: list[str] = []
    sources: list[DocumentSource] = []
    for name, text in documents:
        start = len(lines)
        lines.extend(split_lines(text))
        sources.append(DocumentSource(name=name, start=start, end=len(lines)))
    return LineCorpus(lines=tuple(lines), documents=tuple(sources))


def read_documents(paths: Iterable[str | Path]) -> list[tuple[str, str]]:
    """Read every path as UTF-8 into ``(name, text)`` pairs.

    Raises ``BadFilename`` on the first path that cannot be read.
    """
    documents: list[tuple[str, str]] = []
    for path in paths:
        try:
            text = read_text(Path(path))
        except (OSError, UnicodeDecodeError) as exc:
            raise BadFilename(str(path)) from exc
        documents.append((str(path), text))
    return documents


def load_corpus(paths: Iterable[str | Path]) -> LineCorpus:
    """Read and concatenate every path, in order."""
    return corpus_from_texts(read_documents(paths))
