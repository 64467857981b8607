"""Tests for the line corpus."""

from __future__ import annotations

from pathlib import Path

import pytest

from litorg.corpus import corpus_from_texts, load_corpus, split_lines
from litorg.errors import BadFilename


def test_split_lines_keeps_terminators() -> None:
    assert split_lines("a\nb\n") == ["a\n", "b\n"]
    assert split_lines("a\n\nb") == ["a\n", "\n", "b"]
    assert split_lines("page\fbreak\n") == ["page\fbreak\n"]
    assert split_lines("") == []


def test_corpus_concatenates_documents_in_order() -> None:
    corpus = corpus_from_texts([("one.org", "a\nb\n"), ("empty.org", ""), ("two.org", "c\n")])
    assert corpus.lines == ("a\n", "b\n", "c\n")
    assert corpus.text() == "a\nb\nc\n"
    assert [(doc.name, doc.start, doc.end) for doc in corpus.documents] == [
        ("one.org", 0, 2),
        ("empty.org", 2, 2),
        ("two.org", 2, 3),
    ]


def test_locate_maps_indices_to_documents() -> None:
    corpus = corpus_from_texts([("one.org", "a\nb\n"), ("empty.org", ""), ("two.org", "c\n")])
    assert corpus.locate(0) == ("one.org", 1)
    assert corpus.locate(1) == ("one.org", 2)
    assert corpus.locate(2) == ("two.org", 1)
    assert corpus.describe(2) == "two.org:1"
    with pytest.raises(IndexError):
        corpus.locate(3)


def test_load_corpus_reads_files(tmp_path: Path) -> None:
    first = tmp_path / "first.org"
    second = tmp_path / "second.org"
    first.write_text("one\r\n", encoding="utf-8")
    second.write_text("two\n", encoding="utf-8")
    corpus = load_corpus([first, second])
    assert corpus.lines == ("one\r\n", "two\n")


def test_load_corpus_reports_bad_filename(tmp_path: Path) -> None:
    missing = tmp_path / "missing.org"
    with pytest.raises(BadFilename, match="missing.org"):
        load_corpus([missing])
