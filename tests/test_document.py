"""Tests for the Org document parser and fuser."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from litorg.corpus import split_lines
from litorg.document import (
    ORG_LANGUAGE,
    ORG_RULES,
    LineView,
    element_repr,
    element_to_dict,
    fuse_elements,
    language_for_path,
    parse_begin_src,
    parse_lines,
    trailing_take,
)
from litorg.errors import UnparsableLine
from litorg.types import CodeBlock, GenericBlock, Metadata, Prose, Section, Whitespace


_SAMPLE = (
    "#+title: Demo\n"
    "* Intro\n"
    "Some prose.\n"
    "\n"
    "More prose.\n"
    "\n"
    "#+name: greet\n"
    "#+begin_src cpp :noweb yes\n"
    'print("hi")\n'
    "#+end_src\n"
    "#+begin_quote\n"
    "Quoted.\n"
    "#+end_quote\n"
    "** Sub\n"
    "text"
)


class TestParseLines:
    def test_element_sequence(self) -> None:
        elements = parse_lines(split_lines(_SAMPLE))
        assert [type(element) for element in elements] == [
            Metadata,
            Section,
            Prose,
            Whitespace,
            Metadata,
            CodeBlock,
            GenericBlock,
            Section,
            Prose,
        ]
        assert [element.start for element in elements] == [0, 1, 2, 5, 6, 7, 10, 13, 14]

    def test_element_fields(self) -> None:
        elements = parse_lines(split_lines(_SAMPLE))
        title, intro, prose, _, name, code, quote, sub, _ = elements
        assert isinstance(title, Metadata)
        assert (title.name, title.raw_value) == ("title", "Demo")
        assert isinstance(intro, Section)
        assert (intro.level, intro.title) == (1, "Intro")
        assert isinstance(prose, Prose)
        assert prose.lines == ("Some prose.\n", "\n", "More prose.\n")
        assert isinstance(name, Metadata)
        assert (name.name, name.raw_value) == ("name", "greet")
        assert isinstance(code, CodeBlock)
        assert code.language == "cpp"
        assert code.parameters.items() == [("noweb", ["yes"])]
        assert code.lines == ('print("hi")\n',)
        assert isinstance(quote, GenericBlock)
        assert (quote.kind, quote.lines) == ("quote", ("Quoted.\n",))
        assert isinstance(sub, Section)
        assert sub.level == 2

    def test_prose_leaves_trailing_blank_lines_to_next_element(self) -> None:
        elements = parse_lines(["para\n", "\n", "\n", "* Next\n"])
        assert [type(element) for element in elements] == [Prose, Whitespace, Section]
        assert elements[0].lines == ("para\n",)
        assert elements[1].lines == ("\n", "\n")

    def test_prose_stops_before_metadata(self) -> None:
        elements = parse_lines(["para\n", "#+name: x\n"])
        assert [type(element) for element in elements] == [Prose, Metadata]

    def test_unterminated_source_block_is_metadata(self) -> None:
        elements = parse_lines(["#+begin_src cpp\n", "x\n"])
        assert [type(element) for element in elements] == [Metadata, Prose]
        assert elements[0].name == "begin_src cpp"

    def test_star_without_title_is_prose(self) -> None:
        elements = parse_lines(["* \n", "*bold*\n"])
        assert [type(element) for element in elements] == [Prose]

    def test_offset_shifts_start_indices(self) -> None:
        elements = parse_lines(["* A\n", "b\n"], offset=10)
        assert [element.start for element in elements] == [10, 11]

    def test_no_matching_rule_is_an_error(self) -> None:
        with pytest.raises(UnparsableLine, match="hello") as excinfo:
            parse_lines(["* A\n", "hello\n"], ORG_RULES[:1], offset=5)
        assert excinfo.value.index == 6


class TestFuse:
    @pytest.mark.parametrize(
        "text",
        [
            _SAMPLE,
            "",
            "\n\n\n",
            "only prose\nand more",
            "#+begin_src sh\necho\n",
            "* A\n\n\n#+begin_example\nx\n#+end_example\n\n",
            "  #+name: indented\n  #+begin_src cpp\n  x\n  #+end_src\n",
        ],
    )
    def test_round_trip(self, text: str) -> None:
        lines = split_lines(text)
        assert fuse_elements(parse_lines(lines)) == lines

    def test_language_parse_and_fuse(self) -> None:
        lines = split_lines(_SAMPLE)
        assert ORG_LANGUAGE.fuse(ORG_LANGUAGE.parse(lines)) == lines


class TestHelpers:
    def test_parse_begin_src_skips_switches(self) -> None:
        language, params = parse_begin_src("#+begin_src cpp -n :noweb-ref all :noweb no\n")
        assert language == "cpp"
        assert params.items() == [("noweb-ref", ["all"]), ("noweb", ["no"])]

    def test_parse_begin_src_without_parameters(self) -> None:
        language, params = parse_begin_src("#+BEGIN_SRC python\n")
        assert language == "python"
        assert len(params) == 0

    def test_trailing_take(self) -> None:
        take = trailing_take(lambda line: line == "", lambda line: line.startswith("x"))
        assert take(["x", "", "x", "", "y"]) == 3
        assert take(["", "", "y"]) == 0

    def test_element_repr(self) -> None:
        code = parse_lines(split_lines(_SAMPLE))[5]
        assert element_repr(code) == ["lang=cpp", "Params=:noweb yes", 'print("hi")']

    def test_element_to_dict(self) -> None:
        code = parse_lines(split_lines(_SAMPLE))[5]
        assert element_to_dict(code) == {
            "type": "CodeBlock",
            "start": 7,
            "line_count": 3,
            "language": "cpp",
            "parameters": [("noweb", ["yes"])],
        }

    def test_language_for_path(self) -> None:
        assert language_for_path("notes.org") is ORG_LANGUAGE
        assert language_for_path("notes.txt") is ORG_LANGUAGE


class TestLineView:
    def test_window_indexing(self) -> None:
        view = LineView(["a\n", "b\n", "c\n", "d\n"], 1)
        assert len(view) == 3
        assert view[0] == "b\n"
        assert view[-1] == "d\n"
        assert view[1:-1] == ["c\n"]
        assert list(view) == ["b\n", "c\n", "d\n"]
        with pytest.raises(IndexError):
            view[3]

    def test_window_past_the_end_is_empty(self) -> None:
        assert len(LineView(["a\n"], 1)) == 0
        assert list(LineView(["a\n"], 1)) == []

    def test_long_document_round_trip(self) -> None:
        block = "* Part\ntext\n\n#+name: x\n#+begin_src sh\necho\n#+end_src\n"
        lines = split_lines(block * 5000)
        elements = parse_lines(lines)
        assert len(elements) == 5 * 5000
        assert fuse_elements(elements) == lines
