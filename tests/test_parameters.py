"""Tests for the noweb parameter grammar."""

from __future__ import annotations

import pytest

from litorg.errors import MalformedParameterString
from litorg.parameters import ParameterSet, fuse_parameters, parse_parameters


class TestParseParameters:
    def test_values_split_on_whitespace(self) -> None:
        params = parse_parameters(":lost 4 8 15 16 23 42 :last 108")
        assert params.items() == [
            ("lost", ["4", "8", "15", "16", "23", "42"]),
            ("last", ["108"]),
        ]

    def test_key_without_values(self) -> None:
        params = parse_parameters(":exports none :include iostream vector :minipage")
        assert params.items() == [
            ("exports", ["none"]),
            ("include", ["iostream", "vector"]),
            ("minipage", []),
        ]
        assert params.get("minipage") == ()
        assert params.has("minipage")

    def test_consecutive_keys_without_values(self) -> None:
        params = parse_parameters(":tangle :debug")
        assert params.items() == [("tangle", []), ("debug", [])]

    def test_repeated_keys_accumulate_in_order(self) -> None:
        params = parse_parameters(":noweb a :cpp x :noweb b c")
        assert params.items() == [("noweb", ["a", "b", "c"]), ("cpp", ["x"])]

    def test_colon_inside_value_is_kept(self) -> None:
        params = parse_parameters(":url http://host:8080/x :mode a:b")
        assert params.items() == [("url", ["http://host:8080/x"]), ("mode", ["a:b"])]

    def test_extra_whitespace_is_ignored(self) -> None:
        params = parse_parameters("   :a   1\t2   :b  ")
        assert params.items() == [("a", ["1", "2"]), ("b", [])]

    def test_lone_colon_is_empty(self) -> None:
        assert len(parse_parameters(":")) == 0

    def test_missing_leading_colon_is_an_error(self) -> None:
        with pytest.raises(MalformedParameterString, match="does not start with"):
            parse_parameters("noweb a b")

    def test_empty_string_is_an_error(self) -> None:
        with pytest.raises(MalformedParameterString):
            parse_parameters("")

    def test_parsing_is_deterministic(self) -> None:
        text = ":noweb a b :cpp x"
        assert parse_parameters(text) == parse_parameters(text)


class TestParameterSet:
    def test_absent_key_differs_from_empty_values(self) -> None:
        params = ParameterSet().add("empty", []).add("blank", [""])
        assert params.get("missing") is None
        assert params.get("empty") == ()
        assert params.get("blank") == ("",)
        assert params.first("empty") is None
        assert params.first("blank") == ""

    def test_add_returns_a_new_set(self) -> None:
        base = ParameterSet()
        extended = base.add("k", ["v"])
        assert len(base) == 0
        assert extended.keys() == ["k"]

    def test_fuse_renders_parsed_parameters(self) -> None:
        params = parse_parameters(":a 1 2 :b :c x")
        assert fuse_parameters(params) == ":a 1 2 :b :c x"
        assert parse_parameters(fuse_parameters(params)) == params
