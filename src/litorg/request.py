"""Request flags accepted by the include tool.

The request is itself a parameter string::

    :noweb greet helpers :cpp vector :defs common.org :max-depth 5

Flags:
    :cpp NAMES          external references to emit as inclusion lines
    :noweb NAMES        blocks to resolve and weave
    :c-string           weave each top-level block as one C string literal
    :tangle             write every #+tangle target instead of printing
    :defs FILES         extra documents merged into the corpus
    :max-depth N        nested marker expansion ceiling, at most 100
    :debug              debug logging on stderr
    :exit-with-error    exit with a failure status when an error is reported
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from litorg.config import (
    DEFAULT_MAX_WEAVE_DEPTH,
    EXTERNAL_REFS_KEY,
    MAX_WEAVE_DEPTH_LIMIT,
    NESTED_REFS_KEY,
)
from litorg.errors import ConflictingFlags, InvalidFlagValue, MissingFlags
from litorg.parameters import parse_parameters
from litorg.weaver import WeaveOptions

KNOWN_FLAGS: frozenset[str] = frozenset({
    EXTERNAL_REFS_KEY, NESTED_REFS_KEY, "c-string", "tangle", "defs",
    "max-depth", "debug", "exit-with-error",
})

_EXIT_WITH_ERROR_RE = re.compile(r"(?:^|\s):exit-with-error(?:\s|$)")


@dataclass(frozen=True, slots=True)
class Request:
    cpp: tuple[str, ...] = ()
    noweb: tuple[str, ...] = ()
    c_string: bool = False
    tangle: bool = False
    defs: tuple[str, ...] = ()
    max_depth: int = DEFAULT_MAX_WEAVE_DEPTH
    debug: bool = False
    exit_with_error: bool = False
    unknown_flags: tuple[str, ...] = ()

    def weave_options(self) -> WeaveOptions:
        return WeaveOptions(max_depth=self.max_depth, c_string=self.c_string)


def exit_with_error_requested(flags: str) -> bool:
    """Sniff ``:exit-with-error`` without parsing, for errors raised while parsing."""
    return _EXIT_WITH_ERROR_RE.search(flags or "") is not None


def _parse_max_depth(values: tuple[str, ...] | None) -> int:
    if values is None:
        return DEFAULT_MAX_WEAVE_DEPTH
    text = values[0] if len(values) == 1 else ""
    if not (text.isascii() and text.isdigit()) or int(text) > MAX_WEAVE_DEPTH_LIMIT:
        raise InvalidFlagValue(
            f":max-depth expects a single integer between 0 and {MAX_WEAVE_DEPTH_LIMIT}, "
            f"got `{' '.join(values)}`.",
        )
    return int(text)


def parse_request(flags: str) -> Request:
    """Decode and validate the request flags."""
    if not flags or not flags.strip():
        raise MissingFlags("You must provide flags using the noweb syntax.")
    params = parse_parameters(flags)

    cpp = params.get(EXTERNAL_REFS_KEY) or ()
    noweb = params.get(NESTED_REFS_KEY) or ()
    tangle = params.has("tangle")
    if not cpp and not noweb and not tangle:
        raise MissingFlags("At least one of the following flags is required: :cpp, :noweb, :tangle.")

    c_string = params.has("c-string")
    if c_string and cpp:
        raise ConflictingFlags(":c-string is incompatible with :cpp, it should only be used with :noweb.")
    if tangle and (cpp or noweb):
        raise ConflictingFlags(":tangle is incompatible with :cpp and :noweb.")

    return Request(
        cpp=cpp,
        noweb=noweb,
        c_string=c_string,
        tangle=tangle,
        defs=params.get("defs") or (),
        max_depth=_parse_max_depth(params.get("max-depth")),
        debug=params.has("debug"),
        exit_with_error=params.has("exit-with-error"),
        unknown_flags=tuple(key for key in params.keys() if key not in KNOWN_FLAGS),
    )
