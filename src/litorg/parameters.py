"""Noweb-style parameter grammar.

A parameter string is a sequence of ``:key value value ...`` segments::

    :exports none :include iostream vector :minipage

decodes to ``[("exports", ["none"]), ("include", ["iostream", "vector"]),
("minipage", [])]``. Whitespace is the only separator. A colon only opens a
new segment when it follows whitespace or the start of the string, so
``:url http://host`` keeps ``http://host`` as a single value. Repeated keys
accumulate values in declaration order instead of overwriting.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from litorg.errors import MalformedParameterString

_SEGMENT_SPLIT_RE = re.compile(r"(?:^|(?<=\s)):")


@dataclass(frozen=True, slots=True)
class Parameter:
    """One key with its ordered values."""

    key: str
    values: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class ParameterSet:
    """Ordered multi-valued key/value pairs.

    ``get`` returns ``None`` for an absent key and ``()`` for a key declared
    without values, so the two cases stay distinguishable.
    """

    params: tuple[Parameter, ...] = ()

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self.params)

    def __len__(self) -> int:
        return len(self.params)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> tuple[str, ...] | None:
        for param in self.params:
            if param.key == key:
                return param.values
        return None

    def first(self, key: str) -> str | None:
        values = self.get(key)
        if not values:
            return None
        return values[0]

    def keys(self) -> list[str]:
        return [param.key for param in self.params]

    def items(self) -> list[tuple[str, list[str]]]:
        return [(param.key, list(param.values)) for param in self.params]

    def add(self, key: str, values: Iterable[str]) -> ParameterSet:
        """Return a copy with ``values`` appended to ``key``, creating it if needed."""
        new_values = tuple(values)
        merged: list[Parameter] = []
        found = False
        for param in self.params:
            if param.key == key and not found:
                merged.append(Parameter(key, param.values + new_values))
                found = True
            else:
                merged.append(param)
        if not found:
            merged.append(Parameter(key, new_values))
        return ParameterSet(tuple(merged))


def parse_parameters(text: str) -> ParameterSet:
    """Decode a ``:key values...`` string into a ``ParameterSet``.

    Raises ``MalformedParameterString`` when the first non-blank character
    is not a colon.
    """
    stripped = text.strip()
    if not stripped.startswith(":"):
        raise MalformedParameterString(text)

    result = ParameterSet()
    for segment in _SEGMENT_SPLIT_RE.split(stripped[1:]):
        fields = segment.split()
        if not fields:
            continue
        key, *values = fields
        result = result.add(key, values)
    return result


def fuse_parameters(params: ParameterSet) -> str:
    """Render parameters back into their ``:key values`` form."""
    parts: list[str] = []
    for param in params:
        part = ":" + param.key
        if param.values:
            part += " " + " ".join(param.values)
        parts.append(part)
    return " ".join(parts)
