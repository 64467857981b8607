"""Error kinds raised by the litorg pipeline.

Every error is fail-fast: the first one detected aborts the run. The
include script renders it as a single ``#error "..."`` line so that a
downstream C/C++ compiler reports it as a line-level error marker.
"""

from __future__ import annotations


class LitorgError(RuntimeError):
    """Base class for every diagnostic the engine reports."""

    kind = "LitorgError"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def directive_line(self) -> str:
        """Render the error as a compiler-visible ``#error`` line."""
        escaped = self.message.replace("\\", "\\\\").replace('"', '\\"')
        return f'#error "{escaped}"\n'


class MalformedParameterString(LitorgError):
    """Raised when a parameter string does not start with ``:``."""

    kind = "MalformedParameterString"

    def __init__(self, text: str) -> None:
        super().__init__(f"Parameters string `{text}` does not start with `:`.")
        self.text = text


class DuplicateDeclaration(LitorgError):
    """Raised when a block name, dependency record or tangle target is declared twice."""

    kind = "DuplicateDeclaration"

    def __init__(self, what: str, name: str, *, location: str = "") -> None:
        where = f" ({location})" if location else ""
        super().__init__(f"Duplicated {what} `{name}`{where}.")
        self.what = what
        self.name = name


class UnknownBlockName(LitorgError):
    """Raised when a requested or referenced name has no body and no dependency record."""

    kind = "UnknownBlockName"

    def __init__(self, name: str, known: list[str] | tuple[str, ...] = ()) -> None:
        listing = ", ".join(f"`{item}`" for item in known)
        super().__init__(f"Cannot find code block named `{name}`, I only know of [{listing}].")
        self.name = name


class DepthExceeded(LitorgError):
    """Raised when resolution or weaving recurses past its ceiling."""

    kind = "DepthExceeded"

    def __init__(self, stage: str, max_depth: int, name: str) -> None:
        super().__init__(
            f"Maximum {stage} depth reached ({max_depth}) while expanding `{name}`. "
            "Check for recursive noweb inclusions or increase :max-depth.",
        )
        self.stage = stage
        self.max_depth = max_depth
        self.name = name


class ConflictingFlags(LitorgError):
    """Raised when mutually exclusive request flags are combined."""

    kind = "ConflictingFlags"


class MissingFlags(LitorgError):
    """Raised when a request names nothing to include or tangle."""

    kind = "MissingFlags"


class InvalidFlagValue(LitorgError):
    """Raised when a request flag carries a value it cannot accept."""

    kind = "InvalidFlagValue"


class BadFilename(LitorgError):
    """Raised when an input document cannot be opened."""

    kind = "BadFilename"

    def __init__(self, filename: str) -> None:
        super().__init__(f"Bad filename ({filename}).")
        self.filename = filename


class UnparsableLine(LitorgError):
    """Raised when no parsing rule accepts a line."""

    kind = "UnparsableLine"

    def __init__(self, index: int, line: str) -> None:
        super().__init__(f"Could not parse line {index}: `{line.rstrip()}`.")
        self.index = index
        self.line = line
