"""I/O utilities for documents, tangled files and JSON reports.

JSON goes through orjson; text is always UTF-8.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any

import orjson


def read_text(path: Path) -> str:
    """Read a document as UTF-8, keeping its line terminators untouched."""
    with path.open("r", encoding="utf-8", newline="") as f:
        return f.read()


def write_text(path: Path, text: str) -> None:
    """Write UTF-8 text, creating parent directories as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(text)


def dumps_json(obj: Any, *, pretty: bool = True) -> str:
    """Serialize an object with orjson; key order is left as built."""
    opts = orjson.OPT_INDENT_2 if pretty else 0
    return orjson.dumps(obj, option=opts).decode("utf-8")


def save_json(obj: Any, path: Path, *, pretty: bool = True) -> None:
    """Save an object as JSON with a trailing newline."""
    write_text(path, dumps_json(obj, pretty=pretty) + "\n")
