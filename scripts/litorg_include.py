#!/usr/bin/env python3
"""Resolve and weave code blocks of literate Org documents, or tangle them.

Prints the requested blocks, dependencies first, preceded by one
``#include <...>`` line per external reference::

    python3 scripts/litorg_include.py "README.org cpp.org" ":noweb greet :cpp vector"

With ``:tangle`` every ``#+tangle:<name> <destination>`` target is written
to disk instead and nothing is printed. Errors are printed as a single
``#error "..."`` line so a compiler including the output reports them;
``:exit-with-error`` also makes the process exit with status 23.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from litorg.config import ERROR_EXIT_CODE
from litorg.engine import run
from litorg.errors import LitorgError
from litorg.request import exit_with_error_requested

log = logging.getLogger("litorg.include")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Literate Org block include/tangle tool")
    parser.add_argument("documents", help="Space-separated list of source documents")
    parser.add_argument("flags", help="Request flags, e.g. ':noweb greet :cpp vector'")
    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Base directory for relative tangle destinations (default: cwd)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )

    try:
        result = run(args.documents.split(), args.flags, root=args.root)
    except LitorgError as exc:
        log.debug("%s: %s", exc.kind, exc.message)
        sys.stdout.write(exc.directive_line())
        return ERROR_EXIT_CODE if exit_with_error_requested(args.flags) else 0

    sys.stdout.write(result.stdout)
    for path in result.tangled:
        log.debug("tangled %s", path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
