#!/usr/bin/env python3
"""Parse a literate document and fuse it back, or dump its elements.

Without options the fused document is printed; it must be identical to the
input. ``--dump`` prints a short rendering of every element and ``--json``
the element list as JSON.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from litorg.corpus import load_corpus
from litorg.document import element_repr, element_to_dict, language_for_path
from litorg.errors import LitorgError
from litorg.io_utils import dumps_json


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Parse/fuse round trip for literate documents")
    parser.add_argument("filename", type=Path)
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--dump", action="store_true", help="Print one entry per element")
    mode.add_argument("--json", action="store_true", help="Print elements as JSON")
    args = parser.parse_args(argv)

    language = language_for_path(args.filename)
    try:
        corpus = load_corpus([args.filename])
        elements = language.parse(corpus.lines)
    except LitorgError as exc:
        print(exc.message, file=sys.stderr)
        return 1

    if args.json:
        print(dumps_json([element_to_dict(element) for element in elements]))
    elif args.dump:
        for element in elements:
            print(f"{type(element).__name__} {{")
            for token in element_repr(element):
                print(f"    ^{token}$")
            print("}")
    else:
        sys.stdout.write("".join(language.fuse(elements)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
