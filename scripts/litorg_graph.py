#!/usr/bin/env python3
"""Print block graph diagnostics for a set of literate documents."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from litorg.corpus import load_corpus
from litorg.engine import build_graph
from litorg.errors import LitorgError
from litorg.graph_builder import graph_diagnostics_report
from litorg.graph_types import graph_to_dict
from litorg.io_utils import dumps_json, save_json


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Block graph diagnostics")
    parser.add_argument("documents", nargs="+", type=Path)
    parser.add_argument("--report-out", type=Path, default=None, help="Also save the full graph as JSON")
    parser.add_argument("--json", action="store_true", help="Print the full graph instead of the summary")
    args = parser.parse_args(argv)

    try:
        graph = build_graph(load_corpus(args.documents))
    except LitorgError as exc:
        print(dumps_json({"status": "fail", "kind": exc.kind, "message": exc.message}))
        return 1

    if args.report_out is not None:
        save_json(graph_to_dict(graph), args.report_out)
    payload = graph_to_dict(graph) if args.json else graph_diagnostics_report(graph)
    print(dumps_json(payload))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
