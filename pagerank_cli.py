#!/usr/bin/env python3

import argparse
import json
import os
import sys
import time
from datetime import datetime, timezone
from typing import List, Optional

from edge_input import describe_source, encode_label, load_edge_stream
from rank_graph import PageRankError, RankGraph, format_ranks, propagation_passes, rank_mass

BUCKET = os.environ.get("BUCKET") or os.environ.get("BUCKET_NAME")
EDGES_OBJECT = os.environ.get("EDGES_OBJECT")


def _precision_default() -> int:
    raw = (os.environ.get("RANK_PRECISION") or "2").strip()
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"RANK_PRECISION must be an integer, got {raw!r}") from None


def _log(event_type: str, **fields):
    payload = {
        "event_type": event_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        **fields,
    }
    sys.stderr.write(json.dumps(payload) + "\n")
    sys.stderr.flush()


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Simplified (non-dampened) PageRank over an edge stream."
    )
    ap.add_argument("--input", default=None, help='Edge file; "-" or omitted reads stdin.')
    ap.add_argument("--bucket", default=BUCKET, help="Read the edge stream from this GCS bucket.")
    ap.add_argument("--object", dest="object_name", default=EDGES_OBJECT, help="Object name inside --bucket.")
    ap.add_argument("--precision", type=int, default=_precision_default(), help="Fractional digits (default 2).")
    ap.add_argument("--stats", action="store_true", help="Log in/out degree statistics.")
    return ap


def run(args: argparse.Namespace) -> List[str]:
    stream = load_edge_stream(args.input, args.bucket, args.object_name)
    _log(
        "input_loaded",
        edges=stream.edge_count,
        iterations=stream.iteration_count,
        source=describe_source(args.input, args.bucket, args.object_name),
    )

    graph = RankGraph.from_edges(stream.edges)
    _log("graph_built", vertices=graph.vertex_count, edges=graph.edge_count)
    if args.stats:
        _log("degree_stats", **graph.degree_stats())

    t0 = time.time()
    ranks = graph.compute_ranks(stream.iteration_count)
    t1 = time.time()
    _log(
        "ranks_computed",
        passes=propagation_passes(stream.iteration_count),
        seconds=round(t1 - t0, 6),
        rank_mass=rank_mass(ranks),
    )

    return format_ranks(ranks, args.precision)


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    if args.precision < 0:
        ap.error(f"--precision must be >= 0, got {args.precision}")

    try:
        lines = run(args)
    except PageRankError as e:
        _log("error", kind=type(e).__name__, message=str(e))
        return 1

    sys.stdout.flush()
    out = sys.stdout.buffer
    for line in lines:
        out.write(encode_label(line) + b"\n")
    out.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())
