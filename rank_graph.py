from collections import OrderedDict
from statistics import median
from typing import Dict, Iterable, List, Tuple

import numpy as np


class PageRankError(Exception):
    pass


class EmptyGraphError(PageRankError):
    pass


QUINTILES = [0, 20, 40, 60, 80, 100]


def summarize_degrees(degrees: Dict[str, int]) -> Dict:
    """
    Summary of a label -> degree mapping:
      count, min, max, avg, median, quintiles (0/20/40/60/80/100 percentiles)
    """
    if not degrees:
        return {"count": 0, "min": 0, "max": 0, "avg": 0.0, "median": 0.0, "quintiles": [0.0] * len(QUINTILES)}
    arr = np.fromiter(degrees.values(), dtype=np.int64, count=len(degrees))
    return {
        "count": int(arr.size),
        "min": int(arr.min()),
        "max": int(arr.max()),
        "avg": float(arr.mean()),
        "median": float(median(arr.tolist())),
        "quintiles": np.percentile(arr.astype(float), QUINTILES).tolist(),
    }


class RankGraph:
    """
    Directed multigraph kept as two indexes over the same vertex set:

      out_degree:   label -> number of edges leaving it
      in_adjacency: label -> sources pointing at it, in insertion order

    Both are only mutated by insert_edge, which keeps their key sets equal.
    """

    def __init__(self) -> None:
        self._out_degree: Dict[str, int] = {}
        self._in_adjacency: Dict[str, List[str]] = {}
        self._edge_count = 0

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[str, str]]) -> "RankGraph":
        graph = cls()
        graph.insert_edges(edges)
        return graph

    def insert_edge(self, source: str, target: str) -> None:
        if not source or not target:
            raise ValueError("edge endpoints must be non-empty labels")

        self._out_degree[source] = self._out_degree.get(source, 0) + 1
        self._in_adjacency.setdefault(target, []).append(source)

        # reciprocal entries so pure sources and pure sinks exist on both sides
        self._out_degree.setdefault(target, 0)
        self._in_adjacency.setdefault(source, [])

        self._edge_count += 1

    def insert_edges(self, edges: Iterable[Tuple[str, str]]) -> None:
        for source, target in edges:
            self.insert_edge(source, target)

    @property
    def vertex_count(self) -> int:
        return len(self._in_adjacency)

    @property
    def edge_count(self) -> int:
        return self._edge_count

    def vertices(self) -> List[str]:
        return sorted(self._in_adjacency)

    def out_degree(self, label: str) -> int:
        return self._out_degree[label]

    def in_sources(self, label: str) -> Tuple[str, ...]:
        return tuple(self._in_adjacency[label])

    def degree_stats(self) -> Dict[str, Dict]:
        return {
            "in": summarize_degrees({v: len(srcs) for v, srcs in self._in_adjacency.items()}),
            "out": summarize_degrees(self._out_degree),
        }

    def compute_ranks(self, iteration_count: int) -> "OrderedDict[str, np.float32]":
        """
        Simplified PageRank without damping or teleportation.

        Ranks start at 1/|V|. Asking for N iterations runs N - 1 propagation
        passes, so N = 0 and N = 1 both return the starting vector. Each pass
        computes

          next[v] = sum over s in In(v) of (1 / out_degree[s]) * current[s]

        in float32, reading only the previous pass.
        """
        if iteration_count < 0:
            raise ValueError(f"iteration_count must be >= 0, got {iteration_count}")

        n = self.vertex_count
        if n == 0:
            raise EmptyGraphError("cannot rank a graph with no vertices")

        labels = self.vertices()
        index = {label: i for i, label in enumerate(labels)}

        # per vertex: source indexes and 1/out_degree weights, one entry per edge
        sources: List[np.ndarray] = []
        weights: List[np.ndarray] = []
        for label in labels:
            srcs = self._in_adjacency[label]
            sources.append(np.array([index[s] for s in srcs], dtype=np.intp))
            weights.append(np.array(
                [np.float32(1.0) / np.float32(self._out_degree[s]) for s in srcs],
                dtype=np.float32,
            ))

        current = np.full(n, np.float32(1.0) / np.float32(n), dtype=np.float32)
        nxt = np.zeros(n, dtype=np.float32)

        for _ in range(1, iteration_count):
            for v in range(n):
                if sources[v].size == 0:
                    nxt[v] = 0
                    continue
                # accumulate sums left to right in insertion order; np.sum is pairwise
                nxt[v] = np.add.accumulate(weights[v] * current[sources[v]], dtype=np.float32)[-1]
            current, nxt = nxt, current

        return OrderedDict((label, current[i]) for i, label in enumerate(labels))


def propagation_passes(iteration_count: int) -> int:
    return max(iteration_count - 1, 0)


def rank_mass(ranks: Dict[str, float]) -> float:
    return float(sum(float(r) for r in ranks.values()))


def format_ranks(ranks: Dict[str, float], precision: int = 2) -> List[str]:
    if precision < 0:
        raise ValueError(f"precision must be >= 0, got {precision}")
    return [f"{label} {float(ranks[label]):.{precision}f}" for label in sorted(ranks)]
