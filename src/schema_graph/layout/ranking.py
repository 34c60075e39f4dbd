from __future__ import annotations

import heapq

from ..errors import LayoutError
from .graph_adapter import LayoutGraph


def assign_ranks(lg: LayoutGraph, oriented: list[tuple[str, str]]) -> dict[str, int]:
    """Longest-path ranking over the acyclic (oriented) edges.

    A node's rank is the length of the longest path reaching it, so sources
    of every component sit at rank 0 and each edge points to a higher rank.
    Nodes are settled in topological order, ties going to table-list order.
    """
    successors: dict[str, list[str]] = {nid: [] for nid in lg.order}
    indegree: dict[str, int] = {nid: 0 for nid in lg.order}
    for u, v in oriented:
        successors[u].append(v)
        indegree[v] += 1

    ranks: dict[str, int] = {nid: 0 for nid in lg.order}
    heap = [lg.index[nid] for nid in lg.order if indegree[nid] == 0]
    heapq.heapify(heap)
    settled = 0

    while heap:
        nid = lg.order[heapq.heappop(heap)]
        settled += 1
        for w in successors[nid]:
            if ranks[nid] + 1 > ranks[w]:
                ranks[w] = ranks[nid] + 1
            indegree[w] -= 1
            if indegree[w] == 0:
                heapq.heappush(heap, lg.index[w])

    if settled != len(lg.order):
        raise LayoutError("oriented edges still contain a cycle")
    return ranks
