from __future__ import annotations

from dataclasses import dataclass, field
from typing import Hashable

from .graph_adapter import LayoutGraph
from .positioning import stack_rank

# ============================================================================
# Crossing reduction
#
# Edges spanning several ranks are split into unit segments through virtual
# nodes so every segment joins adjacent ranks. Ranks are then reordered by
# alternating barycenter sweeps: downward (rank 1 onward, using the rank
# above as reference) and upward (using the rank below). The barycenter is
# taken over the neighbours' vertical centers as produced by stack_rank, so
# tall tables weigh in with their real extent.
#
# The ordering with the fewest crossings seen across all sweeps is kept.
# ============================================================================


@dataclass(frozen=True)
class VirtualNode:
    """Placeholder for a long edge passing through an intermediate rank."""

    edge: int
    rank: int


Key = Hashable


@dataclass
class _RankedGraph:
    layers: list[list[Key]]
    # Neighbours in the rank above / below, with multiplicity
    up: dict[Key, list[Key]] = field(default_factory=dict)
    down: dict[Key, list[Key]] = field(default_factory=dict)
    tie: dict[Key, tuple[int, int]] = field(default_factory=dict)
    height: dict[Key, float] = field(default_factory=dict)


def order_ranks(
    lg: LayoutGraph,
    ranks: dict[str, int],
    oriented: list[tuple[str, str]],
    node_spacing: float,
    max_iterations: int,
) -> list[list[str]]:
    """Order the nodes of each rank; returns real node ids per rank."""
    if not lg.order:
        return []

    rg = _expand(lg, ranks, oriented)
    layers = rg.layers
    best = [list(layer) for layer in layers]
    best_crossings = _count_all_crossings(layers, rg.down)

    unchanged_sweeps = 0
    for iteration in range(max_iterations):
        if best_crossings == 0 or unchanged_sweeps >= 2:
            break
        downward = iteration % 2 == 0
        if downward:
            sweep = [(r, r - 1, rg.up) for r in range(1, len(layers))]
        else:
            sweep = [(r, r + 1, rg.down) for r in range(len(layers) - 2, -1, -1)]

        changed = False
        for r, ref, neighbours in sweep:
            centers = _centers(layers[ref], rg.height, node_spacing)
            reordered = _reorder(layers[r], neighbours, centers, rg.tie)
            if reordered != layers[r]:
                layers[r] = reordered
                changed = True

        unchanged_sweeps = 0 if changed else unchanged_sweeps + 1
        crossings = _count_all_crossings(layers, rg.down)
        if crossings < best_crossings:
            best = [list(layer) for layer in layers]
            best_crossings = crossings

    return [[k for k in layer if not isinstance(k, VirtualNode)] for layer in best]


def count_crossings(
    upper: list[Key],
    lower: list[Key],
    down: dict[Key, list[Key]],
) -> int:
    """Number of segment crossings between two adjacent ranks."""
    lower_pos = {k: i for i, k in enumerate(lower)}
    segments = [
        (i, lower_pos[w])
        for i, k in enumerate(upper)
        for w in down.get(k, [])
        if w in lower_pos
    ]
    crossings = 0
    for a in range(len(segments)):
        ua, la = segments[a]
        for b in range(a + 1, len(segments)):
            ub, lb = segments[b]
            if (ua - ub) * (la - lb) < 0:
                crossings += 1
    return crossings


def _count_all_crossings(layers: list[list[Key]], down: dict[Key, list[Key]]) -> int:
    return sum(
        count_crossings(layers[r], layers[r + 1], down)
        for r in range(len(layers) - 1)
    )


def _expand(
    lg: LayoutGraph,
    ranks: dict[str, int],
    oriented: list[tuple[str, str]],
) -> _RankedGraph:
    component_of: dict[str, int] = {}
    for ci, component in enumerate(lg.components):
        for nid in component:
            component_of[nid] = ci

    depth = max(ranks.values()) + 1
    members: list[list[tuple[tuple, Key]]] = [[] for _ in range(depth)]
    rg = _RankedGraph(layers=[])

    for nid in lg.order:
        rg.tie[nid] = (lg.index[nid], 0)
        rg.height[nid] = lg.view(nid).h
        members[ranks[nid]].append(((component_of[nid],) + rg.tie[nid], nid))
        rg.up[nid] = []
        rg.down[nid] = []

    for ei, (u, v) in enumerate(oriented):
        chain: list[Key] = [u]
        for r in range(ranks[u] + 1, ranks[v]):
            vn = VirtualNode(edge=ei, rank=r)
            rg.tie[vn] = (lg.index[u], ei + 1)
            rg.height[vn] = 0.0
            rg.up[vn] = []
            rg.down[vn] = []
            members[r].append(((component_of[u],) + rg.tie[vn], vn))
            chain.append(vn)
        chain.append(v)
        for a, b in zip(chain, chain[1:]):
            rg.down[a].append(b)
            rg.up[b].append(a)

    rg.layers = [[k for _, k in sorted(m, key=lambda t: t[0])] for m in members]
    return rg


def _centers(layer: list[Key], height: dict[Key, float], node_spacing: float) -> dict[Key, float]:
    heights = [height[k] for k in layer]
    offsets = stack_rank(heights, node_spacing)
    return {k: top + h / 2 for k, top, h in zip(layer, offsets, heights)}


def _reorder(
    layer: list[Key],
    neighbours: dict[Key, list[Key]],
    centers: dict[Key, float],
    tie: dict[Key, tuple[int, int]],
) -> list[Key]:
    """Sort a rank by barycenter; nodes without neighbours keep their slot."""
    movable: list[tuple[float, tuple[int, int], Key]] = []
    fixed_slots: set[int] = set()
    for i, k in enumerate(layer):
        refs = [centers[w] for w in neighbours.get(k, []) if w in centers]
        if not refs:
            fixed_slots.add(i)
            continue
        movable.append((sum(refs) / len(refs), tie[k], k))

    movable.sort(key=lambda t: (t[0], t[1]))
    result = list(layer)
    it = iter(movable)
    for i in range(len(layer)):
        if i not in fixed_slots:
            result[i] = next(it)[2]
    return result
